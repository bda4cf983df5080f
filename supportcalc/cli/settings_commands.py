"""Settings CLI commands for Support Calc.

Manages settings.json - default guideline and user guidelines directory.
"""

import click
from pathlib import Path

from supportcalc.sdk import (
    ConfigError,
    DEFAULT_GUIDELINE,
    GuidelineError,
    clear_setting,
    find_guideline_path,
    get_setting,
    get_settings_path,
    load_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - guideline: default guideline schedule name
    - guidelines_dir: extra directory searched for guideline YAML files
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    try:
        current = load_settings()
    except ConfigError as e:
        raise click.ClickException(str(e))

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
        click.echo(f"  guideline: {DEFAULT_GUIDELINE} (default)")
        return

    click.echo("Current settings:")
    for key, value in current.items():
        click.echo(f"  {key}: {value}")


@settings.command("guideline")
@click.argument("name", required=False)
@click.option("--clear", is_flag=True, help="Clear the setting, revert to default")
def settings_guideline(name, clear):
    """Set or clear the default guideline schedule.

    Examples:
        support-calc settings guideline florida-61.30
        support-calc settings guideline --clear
    """
    try:
        if clear:
            if clear_setting("guideline"):
                click.echo(f"Cleared guideline setting. Default is now: {DEFAULT_GUIDELINE}")
            else:
                click.echo("guideline was not set.")
            return

        if not name:
            click.echo(f"Current guideline: {get_setting('guideline') or DEFAULT_GUIDELINE}")
            return

        find_guideline_path(name)
        set_setting("guideline", name)
    except (GuidelineError, ConfigError) as e:
        raise click.ClickException(str(e))

    click.echo(f"Set guideline: {name}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("guidelines-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom guidelines_dir")
def settings_guidelines_dir(path, clear):
    """Set or clear the directory searched for guideline YAML files.

    Files there take precedence over the bundled guidelines with the
    same name.
    """
    try:
        if clear:
            if clear_setting("guidelines_dir"):
                click.echo("Cleared guidelines_dir setting.")
            else:
                click.echo("guidelines_dir was not set.")
            return

        if not path:
            current = get_setting("guidelines_dir")
            if current:
                click.echo(f"Current guidelines_dir: {current}")
            else:
                click.echo("No custom guidelines_dir set. Using bundled guidelines only.")
            return

        dir_path = Path(path).expanduser().resolve()
        if not dir_path.is_dir():
            raise click.ClickException(f"Not a directory: {dir_path}")

        set_setting("guidelines_dir", str(dir_path))
    except ConfigError as e:
        raise click.ClickException(str(e))

    click.echo(f"Set guidelines_dir: {dir_path}")
    click.echo(f"Saved to: {get_settings_path()}")
