"""Guideline schedule CLI commands for Support Calc.

Looks up basic obligations and inspects or validates guideline files.
"""

import json

import click
from rich.console import Console

from supportcalc.sdk import (
    ConfigError,
    GuidelineError,
    find_guideline_path,
    get_default_guideline,
    list_guidelines,
    load_guideline,
    validate_guideline,
)

from .renderers.worksheet_renderer import render_schedule


@click.group()
def schedule():
    """Guideline schedule lookups and validation.

    \b
    Commands:
      lookup    Basic monthly obligation for an income and child count
      show      Print the schedule table
      list      List available guidelines
      validate  Check a guideline file's schedule invariants
    """
    pass


@schedule.command("lookup")
@click.argument("combined_income", type=float)
@click.argument("children", type=int)
@click.option("--guideline", "-g", type=str, default=None,
              help="Guideline name or YAML path (default: settings 'guideline')")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def schedule_lookup(combined_income, children, guideline, output_json):
    """Basic monthly obligation for COMBINED_INCOME and CHILDREN.

    \b
    Examples:
      support-calc schedule lookup 13540.91 2
      support-calc schedule lookup 3025 1 --json
    """
    try:
        sched = load_guideline(guideline)
    except GuidelineError as e:
        raise click.ClickException(str(e))

    lookup = sched.lookup(combined_income, children)

    if output_json:
        payload = {"guideline": sched.name, "combined_income": combined_income,
                   "children": children, **lookup.model_dump()}
        click.echo(json.dumps(payload, indent=2))
        return

    for warning in lookup.warnings:
        click.echo(click.style(f"Warning: {warning}", fg="yellow"), err=True)
    click.echo(f"Guideline:         {sched.name}")
    click.echo(f"Combined income:   ${combined_income:,.2f}")
    click.echo(f"Children:          {children}")
    click.echo(f"Basic obligation:  ${lookup.amount:,.2f}")
    click.echo(f"Method:            {lookup.method.replace('_', ' ')}")
    if lookup.lower_band is not None or lookup.upper_band is not None:
        bands = [f"${b:,}" for b in (lookup.lower_band, lookup.upper_band) if b is not None]
        click.echo(f"Bands:             {' - '.join(bands)}")
    if lookup.excess_rate is not None:
        click.echo(f"Excess rate:       {lookup.excess_rate * 100:g}%")


@schedule.command("show")
@click.option("--guideline", "-g", type=str, default=None,
              help="Guideline name or YAML path (default: settings 'guideline')")
@click.option("--children", "-c", type=click.IntRange(1, 6), default=None,
              help="Only show the column for this many children")
def schedule_show(guideline, children):
    """Print the guideline schedule table."""
    try:
        sched = load_guideline(guideline)
    except GuidelineError as e:
        raise click.ClickException(str(e))

    render_schedule(Console(width=120), sched, children)


@schedule.command("list")
def schedule_list():
    """List available guideline schedules."""
    try:
        default = get_default_guideline()
        names = list_guidelines()
    except (GuidelineError, ConfigError) as e:
        raise click.ClickException(str(e))
    if not names:
        click.echo("No guideline files found.")
        return
    for name in names:
        marker = " (default)" if name == default else ""
        click.echo(f"{name}{marker}  {find_guideline_path(name)}")


@schedule.command("validate")
@click.argument("name", required=False)
def schedule_validate(name):
    """Check a guideline file's schedule invariants.

    Verifies that income bands strictly increase, every band has six
    non-negative amounts, and amounts never decrease with income or
    with the number of children.

    NAME defaults to the configured guideline.
    """
    try:
        path = find_guideline_path(name or get_default_guideline())
        problems = validate_guideline(name)
    except (GuidelineError, ConfigError) as e:
        raise click.ClickException(str(e))

    if problems:
        click.echo(f"{path}: {len(problems)} problem(s)")
        for problem in problems:
            click.echo(click.style(f"  {problem}", fg="red"))
        raise SystemExit(1)

    click.echo(click.style(f"{path}: OK", fg="green"))
