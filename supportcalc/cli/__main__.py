"""Support Calc CLI - Command-line interface for child support worksheets."""

import json
import logging
from pathlib import Path

import click
from rich.console import Console

from supportcalc import __version__
from supportcalc.sdk import (
    EXAMPLE_INPUT,
    GuidelineError,
    ScenarioError,
    build_inputs,
    evaluate,
    load_guideline,
    read_scenario,
)

from .renderers.worksheet_renderer import render_worksheet, worksheet_to_csv
from .schedule_commands import schedule as schedule_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="support-calc")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose):
    """Support Calc - Child support guidelines worksheet calculator.

    Computes the basic monthly obligation from the guideline schedule
    and the full worksheet, including the substantial shared parenting
    (gross-up) method when either parent has at least 20% of overnights.

    Settings are loaded from (in order):

    \b
    1. SUPPORT_CALC_CONFIG_PATH environment variable
    2. ~/.config/support-calc/settings.json (XDG default)
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


cli.add_command(schedule_group)
cli.add_command(settings_group)


# Option name -> WorksheetInput field. Values are taken as raw text and
# parsed leniently, the same way the worksheet form reads them.
WORKSHEET_OPTIONS = [
    ("--petitioner-income", "petitioner_net_income", "Petitioner present net monthly income"),
    ("--respondent-income", "respondent_net_income", "Respondent present net monthly income"),
    ("--children", "child_count", "Number of minor children (1-6)"),
    ("--childcare", "childcare_costs", "100% of monthly child care costs"),
    ("--health-insurance", "health_insurance_costs", "Total monthly children's health insurance cost"),
    ("--noncovered-medical", "noncovered_medical_costs",
     "Monthly noncovered medical, dental and prescription costs"),
    ("--petitioner-childcare-paid", "petitioner_childcare_paid",
     "Monthly childcare payments actually made by petitioner"),
    ("--respondent-childcare-paid", "respondent_childcare_paid",
     "Monthly childcare payments actually made by respondent"),
    ("--petitioner-insurance-paid", "petitioner_health_insurance_paid",
     "Monthly health insurance payments actually made by petitioner"),
    ("--respondent-insurance-paid", "respondent_health_insurance_paid",
     "Monthly health insurance payments actually made by respondent"),
    ("--petitioner-other-paid", "petitioner_other_paid", "Other payments/credits made by petitioner"),
    ("--respondent-other-paid", "respondent_other_paid", "Other payments/credits made by respondent"),
    ("--petitioner-overnights", "petitioner_overnights", "Annual overnight stays with petitioner"),
    ("--respondent-overnights", "respondent_overnights", "Annual overnight stays with respondent"),
]


def _worksheet_options(func):
    for flag, field_name, help_text in reversed(WORKSHEET_OPTIONS):
        func = click.option(flag, field_name, type=str, default=None, help=help_text)(func)
    return func


@cli.command("worksheet")
@_worksheet_options
@click.option("--scenario", "-s", type=click.Path(exists=True, dir_okay=False),
              help="YAML scenario file with worksheet inputs")
@click.option("--example", is_flag=True, help="Start from the worksheet form's example values")
@click.option("--guideline", "-g", type=str, default=None,
              help="Guideline name or YAML path (default: settings 'guideline')")
@click.option("--format", "output_format", type=click.Choice(["text", "json", "csv"]), default="text",
              help="Output format (default: text)")
def worksheet(scenario, example, guideline, output_format, **fields):
    """Calculate the child support guidelines worksheet.

    Inputs come from, in increasing precedence: --example values, a
    --scenario file, then individual options. Blank or unparseable
    values count as 0 and are reported as notes.

    \b
    Examples:
      support-calc worksheet --example
      support-calc worksheet -s case.yaml --format json
      support-calc worksheet --petitioner-income 4000 --respondent-income 2500 \\
          --children 1 --respondent-overnights 100
    """
    raw = dict(EXAMPLE_INPUT) if example else {}

    if scenario:
        try:
            raw.update(read_scenario(Path(scenario)))
        except ScenarioError as e:
            raise click.ClickException(str(e))

    raw.update({name: value for name, value in fields.items() if value is not None})

    inputs, warnings = build_inputs(raw)

    try:
        schedule = load_guideline(guideline)
    except GuidelineError as e:
        raise click.ClickException(str(e))

    result = evaluate(inputs, schedule)

    if output_format == "json":
        payload = result.model_dump(mode="json")
        payload["warnings"] = warnings + payload["warnings"]
        click.echo(json.dumps(payload, indent=2))
    elif output_format == "csv":
        click.echo(worksheet_to_csv(result), nl=False)
        for warning in warnings + result.warnings:
            click.echo(f"Note: {warning}", err=True)
    else:
        render_worksheet(Console(width=120), result, warnings)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
