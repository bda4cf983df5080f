"""Rich renderer for child support worksheets.

Transforms SDK worksheet results into formatted Rich tables.
"""

import csv
import io
from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from supportcalc.sdk import GuidelineSchedule, WorksheetLine


def render_worksheet(console: Console, result, warnings: Optional[list] = None) -> None:
    """Render a worksheet result as Rich tables.

    Args:
        console: Rich Console instance
        result: StandardWorksheet or SharedParentingWorksheet
        warnings: Input parsing warnings shown before the lookup warnings
    """
    for warning in list(warnings or []) + list(result.warnings):
        console.print(Panel(
            f"[yellow]{warning}[/yellow]",
            title="Note",
            border_style="yellow"
        ))

    table = Table(
        title=f"Child Support Guidelines Worksheet ({result.guideline})",
        box=box.ROUNDED,
    )
    table.add_column("", style="bold", min_width=40)
    table.add_column("Petitioner", justify="right", min_width=12)
    table.add_column("Respondent", justify="right", min_width=12)
    table.add_column("Total", justify="right", min_width=12)

    for line in result.lines():
        if line.number == "10":
            table.add_section()
            table.add_row("[bold]SUBSTANTIAL SHARED PARENTING (GROSS UP)[/bold]", "", "", "")
        if line.number == "21":
            table.add_section()
            table.add_row(
                f"[bold green]{line.number}. {line.label}[/bold green]",
                "",
                "",
                f"[bold green]{_fmt(line.total)}[/bold green]",
            )
            continue
        table.add_row(f"{line.number}. {line.label}", *_cells(line))

    console.print(table)
    console.print(f"[dim]Basic obligation: {_describe_lookup(result.obligation)}[/dim]")

    if not result.is_shared_parenting:
        console.print(
            "[dim]Neither parent has 20% of overnights; "
            "shared parenting lines do not apply.[/dim]"
        )


def render_schedule(console: Console, schedule: GuidelineSchedule,
                    child_count: Optional[int] = None) -> None:
    """Render the guideline schedule, optionally a single child-count column."""
    title = schedule.title or schedule.name
    table = Table(title=f"{title} ({schedule.statute})" if schedule.statute else title,
                  box=box.SIMPLE)
    table.add_column("Combined Income", justify="right")

    columns = [child_count] if child_count else list(range(1, 7))
    for children in columns:
        table.add_column(f"{children} Child" + ("ren" if children > 1 else ""), justify="right")

    for band, row in zip(schedule.bands, schedule.rows):
        table.add_row(_fmt(band), *(_fmt(row[c - 1]) for c in columns))

    console.print(table)

    rates = ", ".join(
        f"{children}: {_pct(rate)}"
        for children, rate in sorted(schedule.excess_percentages.items())
        if children in columns
    )
    console.print(f"Above {_fmt(schedule.max_band)}: add {rates or 'n/a'} of the excess")


def worksheet_to_csv(result) -> str:
    """Worksheet lines as CSV text (unformatted numbers)."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["line", "label", "petitioner", "respondent", "total"])
    for line in result.lines():
        writer.writerow([
            line.number,
            line.label,
            "" if line.petitioner is None else f"{line.petitioner:.6f}",
            "" if line.respondent is None else f"{line.respondent:.6f}",
            "" if line.total is None else f"{line.total:.6f}",
        ])
    return output.getvalue()


def _cells(line: WorksheetLine) -> list:
    fmt = _pct if line.percent else _fmt
    return [
        "" if line.petitioner is None else fmt(line.petitioner),
        "" if line.respondent is None else fmt(line.respondent),
        "" if line.total is None else fmt(line.total),
    ]


def _describe_lookup(lookup) -> str:
    if lookup.method == "exact":
        return f"exact schedule match at {_fmt(lookup.lower_band)}"
    if lookup.method == "interpolated":
        return f"interpolated between {_fmt(lookup.lower_band)} and {_fmt(lookup.upper_band)}"
    if lookup.method == "below_schedule":
        return f"below schedule; lowest band {_fmt(lookup.upper_band)} used"
    if lookup.method == "extrapolated":
        return f"top band {_fmt(lookup.lower_band)} plus {_pct(lookup.excess_rate)} of the excess"
    if lookup.method == "top_band":
        return f"top band {_fmt(lookup.lower_band)} (no excess percentage)"
    if lookup.method == "invalid_income":
        return "not computed (income is not a finite number)"
    return "not computed (unsupported number of children)"


def _fmt(amount: float | None) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def _pct(value: float | None) -> str:
    """Format a fraction as a percentage."""
    if value is None:
        return "-"
    return f"{value * 100:.2f}%"
