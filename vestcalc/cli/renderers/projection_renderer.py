"""Rich renderers for grants, assumptions and projections.

Transforms SDK objects into formatted Rich tables.
"""

from typing import List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vestcalc.sdk.assumptions import AssumptionModel
from vestcalc.sdk.schemas import Grant, ProjectionSummary


def render_grants(console: Console, grants: List[Grant]) -> None:
    """Render the grant list as a table."""
    table = Table(title="Grants", box=box.ROUNDED)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Label")
    table.add_column("Shares", justify="right")
    table.add_column("Start")
    table.add_column("Years", justify="right")

    for index, grant in enumerate(grants):
        label = grant.display_name(index)
        if not grant.title.strip():
            label = f"[dim]{label}[/dim]"
        table.add_row(
            str(grant.id),
            label,
            f"{grant.shares:,}",
            grant.start.isoformat(),
            str(grant.years),
        )

    console.print(table)


def render_assumptions(console: Console, model: AssumptionModel) -> None:
    """Render assumption values with the FMV lock status."""
    values = model.values
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")

    fmv_note = "[magenta]pinned[/magenta]" if model.fmv_locked else "[dim]derived[/dim]"
    table.add_row("Total shares outstanding", f"{values.total_shares_outstanding:,}")
    table.add_row("Post-money valuation", _fmt(values.post_money_valuation))
    table.add_row("FMV per share", f"{_fmt(values.fmv)}  {fmv_note}")
    table.add_row("Conversion date", values.conversion_date.isoformat())
    table.add_row("Tax rate", f"{values.tax_rate:g}%")
    table.add_row("Growth per year", f"{values.growth_rate:g}%")

    console.print(Panel(table, title="Assumptions", border_style="dim"))


def render_projection(console: Console, summary: ProjectionSummary, model: AssumptionModel) -> None:
    """Render the per-year projection table with totals and the 83(b) line."""
    values = model.values
    console.print(
        f"Conversion: {values.conversion_date.strftime('%b %d, %Y')} at "
        f"{_fmt(values.fmv)}/share, growing {values.growth_rate:g}%/yr, taxed at {values.tax_rate:g}%"
    )

    table = Table(title="Without 83(b) election", box=box.ROUNDED)
    table.add_column("Tax year", style="bold")
    table.add_column("Shares vested", justify="right")
    table.add_column("Avg FMV", justify="right")
    table.add_column("Taxable income", justify="right")
    table.add_column("Tax", justify="right")

    if summary.rows:
        for row in summary.rows:
            table.add_row(
                f"Taxes for {row.year}",
                f"{row.shares:,}",
                _fmt(row.avg_fmv),
                _fmt(row.income),
                _fmt(row.tax),
            )
        table.add_section()
        table.add_row(
            "[bold]TOTAL[/bold]", "", "",
            f"[bold]{_fmt(summary.total_income)}[/bold]",
            f"[bold]{_fmt(summary.total_tax)}[/bold]",
        )
    else:
        table.add_row(f"[dim]{summary.empty_message}[/dim]", "", "", "", "")

    console.print(table)

    election = summary.election_83b
    if election.total_shares:
        console.print(
            f"With 83(b) election: {election.total_shares:,} shares, "
            f"[green]{_fmt(election.tax)}[/green] tax at grant"
        )
    else:
        console.print("With 83(b) election: -")


def _fmt(amount: float | None) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    return f"${amount:,.2f}"
