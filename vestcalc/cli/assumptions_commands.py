"""Assumption CLI commands."""

import json

import click
from rich.console import Console

from vestcalc.sdk.commands import UnlockFmv, assumption_command

from .common import open_session
from .renderers.projection_renderer import render_assumptions

FIELD_CHOICES = ["total-shares", "post-money", "fmv", "conversion-date", "tax-rate", "growth-rate"]


@click.group("assumptions")
def assumptions():
    """View and edit projection assumptions.

    FMV is derived as post-money / total shares until it is set
    explicitly; a set FMV stays pinned until 'assumptions unlock-fmv'.
    """
    pass


@assumptions.command("show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def assumptions_show(as_json):
    """Show current assumptions."""
    session = open_session()

    if as_json:
        payload = session.payload()
        output = dict(payload["assumptions"], fmvLocked=payload["meta"]["fmvLocked"])
        click.echo(json.dumps(output, indent=2))
        return

    render_assumptions(Console(), session.assumptions)


@assumptions.command("set")
@click.argument("field", type=click.Choice(FIELD_CHOICES))
@click.argument("value")
def assumptions_set(field, value):
    """Set assumption FIELD to VALUE.

    \b
    Fields:
      total-shares     shares outstanding (whole number >= 1)
      post-money       post-money valuation in dollars
      fmv              per-share FMV (pins it)
      conversion-date  YYYY-MM-DD
      tax-rate         flat rate in percent (0-100)
      growth-rate      annual FMV growth in percent (-100 to 500)
    """
    session = open_session()

    if session.update_assumptions(assumption_command(field, value)):
        click.echo(f"Updated {field}")
    else:
        click.echo(f"{field} unchanged")

    render_assumptions(Console(), session.assumptions)


@assumptions.command("unlock-fmv")
def assumptions_unlock_fmv():
    """Re-derive FMV from valuation and share count."""
    session = open_session()
    session.update_assumptions(UnlockFmv())
    click.echo(f"FMV derived: ${session.assumptions.values.fmv:,.2f}")


@assumptions.command("reset")
def assumptions_reset():
    """Restore default assumptions."""
    session = open_session()
    session.reset_assumptions()
    click.echo("Assumptions reset to defaults.")
