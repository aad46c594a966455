"""Grant CLI commands."""

import json

import click
from rich.console import Console

from vestcalc.sdk.commands import GRANT_FIELDS, grant_command

from .common import open_session
from .renderers.projection_renderer import render_grants


@click.group("grants")
def grants():
    """Manage equity grants.

    Each grant vests in equal yearly tranches starting one year after its
    start date; any remainder vests with the final tranche.

    \b
    Examples:
      vest-calc grants add --shares 70000 --start 2024-01-01 --years 7
      vest-calc grants set 2 title "Refresh 2025"
      vest-calc grants remove 2
    """
    pass


@grants.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def grants_list(as_json):
    """List grants in the current session."""
    session = open_session()

    if as_json:
        click.echo(json.dumps(session.payload()["grants"], indent=2))
        return

    if not session.grants:
        click.echo("No grants. Add one with: vest-calc grants add")
        return

    render_grants(Console(), session.grants)


@grants.command("add")
@click.option("--shares", type=str, help="Total shares granted (default from profile).")
@click.option("--start", type=str, help="Grant start date (YYYY-MM-DD).")
@click.option("--years", type=str, help="Vesting duration in years (1-100).")
@click.option("--title", type=str, help="Optional label (max 60 characters).")
def grants_add(shares, start, years, title):
    """Add a grant. Out-of-range values are clamped."""
    session = open_session()
    grant = session.add_grant(shares=shares, start=start, years=years, title=title)

    click.echo(
        f"Added grant {grant.id}: {grant.shares:,} shares from {grant.start.isoformat()} "
        f"over {grant.years} year(s)"
    )


@grants.command("remove")
@click.argument("grant_id", type=int)
def grants_remove(grant_id):
    """Remove grant GRANT_ID.

    Removing the last grant resets all assumptions to their defaults.
    """
    session = open_session()

    if not session.remove_grant(grant_id):
        raise click.ClickException(f"No grant with id {grant_id}")

    click.echo(f"Removed grant {grant_id}")
    if not session.grants:
        click.secho("No grants left; assumptions reset to defaults.", fg="yellow")


@grants.command("set")
@click.argument("grant_id", type=int)
@click.argument("field", type=click.Choice(list(GRANT_FIELDS)))
@click.argument("value")
def grants_set(grant_id, field, value):
    """Set FIELD of grant GRANT_ID to VALUE.

    \b
    Fields:
      shares  total shares (whole number >= 1)
      start   start date (YYYY-MM-DD)
      years   vesting years (1-100)
      title   display label
    """
    session = open_session()

    if session.state.grants.get(grant_id) is None:
        raise click.ClickException(f"No grant with id {grant_id}")

    if session.update_grant(grant_id, grant_command(field, value)):
        grant = session.state.grants.get(grant_id)
        stored = getattr(grant, field)
        click.echo(f"Grant {grant_id} {field} = {stored}")
    else:
        click.echo(f"Grant {grant_id} {field} unchanged")
