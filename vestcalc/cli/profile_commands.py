"""Profile CLI commands for Vest Calc.

Manages profile.yaml - default assumptions and the default grant.
"""

import click
import yaml

from vestcalc.sdk import (
    ProfileValidationError,
    get_profile_path,
    load_profile_defaults,
    save_profile,
)
from vestcalc.sdk.config import PROFILE_TEMPLATE


@click.group()
def profile():
    """Manage modeling defaults (profile.yaml).

    \b
    Example profile.yaml:
      assumptions:
        total_shares: 10000000
        post_money: 100000000
        conversion_date: 2025-12-01
        tax_rate: 42
        growth_rate: 35
      default_grant:
        shares: 70000
        start: 2024-01-01
        years: 7
    """
    pass


@profile.command("show")
def profile_show():
    """Show the profile location and the defaults it produces."""
    path = get_profile_path()
    click.echo(f"Profile: {path} ({'exists' if path.exists() else 'not found, using built-in defaults'})")

    try:
        defaults = load_profile_defaults()
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {path}: {e}")
    except ProfileValidationError as e:
        raise click.ClickException(str(e))

    values = defaults.assumptions
    grant = defaults.grant
    click.echo()
    click.echo("Default assumptions:")
    click.echo(f"  total shares:    {values.total_shares_outstanding:,}")
    click.echo(f"  post-money:      ${values.post_money_valuation:,.2f}")
    click.echo(f"  fmv (derived):   ${values.fmv:,.2f}")
    click.echo(f"  conversion date: {values.conversion_date.isoformat()}")
    click.echo(f"  tax rate:        {values.tax_rate:g}%")
    click.echo(f"  growth rate:     {values.growth_rate:g}%")
    click.echo()
    click.echo("Default grant:")
    click.echo(f"  {grant.shares:,} shares from {grant.start.isoformat()} over {grant.years} year(s)")


@profile.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing profile.")
def profile_init(force):
    """Write a profile.yaml populated with the built-in defaults."""
    path = get_profile_path()
    if path.exists() and not force:
        raise click.ClickException(f"Profile already exists: {path}\nUse --force to overwrite.")

    saved = save_profile(PROFILE_TEMPLATE, path)
    click.echo(f"Wrote {saved}")
