"""Vest Calc CLI - Command-line interface for vesting tax projections."""

import click

from vestcalc import __version__

from .assumptions_commands import assumptions as assumptions_group
from .grants_commands import grants as grants_group
from .profile_commands import profile as profile_group
from .projection_commands import projection as projection_command
from .settings_commands import settings as settings_group
from .state_commands import state as state_group


@click.group()
@click.version_option(version=__version__, prog_name="vest-calc")
def cli():
    """Vest Calc - Tax exposure of vesting equity grants.

    Models grants that vest yearly, repriced at a one-time conversion
    event and compounding in value afterwards. Every change is saved
    and picked up by the next command.

    Configuration is loaded from (in order):

    \b
    1. VEST_CALC_CONFIG_PATH environment variable
    2. ~/.config/vest-calc/ (XDG default)

    Run 'vest-calc projection' to see the per-year tax table.
    """
    pass


cli.add_command(grants_group)
cli.add_command(assumptions_group)
cli.add_command(projection_command)
cli.add_command(state_group)
cli.add_command(settings_group)
cli.add_command(profile_group)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
