"""Saved-state CLI commands."""

import json
from pathlib import Path

import click

from vestcalc.sdk import StateStore, deserialize

from .common import open_session


@click.group("state")
def state():
    """Inspect, export, import or clear the saved session.

    State is saved after every change to two places: a session file in
    the cache directory (expires after a year) and a durable copy in the
    data directory. The session file is read first.
    """
    pass


@state.command("show")
def state_show():
    """Print the current state payload as JSON."""
    session = open_session()
    click.echo(json.dumps(session.payload(), indent=2))


@state.command("export")
@click.argument("path", type=click.Path(dir_okay=False))
def state_export(path):
    """Write the current state payload to PATH."""
    session = open_session()
    dest = Path(path).expanduser()
    with open(dest, "w") as f:
        json.dump(session.payload(), f, indent=2)
    click.echo(f"Exported {len(session.grants)} grant(s) to {dest}")


@state.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def state_import(path):
    """Replace the session with a payload from PATH.

    Older payload versions (per-grant rates, a 'global' block) are migrated.
    """
    session = open_session()

    with open(path) as f:
        text = f.read()

    saved = deserialize(text, session.defaults.assumptions, session.defaults.grant)
    if saved is None:
        raise click.ClickException(f"Not a valid state file (missing grants list): {path}")

    session.load_state(saved)
    click.echo(f"Imported {len(saved.grants)} grant(s) from {path}")


@state.command("clear")
def state_clear():
    """Delete saved state. The next command starts from defaults."""
    StateStore().clear()
    click.echo("Saved state cleared.")
