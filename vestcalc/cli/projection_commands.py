"""Projection CLI command."""

import json

import click
from rich.console import Console

from .common import open_session
from .renderers.projection_renderer import render_projection


@click.command("projection")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def projection(as_json):
    """Show taxable income and tax per year.

    Vests on or before the conversion date are taxed in the conversion
    year at the conversion FMV; later years compound the growth rate.
    """
    session = open_session()
    summary = session.summary()

    if as_json:
        output = summary.model_dump(mode="json")
        output["buckets"] = {
            str(year): bucket.model_dump(mode="json") for year, bucket in session.buckets.items()
        }
        click.echo(json.dumps(output, indent=2))
        return

    render_projection(Console(), summary, session.assumptions)
