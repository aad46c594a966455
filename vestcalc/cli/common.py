"""Shared CLI helpers."""

import click
import yaml

from vestcalc.sdk import ProfileValidationError, Session, load_profile_defaults


def open_session() -> Session:
    """Open the saved session with profile defaults.

    Raises:
        click.ClickException: If profile.yaml is unreadable or invalid
    """
    try:
        defaults = load_profile_defaults()
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in profile: {e}")
    except ProfileValidationError as e:
        raise click.ClickException(str(e))
    return Session.open(defaults=defaults)
