"""Settings CLI commands for Vest Calc.

Manages settings.json: where the durable state lives and which
profile.yaml supplies defaults.
"""

from pathlib import Path

import click

from vestcalc.sdk import (
    get_data_path,
    get_profile_path,
    get_settings_path,
    load_settings,
    save_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - data_dir: directory for the durable copy of the session state
    - profile: path to a profile.yaml outside the config directory
    """
    pass


@settings.command("show")
def settings_show():
    """Show settings and the paths they resolve to."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path} ({'exists' if settings_path.exists() else 'not created'})")
    if current:
        for key, value in current.items():
            click.echo(f"  {key}: {value}")
    else:
        click.echo("  (no settings; using defaults)")

    click.echo()
    click.echo("Effective paths:")
    click.echo(f"  data_dir: {get_data_path()}")
    click.echo(f"  profile:  {get_profile_path()}")


def _clear_setting(key: str) -> bool:
    current = load_settings()
    if key not in current:
        return False
    del current[key]
    save_settings(current)
    return True


def _ensure_writable_dir(path: Path) -> None:
    """Create ``path`` if needed and confirm files can be written there."""
    if path.exists() and not path.is_dir():
        raise click.ClickException(f"Path exists but is not a directory: {path}")

    try:
        path.mkdir(parents=True, exist_ok=True)
        marker = path / ".write_test"
        marker.touch()
        marker.unlink()
    except OSError as e:
        raise click.ClickException(f"Directory is not writable: {path}\n{e}")


@settings.command("data-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Revert to the default data directory.")
def settings_data_dir(path, clear):
    """Show, set or clear the data directory.

    \b
    Examples:
        vest-calc settings data-dir
        vest-calc settings data-dir ~/Documents/vest-calc
        vest-calc settings data-dir --clear
    """
    if clear:
        if _clear_setting("data_dir"):
            click.echo(f"Cleared data_dir. Data directory is now: {get_data_path()}")
        else:
            click.echo("data_dir was not set.")
        return

    if not path:
        click.echo(f"Data directory: {get_data_path()}")
        return

    data_path = Path(path).expanduser().resolve()
    _ensure_writable_dir(data_path)
    set_setting("data_dir", str(data_path))
    click.echo(f"Set data_dir: {data_path}")


@settings.command("profile")
@click.argument("path", required=False, type=click.Path(dir_okay=False))
@click.option("--clear", is_flag=True, help="Use profile.yaml in the config directory.")
def settings_profile(path, clear):
    """Show, set or clear the profile.yaml location."""
    if clear:
        if _clear_setting("profile"):
            click.echo(f"Cleared profile. Using: {get_profile_path()}")
        else:
            click.echo("profile was not set.")
        return

    if not path:
        click.echo(f"Profile: {get_profile_path()}")
        return

    profile_path = Path(path).expanduser().resolve()
    set_setting("profile", str(profile_path))
    click.echo(f"Set profile: {profile_path}")
    if not profile_path.exists():
        click.secho("Note: file does not exist yet. Create it with: vest-calc profile init", fg="yellow")
