"""Configuration management for Vest Calc.

Configuration is split into two files:

1. settings.json - Machine-specific settings
   - data_dir: custom location for the durable state file
   - profile: path to profile.yaml (optional, if not colocated)

2. profile.yaml - User's modeling defaults
   - assumptions: company share count, valuation, conversion date, rates
   - default_grant: template for newly added grants

Config directory resolution:
1. VEST_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/vest-calc/ (XDG_CONFIG_HOME fallback)

Cache and data paths follow the XDG base directory layout:
- Cache: XDG_CACHE_HOME/vest-calc/ or ~/.cache/vest-calc/
- Data: settings.json data_dir, else XDG_DATA_HOME/vest-calc/ or ~/.local/share/vest-calc/
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .assumptions import derive_fmv
from .schemas import Assumptions, Defaults, GrantFields, Profile


APP_NAME = "vest-calc"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"

PROFILE_TEMPLATE = {
    "assumptions": {
        "total_shares": 10_000_000,
        "post_money": 100_000_000,
        "conversion_date": "2025-12-01",
        "tax_rate": 42,
        "growth_rate": 35,
    },
    "default_grant": {
        "shares": 70000,
        "start": "2024-01-01",
        "years": 7,
    },
}


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


class ProfileValidationError(Exception):
    """Raised when profile.yaml does not match the profile schema."""

    def __init__(self, path: Path, error: ValidationError):
        self.path = path
        self.error = error
        super().__init__(f"Invalid profile {path}:\n{error}")


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. VEST_CALC_CONFIG_PATH environment variable
    2. ~/.config/vest-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("VEST_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    custom_profile = load_settings().get("profile")
    profile_path = Path(custom_profile) if custom_profile else get_config_dir() / PROFILE_FILENAME

    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found at {profile_path}\n\n"
            f"Create one with: vest-calc profile init"
        )

    return profile_path


def load_profile(require_exists: bool = False) -> dict:
    """Load the user profile from profile.yaml.

    Returns:
        Profile dictionary (empty dict if not required and not found)

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save the user profile to profile.yaml.

    Returns:
        Path to the saved profile file
    """
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def load_profile_defaults() -> Defaults:
    """Built-in defaults overlaid with any values from profile.yaml.

    Overridden values pass through the usual field sanitizers; FMV is
    derived from the (possibly overridden) valuation and share count.

    Raises:
        ProfileValidationError: If profile.yaml has unknown keys or bad types
    """
    raw = load_profile(require_exists=False)
    try:
        profile = Profile.model_validate(raw)
    except ValidationError as e:
        raise ProfileValidationError(get_profile_path(), e) from e

    assumptions = Assumptions()
    if profile.assumptions:
        overrides = profile.assumptions
        field_map = {
            "total_shares_outstanding": overrides.total_shares,
            "post_money_valuation": overrides.post_money,
            "conversion_date": overrides.conversion_date,
            "tax_rate": overrides.tax_rate,
            "growth_rate": overrides.growth_rate,
        }
        values = assumptions.model_dump()
        values.update({k: v for k, v in field_map.items() if v is not None})
        assumptions = Assumptions(**values)
        derived = derive_fmv(assumptions.post_money_valuation, assumptions.total_shares_outstanding)
        if derived is not None:
            assumptions.fmv = derived

    grant = GrantFields()
    if profile.default_grant:
        values = grant.model_dump()
        values.update(profile.default_grant.model_dump(exclude_none=True))
        grant = GrantFields(**values)

    return Defaults(assumptions=assumptions, grant=grant)


# =============================================================================
# XDG path helpers
# =============================================================================

def get_cache_path() -> Path:
    """Get the cache directory path (XDG_CACHE_HOME/vest-calc/).

    Returns:
        Path to the cache directory (created if doesn't exist)
    """
    xdg_cache_home = os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache")
    cache_path = Path(xdg_cache_home) / APP_NAME
    cache_path.mkdir(parents=True, exist_ok=True)
    return cache_path


def get_data_path() -> Path:
    """Get the data directory path.

    Uses settings.json "data_dir" when set, else XDG_DATA_HOME/vest-calc/.

    Returns:
        Path to the data directory (created if doesn't exist)
    """
    custom_data_dir = get_setting("data_dir")
    if custom_data_dir:
        data_path = Path(custom_data_dir).expanduser()
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        data_path = Path(xdg_data_home) / APP_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path
