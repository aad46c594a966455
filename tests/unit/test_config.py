"""Tests for settings, profile loading and XDG path resolution."""

from datetime import date

import pytest
import yaml

from vestcalc.sdk.config import (
    PROFILE_TEMPLATE,
    ProfileNotFoundError,
    ProfileValidationError,
    get_config_dir,
    get_data_path,
    get_profile_path,
    get_setting,
    load_profile_defaults,
    save_profile,
    set_setting,
)
from vestcalc.sdk.schemas import Defaults


def _write_profile(isolated_env, profile):
    path = isolated_env["config"] / "profile.yaml"
    path.write_text(yaml.dump(profile))
    return path


class TestPaths:

    def test_config_dir_from_env(self, isolated_env):
        assert get_config_dir() == isolated_env["config"]

    def test_data_path_defaults_to_xdg(self, isolated_env):
        assert get_data_path() == isolated_env["data"] / "vest-calc"

    def test_data_dir_setting(self, isolated_env, tmp_path):
        custom = tmp_path / "elsewhere"
        set_setting("data_dir", str(custom))

        assert get_setting("data_dir") == str(custom)
        assert get_data_path() == custom
        assert custom.is_dir()

    def test_profile_setting(self, isolated_env, tmp_path):
        custom = tmp_path / "shared.yaml"
        set_setting("profile", str(custom))

        assert get_profile_path() == custom

    def test_require_existing_profile(self, isolated_env):
        with pytest.raises(ProfileNotFoundError):
            get_profile_path(require_exists=True)


class TestProfileDefaults:

    def test_no_profile_gives_builtin_defaults(self, isolated_env):
        assert load_profile_defaults() == Defaults()

    def test_template_matches_builtin_defaults(self, isolated_env):
        save_profile(PROFILE_TEMPLATE)

        assert load_profile_defaults() == Defaults()

    def test_overrides(self, isolated_env):
        _write_profile(isolated_env, {
            "assumptions": {"total_shares": 5_000_000, "post_money": 60_000_000, "tax_rate": 37},
            "default_grant": {"shares": 12000, "years": 4, "start": "2023-04-01"},
        })

        defaults = load_profile_defaults()

        assert defaults.assumptions.total_shares_outstanding == 5_000_000
        assert defaults.assumptions.fmv == 12.0
        assert defaults.assumptions.tax_rate == 37.0
        assert defaults.assumptions.growth_rate == 35.0
        assert defaults.grant.shares == 12000
        assert defaults.grant.start == date(2023, 4, 1)

    def test_out_of_range_values_are_clamped(self, isolated_env):
        _write_profile(isolated_env, {"assumptions": {"tax_rate": 140, "growth_rate": -250}})

        defaults = load_profile_defaults()

        assert defaults.assumptions.tax_rate == 100.0
        assert defaults.assumptions.growth_rate == -100.0

    def test_unknown_key_is_rejected(self, isolated_env):
        _write_profile(isolated_env, {"assumptions": {"tax_rat": 30}})

        with pytest.raises(ProfileValidationError, match="tax_rat"):
            load_profile_defaults()
