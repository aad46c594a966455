"""Tests for the assumption model and FMV derivation/locking."""

from datetime import date

import pytest

from vestcalc.sdk.assumptions import AssumptionModel, derive_fmv
from vestcalc.sdk.commands import (
    SetConversionDate,
    SetFmv,
    SetGrowthRate,
    SetPostMoney,
    SetShares,
    SetTaxRate,
    SetTotalShares,
    UnlockFmv,
    assumption_command,
)
from vestcalc.sdk.schemas import Assumptions


class TestDeriveFmv:

    def test_valuation_over_shares(self):
        assert derive_fmv(100_000_000, 10_000_000) == 10.0
        assert derive_fmv("250000000", 10_000_000) == 25.0

    @pytest.mark.parametrize("post_money,total_shares", [
        (1_000, 0),
        (1_000, -5),
        ("abc", 5),
        (1_000, None),
        (float("inf"), 10),
    ])
    def test_unusable_inputs_give_none(self, post_money, total_shares):
        assert derive_fmv(post_money, total_shares) is None


class TestAssumptionModel:

    def test_defaults(self):
        model = AssumptionModel()

        assert model.values == Assumptions()
        assert model.values.fmv == 10.0
        assert model.values.conversion_date == date(2025, 12, 1)
        assert model.fmv_locked is False

    def test_total_shares_rederives_fmv(self):
        model = AssumptionModel()

        assert model.apply(SetTotalShares("20000000")) is True
        assert model.values.total_shares_outstanding == 20_000_000
        assert model.values.fmv == 5.0

    def test_post_money_rederives_fmv(self):
        model = AssumptionModel()

        assert model.apply(SetPostMoney("250000000")) is True
        assert model.values.fmv == 25.0

    def test_explicit_fmv_locks_it(self):
        model = AssumptionModel()

        assert model.apply(SetFmv("12")) is True
        assert model.fmv_locked is True

        assert model.apply(SetTotalShares(20_000_000)) is True
        assert model.values.fmv == 12.0

    def test_setting_same_fmv_still_reports_lock_change(self):
        """Pinning the current derived value changes the lock flag."""
        model = AssumptionModel()

        assert model.apply(SetFmv(10)) is True
        assert model.apply(SetFmv(10)) is False

    def test_unlock_rederives(self):
        model = AssumptionModel()
        model.apply(SetFmv(12))
        model.apply(SetPostMoney(50_000_000))

        assert model.apply(UnlockFmv()) is True
        assert model.fmv_locked is False
        assert model.values.fmv == 5.0

    def test_unlock_when_already_derived_is_noop(self):
        model = AssumptionModel()

        assert model.apply(UnlockFmv()) is False

    @pytest.mark.parametrize("command", [
        SetTaxRate(""),
        SetTaxRate("abc"),
        SetGrowthRate(None),
        SetTotalShares("  "),
        SetPostMoney("n/a"),
        SetFmv(""),
        SetConversionDate(""),
        SetConversionDate(None),
    ])
    def test_blank_or_non_numeric_edits_are_ignored(self, command):
        model = AssumptionModel()
        before = model.values.model_copy()

        assert model.apply(command) is False
        assert model.values == before
        assert model.fmv_locked is False

    def test_values_are_clamped(self):
        model = AssumptionModel()

        model.apply(SetTaxRate(250))
        model.apply(SetGrowthRate(-400))

        assert model.values.tax_rate == 100.0
        assert model.values.growth_rate == -100.0

    def test_unchanged_value_reports_false(self):
        model = AssumptionModel()

        assert model.apply(SetTaxRate(42)) is False

    def test_conversion_date(self):
        model = AssumptionModel()

        assert model.apply(SetConversionDate("2026-03-01")) is True
        assert model.values.conversion_date == date(2026, 3, 1)

        # Unparseable dates fall back to the default conversion date
        assert model.apply(SetConversionDate("next spring")) is True
        assert model.values.conversion_date == date(2025, 12, 1)

    def test_reset_restores_defaults_and_unlocks(self):
        model = AssumptionModel()
        model.apply(SetTaxRate(10))
        model.apply(SetFmv(99))

        model.reset()

        assert model.values == Assumptions()
        assert model.fmv_locked is False

    def test_reset_uses_custom_defaults(self):
        defaults = Assumptions(tax_rate=30, post_money_valuation=20_000_000, fmv=2.0)
        model = AssumptionModel(defaults=defaults)
        model.apply(SetTaxRate(5))

        model.reset()

        assert model.values.tax_rate == 30.0
        assert model.values.fmv == 2.0

    def test_values_are_copied(self):
        values = Assumptions()
        model = AssumptionModel(values=values)

        model.apply(SetTaxRate(1))

        assert values.tax_rate == 42.0

    def test_grant_command_is_rejected(self):
        with pytest.raises(TypeError):
            AssumptionModel().apply(SetShares(5))


class TestAssumptionCommandLookup:

    def test_cli_and_payload_spellings(self):
        assert assumption_command("tax-rate", "5") == SetTaxRate("5")
        assert assumption_command("taxRate", "5") == SetTaxRate("5")
        assert assumption_command("fmv", 3) == SetFmv(3)

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown assumption field"):
            assumption_command("discount", 1)
