"""Assumption model: global projection parameters and FMV derivation.

FMV is derived as post-money valuation / total shares outstanding until the
user pins it with an explicit value. A pinned FMV survives later edits to
share count or valuation; ``UnlockFmv`` releases it and re-derives.
"""

from typing import Any, Optional

from .commands import (
    AssumptionCommand,
    SetConversionDate,
    SetFmv,
    SetGrowthRate,
    SetPostMoney,
    SetTaxRate,
    SetTotalShares,
    UnlockFmv,
)
from .sanitize import (
    sanitize_conversion_date,
    sanitize_fmv,
    sanitize_growth_rate,
    sanitize_post_money,
    sanitize_tax_rate,
    sanitize_total_shares,
    to_number,
)
from .schemas import Assumptions


def derive_fmv(post_money: Any, total_shares: Any) -> Optional[float]:
    """Per-share FMV implied by a valuation.

    Returns:
        post_money / total_shares, or None when total_shares is not a
        positive number or either input is not finite
    """
    post = to_number(post_money)
    shares = to_number(total_shares)
    if post is None or shares is None or shares <= 0:
        return None
    return post / shares


class AssumptionModel:
    """Holds the session's assumptions and the FMV lock flag."""

    def __init__(
        self,
        values: Optional[Assumptions] = None,
        fmv_locked: bool = False,
        defaults: Optional[Assumptions] = None,
    ):
        """
        Args:
            values: Current assumptions (copied); defaults when omitted
            fmv_locked: Whether the FMV was pinned by the user
            defaults: Values restored by reset(); built-in defaults when omitted
        """
        self.defaults = defaults if defaults is not None else Assumptions()
        self.values = (values if values is not None else self.defaults).model_copy()
        self.fmv_locked = fmv_locked

    def apply(self, command: AssumptionCommand) -> bool:
        """Apply one field edit.

        Numeric edits whose raw value is blank or non-numeric are ignored;
        parseable values are clamped into range.

        Returns:
            True if any stored value (or the FMV lock) changed
        """
        if isinstance(command, UnlockFmv):
            was_locked = self.fmv_locked
            old_fmv = self.values.fmv
            self.fmv_locked = False
            self.rederive_fmv()
            return was_locked or self.values.fmv != old_fmv

        if isinstance(command, SetConversionDate):
            if not command.value:
                return False
            return self._set("conversion_date", sanitize_conversion_date(command.value))

        if not isinstance(command, (SetTotalShares, SetPostMoney, SetFmv, SetTaxRate, SetGrowthRate)):
            raise TypeError(f"Unsupported assumption command: {command!r}")

        numeric = to_number(command.value)
        if numeric is None:
            return False

        if isinstance(command, SetTotalShares):
            return self._set_valuation_input("total_shares_outstanding", sanitize_total_shares(numeric))
        if isinstance(command, SetPostMoney):
            return self._set_valuation_input("post_money_valuation", sanitize_post_money(numeric))
        if isinstance(command, SetTaxRate):
            return self._set("tax_rate", sanitize_tax_rate(numeric))
        if isinstance(command, SetGrowthRate):
            return self._set("growth_rate", sanitize_growth_rate(numeric))

        # SetFmv pins the value
        new_fmv = sanitize_fmv(numeric)
        changed = new_fmv != self.values.fmv or not self.fmv_locked
        self.values.fmv = new_fmv
        self.fmv_locked = True
        return changed

    def rederive_fmv(self) -> None:
        """Recompute FMV from valuation and share count (ignores the lock)."""
        derived = derive_fmv(self.values.post_money_valuation, self.values.total_shares_outstanding)
        if derived is not None:
            self.values.fmv = derived

    def reset(self) -> None:
        """Restore defaults, unlock, and re-derive FMV."""
        self.values = self.defaults.model_copy()
        self.fmv_locked = False
        self.rederive_fmv()

    def _set(self, field: str, value: Any) -> bool:
        if getattr(self.values, field) == value:
            return False
        setattr(self.values, field, value)
        return True

    def _set_valuation_input(self, field: str, value: Any) -> bool:
        changed = self._set(field, value)
        if not self.fmv_locked:
            old_fmv = self.values.fmv
            self.rederive_fmv()
            changed = changed or self.values.fmv != old_fmv
        return changed
