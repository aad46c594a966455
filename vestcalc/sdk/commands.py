"""Field-update commands for grants and assumptions.

Each edit is a small frozen dataclass carrying the raw value typed or
loaded by the caller. The grant repository and assumption model dispatch
on the command type and run the value through the field's
sanitizer.

The CLI speaks in field names; ``grant_command`` and
``assumption_command`` translate those into commands.
"""

from dataclasses import dataclass
from typing import Any, Union


# Grant field commands

@dataclass(frozen=True)
class SetShares:
    value: Any


@dataclass(frozen=True)
class SetStart:
    value: Any


@dataclass(frozen=True)
class SetYears:
    value: Any


@dataclass(frozen=True)
class SetTitle:
    value: Any


GrantCommand = Union[SetShares, SetStart, SetYears, SetTitle]


# Assumption field commands

@dataclass(frozen=True)
class SetTotalShares:
    value: Any


@dataclass(frozen=True)
class SetPostMoney:
    value: Any


@dataclass(frozen=True)
class SetFmv:
    """Pin the FMV to an explicit value (locks it against re-derivation)."""
    value: Any


@dataclass(frozen=True)
class SetConversionDate:
    value: Any


@dataclass(frozen=True)
class SetTaxRate:
    value: Any


@dataclass(frozen=True)
class SetGrowthRate:
    value: Any


@dataclass(frozen=True)
class UnlockFmv:
    """Release a pinned FMV and re-derive it from valuation and share count."""


AssumptionCommand = Union[
    SetTotalShares, SetPostMoney, SetFmv, SetConversionDate, SetTaxRate, SetGrowthRate, UnlockFmv
]

GRANT_FIELDS = {
    "shares": SetShares,
    "start": SetStart,
    "years": SetYears,
    "title": SetTitle,
}

# Persisted payload keys are accepted alongside the CLI spellings
ASSUMPTION_FIELDS = {
    "total-shares": SetTotalShares,
    "totalShares": SetTotalShares,
    "post-money": SetPostMoney,
    "postMoney": SetPostMoney,
    "fmv": SetFmv,
    "conversion-date": SetConversionDate,
    "conversionDate": SetConversionDate,
    "tax-rate": SetTaxRate,
    "taxRate": SetTaxRate,
    "growth-rate": SetGrowthRate,
    "growthRate": SetGrowthRate,
}


def grant_command(field: str, raw_value: Any) -> GrantCommand:
    """Build a grant command from a field name.

    Raises:
        ValueError: If the field name is not a grant field
    """
    try:
        command_cls = GRANT_FIELDS[field]
    except KeyError:
        valid = ", ".join(GRANT_FIELDS)
        raise ValueError(f"Unknown grant field '{field}'. Valid fields: {valid}") from None
    return command_cls(raw_value)


def assumption_command(field: str, raw_value: Any) -> AssumptionCommand:
    """Build an assumption command from a field name.

    Raises:
        ValueError: If the field name is not an assumption field
    """
    try:
        command_cls = ASSUMPTION_FIELDS[field]
    except KeyError:
        valid = ", ".join(k for k in ASSUMPTION_FIELDS if "-" in k or k == "fmv")
        raise ValueError(f"Unknown assumption field '{field}'. Valid fields: {valid}") from None
    return command_cls(raw_value)
