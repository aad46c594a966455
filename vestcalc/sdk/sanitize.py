"""Field sanitizers for grants and assumptions.

Every value entering the engine (CLI edits, profile defaults, persisted
state at any schema generation) passes through one of these functions.
They never raise: out-of-range input is clamped and unusable input is
replaced by the field default. All of them are idempotent.
"""

import math
from datetime import date
from typing import Any, Optional, Union

from .dates import parse_iso_date

MAX_SAFE_INTEGER = 2**53 - 1
MAX_TITLE_LENGTH = 60
MAX_VESTING_YEARS = 100

# Built-in defaults
DEFAULT_START = "2024-01-01"
DEFAULT_GRANT_SHARES = 70000
DEFAULT_GRANT_YEARS = 7
DEFAULT_TOTAL_SHARES = 10_000_000
DEFAULT_POST_MONEY = 100_000_000.0
DEFAULT_CONVERSION_DATE = "2025-12-01"
DEFAULT_TAX_RATE = 42.0
DEFAULT_GROWTH_RATE = 35.0

Number = Union[int, float]


def clamp(value: Number, low: Number, high: Number) -> Number:
    return min(max(value, low), high)


def to_number(value: Any) -> Optional[Number]:
    """Coerce raw input to a finite number.

    Ints pass through untouched so large share counts keep full precision.
    Ints too large for a float count as non-finite.

    Returns:
        The number, or None for blank, non-numeric or non-finite input
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            float(value)
        except OverflowError:
            return None
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            numeric = float(text)
        except ValueError:
            return None
        return numeric if math.isfinite(numeric) else None
    return None


def _whole(value: Number, low: int, high: int) -> int:
    if isinstance(value, float):
        value = math.floor(value)
    return int(clamp(value, low, high))


# =============================================================================
# Grant fields
# =============================================================================

def sanitize_shares(value: Any) -> int:
    """Grant share count: whole number >= 1 (default 1)."""
    numeric = to_number(value)
    if numeric is None:
        return 1
    return _whole(numeric, 1, MAX_SAFE_INTEGER)


def sanitize_years(value: Any) -> int:
    """Vesting duration in whole years, 1-100 (default 1)."""
    numeric = to_number(value)
    if numeric is None:
        return 1
    return _whole(numeric, 1, MAX_VESTING_YEARS)


def sanitize_start_date(value: Any) -> date:
    """Grant start date; anything unparseable becomes the default start."""
    return parse_iso_date(value) or parse_iso_date(DEFAULT_START)


def sanitize_title(value: Any) -> str:
    """Display title, truncated to 60 characters. Non-strings become ''."""
    if not isinstance(value, str):
        return ""
    return value[:MAX_TITLE_LENGTH]


def sanitize_grant_id(value: Any) -> Optional[int]:
    """Grant id: positive whole number, or None if unusable."""
    numeric = to_number(value)
    if numeric is None or numeric != math.floor(numeric) or numeric < 1:
        return None
    return int(numeric)


# =============================================================================
# Assumption fields
# =============================================================================

def sanitize_total_shares(value: Any) -> int:
    """Total shares outstanding: whole number >= 1."""
    numeric = to_number(value)
    if numeric is None:
        return DEFAULT_TOTAL_SHARES
    return _whole(numeric, 1, MAX_SAFE_INTEGER)


def sanitize_post_money(value: Any) -> float:
    """Post-money valuation in dollars, >= 0."""
    numeric = to_number(value)
    if numeric is None:
        return DEFAULT_POST_MONEY
    return float(max(numeric, 0))


def sanitize_fmv(value: Any) -> float:
    """Per-share fair market value, >= 0 (default 0)."""
    numeric = to_number(value)
    if numeric is None:
        return 0.0
    return float(max(numeric, 0))


def sanitize_conversion_date(value: Any) -> date:
    """Conversion date; anything unparseable becomes the default."""
    return parse_iso_date(value) or parse_iso_date(DEFAULT_CONVERSION_DATE)


def sanitize_tax_rate(value: Any) -> float:
    """Flat tax rate in percent, 0-100 (default 0)."""
    numeric = to_number(value)
    if numeric is None:
        return 0.0
    return float(clamp(numeric, 0, 100))


def sanitize_growth_rate(value: Any) -> float:
    """Annual FMV growth in percent, -100 to 500 (default 0)."""
    numeric = to_number(value)
    if numeric is None:
        return 0.0
    return float(clamp(numeric, -100, 500))
