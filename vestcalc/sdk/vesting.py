"""Vesting schedule expansion."""

from datetime import MAXYEAR
from typing import Any, List

from .dates import add_years, parse_iso_date
from .sanitize import DEFAULT_START
from .schemas import Grant, VestingEvent


def build_vesting_events(shares: int, years: int, start: Any) -> List[VestingEvent]:
    """
    Expand a grant into one vesting event per anniversary of its start.

    Each year vests shares // years; the remainder goes entirely to the
    final tranche, so the events always sum to exactly ``shares``.

    Args:
        shares: Total shares granted (>= 1)
        years: Vesting duration in years (>= 1)
        start: Grant start (date or YYYY-MM-DD string). Falls back to the
            default start date when unparseable.

    Returns:
        Events ordered by date; empty if no usable start date exists or
        the schedule would run past the last representable year
    """
    base_date = parse_iso_date(start) or parse_iso_date(DEFAULT_START)
    if base_date is None or years < 1:
        return []
    if base_date.year + years > MAXYEAR:
        return []

    shares_per_year, remainder = divmod(shares, years)

    events = []
    for year in range(1, years + 1):
        vest_date = add_years(base_date, year)
        tranche = shares_per_year + (remainder if year == years else 0)
        events.append(VestingEvent(year=vest_date.year, date=vest_date, shares=tranche))

    return events


def grant_vesting_events(grant: Grant) -> List[VestingEvent]:
    """Vesting events for a stored grant."""
    return build_vesting_events(grant.shares, grant.years, grant.start)
