"""Calendar date helpers.

Dates are plain ``datetime.date`` values and travel as ``YYYY-MM-DD``
strings in persisted state and CLI input.
"""

import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: Any) -> Optional[date]:
    """Parse a strict YYYY-MM-DD date.

    Accepts ``date`` objects as-is (``datetime`` is narrowed to its date).

    Returns:
        The parsed date, or None if the value is not a real calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not ISO_DATE_PATTERN.match(text):
        return None

    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        return None


def add_years(start: date, years: int) -> date:
    """Shift a date by whole years, keeping month and day.

    Feb 29 rolls forward to Mar 1 when the target year is not a leap year.
    """
    target_year = start.year + years
    try:
        return start.replace(year=target_year)
    except ValueError:
        # Only Feb 29 can fail here
        return date(target_year, 2, 28) + timedelta(days=1)
