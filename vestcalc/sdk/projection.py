"""
Tax-year projection of vesting income.

Vests on or before the conversion date are repriced into the conversion
year at the conversion-year FMV. Later vests keep their natural year and
compound the FMV once per year past the conversion year.
"""

import math
import sys
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from .sanitize import sanitize_conversion_date, sanitize_fmv, sanitize_growth_rate, sanitize_tax_rate
from .schemas import (
    Assumptions,
    Election83bSummary,
    Grant,
    ProjectionRow,
    ProjectionSummary,
    YearBucket,
)
from .vesting import grant_vesting_events

NO_GRANTS_MESSAGE = "Add at least one grant to see tax projections."

# Compounded amounts saturate here instead of overflowing to inf
MAX_AMOUNT = sys.float_info.max


def fmv_for_year(target_year: int, conversion_year: int, fmv: float, growth_rate: float) -> float:
    """
    FMV applied to a vest taxed in ``target_year``.

    Args:
        target_year: Tax year the vest is bucketed into
        conversion_year: Year of the conversion event
        fmv: Conversion-year FMV
        growth_rate: Annual growth in percent

    Returns:
        fmv for the conversion year (or earlier), compounded annually after
    """
    steps = max(0, target_year - conversion_year)
    if steps == 0 or fmv == 0:
        return fmv
    try:
        factor = (1 + growth_rate / 100) ** steps
    except OverflowError:
        return MAX_AMOUNT
    return _cap(fmv * factor)


def _cap(amount: float) -> float:
    """Clamp an overflowing amount to the largest finite float."""
    return min(amount, MAX_AMOUNT)


def _total(amounts: Iterable[float]) -> float:
    """Exact sum of non-negative amounts, capped at the largest finite float."""
    try:
        return _cap(math.fsum(amounts))
    except OverflowError:
        return MAX_AMOUNT


def aggregate_buckets(grants: Iterable[Grant], assumptions: Assumptions) -> Dict[int, YearBucket]:
    """
    Aggregate every grant's vesting events into per-tax-year buckets.

    Contributions are collected per year in grant/event order and summed
    with math.fsum, so totals don't depend on floating-point accumulation
    order.

    Args:
        grants: Grants to project
        assumptions: FMV, conversion date, tax and growth rates

    Returns:
        Dict mapping tax year to bucket, ordered by year. Years with no
        vesting are absent.
    """
    conversion_date = sanitize_conversion_date(assumptions.conversion_date)
    conversion_year = conversion_date.year
    fmv = sanitize_fmv(assumptions.fmv)
    growth_rate = sanitize_growth_rate(assumptions.growth_rate)
    tax_rate = sanitize_tax_rate(assumptions.tax_rate) / 100

    contributions: Dict[int, List[Tuple[int, float, float]]] = defaultdict(list)

    for grant in grants:
        for event in grant_vesting_events(grant):
            target_year = conversion_year if event.date <= conversion_date else event.year
            fmv_used = fmv_for_year(target_year, conversion_year, fmv, growth_rate)
            income = _cap(event.shares * fmv_used)
            contributions[target_year].append((event.shares, income, income * tax_rate))

    buckets = {}
    for year in sorted(contributions):
        entries = contributions[year]
        buckets[year] = YearBucket(
            year=year,
            shares=sum(shares for shares, _, _ in entries),
            income=_total(income for _, income, _ in entries),
            tax=_total(tax for _, _, tax in entries),
        )

    return buckets


def summarize_projection(
    grants: List[Grant],
    buckets: Dict[int, YearBucket],
    assumptions: Optional[Assumptions] = None,
) -> ProjectionSummary:
    """
    Build the table view of a projection.

    Rows skip buckets with no shares. Under an 83(b) election every granted
    share is taxed at grant, when its value is nil, so that line always
    shows zero tax.

    Args:
        grants: Current grants (for the 83(b) share total)
        buckets: Output of aggregate_buckets
        assumptions: Used only to name the conversion year in the empty message

    Returns:
        ProjectionSummary with rows, totals, and an empty-state message
    """
    rows = [
        ProjectionRow(
            year=bucket.year,
            shares=bucket.shares,
            avg_fmv=bucket.avg_fmv,
            income=bucket.income,
            tax=bucket.tax,
        )
        for year, bucket in sorted(buckets.items())
        if bucket.shares > 0
    ]

    empty_message = None
    if not rows:
        if not grants:
            empty_message = NO_GRANTS_MESSAGE
        else:
            year = (assumptions or Assumptions()).conversion_year
            empty_message = f"No post-conversion vesting on or after {year} based on the current grant dates."

    return ProjectionSummary(
        rows=rows,
        total_income=_total(row.income for row in rows),
        total_tax=_total(row.tax for row in rows),
        election_83b=Election83bSummary(total_shares=sum(g.shares for g in grants), tax=0.0),
        empty_message=empty_message,
    )
