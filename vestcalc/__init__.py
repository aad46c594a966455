"""Vest Calc - equity grant vesting and tax exposure projections."""

__version__ = "0.3.0"
