"""Utility functions for cadsync."""

from cadsync.utils.account_normalizer import normalize_account
from cadsync.utils.period_parser import Period, parse_period, parse_year
from cadsync.utils.date_parser import parse_date, get_date_range, day_bounds

__all__ = [
    "normalize_account",
    "Period",
    "parse_period",
    "parse_year",
    "parse_date",
    "get_date_range",
    "day_bounds",
]
