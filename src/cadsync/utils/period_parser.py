"""Parsing of the start/end years captured in payment request forms."""

import re
from dataclasses import dataclass
from datetime import date, MINYEAR, MAXYEAR
from typing import Optional

_YEAR = re.compile(r"^[+-]?[0-9]+$")


@dataclass(frozen=True)
class Period:
    """Inclusive range of fiscal years covered by a payment."""

    start_year: int
    end_year: int

    @property
    def created_on(self) -> date:
        return date(self.start_year, 1, 1)

    @property
    def due_on(self) -> date:
        return date(self.start_year, 12, 31)

    def covers(self, year: int) -> bool:
        return self.start_year <= year <= self.end_year


def parse_year(value: Optional[str]) -> Optional[int]:
    """Parse a year string, returning None when it is blank or invalid.

    Surrounding whitespace and an explicit sign are accepted, as long as the
    result is a year a calendar date can carry. Only ASCII digits count, so
    "2_022" or fullwidth digits are rejected.
    """
    if value is None or not _YEAR.match(value.strip()):
        return None
    year = int(value.strip())
    if year < MINYEAR or year > MAXYEAR:
        return None
    return year


def parse_period(start: Optional[str], end: Optional[str]) -> Optional[Period]:
    """Build a Period from the raw start/end year answers.

    Rules:
    - both blank: no period
    - only one present: it is used as both start and end
    - both present: each must parse, otherwise there is no period

    Args:
        start: Raw "Año Inicial" answer
        end: Raw "Año Final" answer

    Returns:
        Period, or None when the answers cannot describe one
    """
    has_start = start is not None and bool(start.strip())
    has_end = end is not None and bool(end.strip())

    if not has_start and not has_end:
        return None

    if has_start and has_end:
        start_str, end_str = start, end
    else:
        start_str = start if has_start else end
        end_str = start_str

    start_year = parse_year(start_str)
    if start_year is None:
        return None

    end_year = parse_year(end_str)
    if end_year is None:
        return None

    return Period(start_year=start_year, end_year=end_year)
