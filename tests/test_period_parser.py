"""Tests for period year parsing."""

from datetime import date

import pytest

from cadsync.utils.period_parser import Period, parse_period, parse_year


def test_parse_year_valid():
    assert parse_year("2020") == 2020
    assert parse_year(" 2021 ") == 2021


@pytest.mark.parametrize(
    "value", [None, "", "  ", "20x0", "2020.5", "0", "10000", "2_022", "２０２２"]
)
def test_parse_year_invalid(value):
    assert parse_year(value) is None


def test_parse_period_both_years():
    period = parse_period("2020", "2022")
    assert period == Period(start_year=2020, end_year=2022)


def test_parse_period_both_blank():
    assert parse_period("", "") is None
    assert parse_period(None, "  ") is None


def test_parse_period_only_start():
    assert parse_period("2019", "") == Period(2019, 2019)


def test_parse_period_only_end():
    assert parse_period(None, "2023") == Period(2023, 2023)


def test_parse_period_invalid_year():
    assert parse_period("20x0", "2022") is None
    assert parse_period("2020", "abc") is None
    assert parse_period("abc", "") is None


def test_period_dates_use_start_year():
    period = Period(2020, 2022)
    assert period.created_on == date(2020, 1, 1)
    assert period.due_on == date(2020, 12, 31)


def test_period_covers_inclusive():
    period = Period(2020, 2022)
    assert period.covers(2020)
    assert period.covers(2021)
    assert period.covers(2022)
    assert not period.covers(2019)
    assert not period.covers(2023)


def test_parse_period_rejects_non_ascii_digits():
    assert parse_period("2_020", "2022") is None
    assert parse_period("", "２０２２") is None
