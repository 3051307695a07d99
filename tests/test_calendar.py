"""Tests for calendar arithmetic."""

import pytest

from bcws_weather.data.calendar import (
    CalendarDate,
    days_between,
    days_in_month,
    is_leap_year,
    is_valid_date,
    iter_dates,
    next_date,
    parse_iso_date,
    year_bounds,
)
from bcws_weather.errors import InvalidDateError, RequestValidationError


@pytest.mark.parametrize("year", [2000, 2024])
def test_february_in_leap_years(year):
    assert days_in_month(year, 2) == 29


@pytest.mark.parametrize("year", [1900, 2023])
def test_february_in_common_years(year):
    assert days_in_month(year, 2) == 28


@pytest.mark.parametrize("year", [1900, 2000, 2023, 2024])
def test_month_lengths(year):
    for month in (4, 6, 9, 11):
        assert days_in_month(year, month) == 30
    for month in (1, 3, 5, 7, 8, 10, 12):
        assert days_in_month(year, month) == 31


def test_leap_rule():
    assert is_leap_year(2000)
    assert is_leap_year(1996)
    assert not is_leap_year(1900)
    assert not is_leap_year(2023)


def test_days_in_month_rejects_bad_month():
    with pytest.raises(InvalidDateError):
        days_in_month(2023, 13)


@pytest.mark.parametrize(
    "year,month,day",
    [
        (2023, 1, 0),
        (2023, 1, 32),
        (2023, 2, 29),
        (1900, 2, 29),
        (2023, 4, 31),
        (2023, 0, 10),
        (2023, 13, 1),
    ],
)
def test_is_valid_date_rejects(year, month, day):
    assert not is_valid_date(year, month, day)


@pytest.mark.parametrize("year,month,day", [(2024, 2, 29), (2000, 2, 29), (2023, 12, 31), (2023, 1, 1)])
def test_is_valid_date_accepts(year, month, day):
    assert is_valid_date(year, month, day)


def test_calendar_date_rejects_invalid_parts():
    with pytest.raises(InvalidDateError):
        CalendarDate(2023, 2, 29)
    # Invalid dates are request validation errors too
    with pytest.raises(RequestValidationError):
        CalendarDate(2023, 13, 1)


@pytest.mark.parametrize(
    "date,expected",
    [
        (CalendarDate(2023, 12, 31), CalendarDate(2024, 1, 1)),
        (CalendarDate(2023, 1, 31), CalendarDate(2023, 2, 1)),
        (CalendarDate(2023, 2, 28), CalendarDate(2023, 3, 1)),
        (CalendarDate(2024, 2, 28), CalendarDate(2024, 2, 29)),
        (CalendarDate(2024, 2, 29), CalendarDate(2024, 3, 1)),
        (CalendarDate(2023, 4, 30), CalendarDate(2023, 5, 1)),
        (CalendarDate(2023, 6, 14), CalendarDate(2023, 6, 15)),
    ],
)
def test_next_date_carries(date, expected):
    assert next_date(date) == expected


def test_dates_order_chronologically():
    assert CalendarDate(2023, 12, 31) < CalendarDate(2024, 1, 1)
    assert CalendarDate(2023, 2, 1) > CalendarDate(2023, 1, 31)
    assert str(CalendarDate(2023, 7, 4)) == "2023-07-04"


def test_iter_dates_inclusive_across_year_boundary():
    dates = list(iter_dates(CalendarDate(2023, 12, 30), CalendarDate(2024, 1, 2)))
    assert [str(d) for d in dates] == ["2023-12-30", "2023-12-31", "2024-01-01", "2024-01-02"]


def test_iter_dates_single_day_and_backwards():
    day = CalendarDate(2023, 5, 5)
    assert list(iter_dates(day, day)) == [day]
    assert list(iter_dates(CalendarDate(2023, 5, 6), day)) == []


def test_iter_dates_covers_whole_year():
    start, end = year_bounds(2024)
    assert sum(1 for _ in iter_dates(start, end)) == 366
    start, end = year_bounds(2023)
    assert sum(1 for _ in iter_dates(start, end)) == 365


def test_days_between():
    assert days_between(CalendarDate(2023, 1, 1), CalendarDate(2023, 1, 1)) == 0
    assert days_between(CalendarDate(2023, 12, 31), CalendarDate(2024, 1, 1)) == 1
    assert days_between(CalendarDate(2024, 1, 1), CalendarDate(2024, 12, 31)) == 365
    assert days_between(CalendarDate(2023, 1, 3), CalendarDate(2023, 1, 1)) == -2


def test_parse_iso_date():
    assert parse_iso_date("2023-01-03") == CalendarDate(2023, 1, 3)
    assert parse_iso_date(" 2024-02-29 ") == CalendarDate(2024, 2, 29)
    for bad in ["2023-02-30", "2023/01/01", "20230101", "2023-1", "yyyy-mm-dd"]:
        with pytest.raises(InvalidDateError):
            parse_iso_date(bad)
