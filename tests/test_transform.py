"""Tests for timestamp normalization and the noon filter."""

import polars as pl

from conftest import make_day_frame

from bcws_weather.data.calendar import CalendarDate
from bcws_weather.data.date_spec import Frequency
from bcws_weather.data.transform import filter_frequency, normalize_timestamps


def test_normalize_fixed_width_split():
    df = pl.DataFrame({"DATE_TIME": ["2023070400", "2023070412", "1999123123"], "X": ["a", "b", "c"]})
    result = normalize_timestamps(df)
    assert result["DATE_TIME"].to_list() == ["2023-07-04 00:00", "2023-07-04 12:00", "1999-12-31 23:00"]
    assert result["X"].to_list() == ["a", "b", "c"]


def test_normalize_does_not_validate_calendar():
    df = pl.DataFrame({"DATE_TIME": ["2023023099"]})
    assert normalize_timestamps(df)["DATE_TIME"][0] == "2023-02-30 99:00"


def test_normalize_accepts_integer_stamps():
    df = pl.DataFrame({"DATE_TIME": [2023010105]})
    assert normalize_timestamps(df)["DATE_TIME"][0] == "2023-01-01 05:00"


def test_hourly_is_identity():
    df = normalize_timestamps(make_day_frame(CalendarDate(2023, 1, 1), {"A": "Kamloops"}))
    assert filter_frequency(df, Frequency.HOURLY).equals(df)


def test_daily_keeps_one_noon_row_per_day():
    days = [CalendarDate(2023, 1, d) for d in (1, 2, 3)]
    df = normalize_timestamps(pl.concat([make_day_frame(d, {"A": "Kamloops"}) for d in days]))

    result = filter_frequency(df, Frequency.DAILY)

    assert result.height == 3
    assert result["DATE_TIME"].to_list() == ["2023-01-01 12:00", "2023-01-02 12:00", "2023-01-03 12:00"]
    assert all(stamp.endswith(" 12:00") for stamp in result["DATE_TIME"])


def test_daily_accepts_string_selector():
    df = normalize_timestamps(make_day_frame(CalendarDate(2023, 1, 1), {"A": "Kamloops"}))
    assert filter_frequency(df, "dailies").height == 1


def test_daily_without_noon_rows_is_empty():
    df = normalize_timestamps(
        make_day_frame(CalendarDate(2023, 1, 1), {"A": "Kamloops"}, hours=range(0, 12))
    )
    assert filter_frequency(df, Frequency.DAILY).height == 0
