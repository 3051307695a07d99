"""Shared fixtures: an in-memory stand-in for the Data Mart."""

import threading
from collections.abc import Callable

import polars as pl
import pytest

from bcws_weather.data.calendar import CalendarDate


def make_day_frame(
    date: CalendarDate,
    stations: dict[str, str],
    hours: range = range(24),
    extra: dict[str, str] | None = None,
) -> pl.DataFrame:
    """A daily file with one row per station per hour, all text columns."""
    rows = []
    for code, name in stations.items():
        for hour in hours:
            row = {
                "STATION_CODE": code,
                "STATION_NAME": name,
                "DATE_TIME": f"{date.year:04d}{date.month:02d}{date.day:02d}{hour:02d}",
                "HOURLY_TEMPERATURE": f"{10 + hour / 10:.1f}",
            }
            row.update(extra or {})
            rows.append(row)
    return pl.DataFrame(rows, schema={key: pl.String for key in rows[0]})


class FakeDailySource:
    """Serves daily tables from a builder; records every fetch attempt.

    ``failing`` dates raise instead of returning a table, mimicking a 404 or a
    corrupt file.
    """

    def __init__(
        self,
        builder: Callable[[CalendarDate], pl.DataFrame],
        failing: set[CalendarDate] | None = None,
    ):
        self.builder = builder
        self.failing = failing or set()
        self.calls: list[CalendarDate] = []
        self._lock = threading.Lock()

    def fetch_day(self, date: CalendarDate) -> pl.DataFrame:
        with self._lock:
            self.calls.append(date)
        if date in self.failing:
            raise ConnectionError(f"404 for {date}")
        return self.builder(date)


@pytest.fixture
def two_station_source() -> FakeDailySource:
    """Every day carries hourly rows for stations A (Kamloops) and B (Lillooet)."""
    return FakeDailySource(lambda d: make_day_frame(d, {"A": "Kamloops", "B": "Lillooet"}))
