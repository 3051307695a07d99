"""Fetch strategies: yearly consolidated files and per-day files.

``DailyFetcher`` is the always-available tier: one file per calendar day,
filtered down to the requested station. ``ConsolidatedSource`` is the
preferred tier when a whole year can be obtained in one request; the Data
Mart publishes no such file today, so ``UnavailableConsolidatedSource``
always reports ``Empty`` and the daily tier does the work.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Protocol

import polars as pl

from bcws_weather.data.archive import STATION_CODE
from bcws_weather.data.calendar import CalendarDate, iter_dates
from bcws_weather.data.outcome import Empty, FetchOutcome, Rows, UnitFailure
from bcws_weather.data.schema import reconcile_frames
from bcws_weather.errors import FetchCancelled

logger = logging.getLogger(__name__)

# Called once per processed day with (date, succeeded)
UnitCallback = Callable[[CalendarDate, bool], None]


class DailySource(Protocol):
    """Anything that can return the full observation table for one day."""

    def fetch_day(self, date: CalendarDate) -> pl.DataFrame:
        """Return the day's table; raise on any fetch or parse failure."""
        ...


class ConsolidatedSource(Protocol):
    """A source of whole-year observation files for one station."""

    def fetch_year(self, year: int, station: str) -> FetchOutcome:
        """Return the year's rows; must report problems as Empty/Failed, never raise."""
        ...


class UnavailableConsolidatedSource:
    """Reference consolidated tier: no yearly file exists, always ``Empty``."""

    def fetch_year(self, year: int, station: str) -> FetchOutcome:
        logger.debug(f"No consolidated file for station {station} in {year}")
        return Empty()


def check_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise FetchCancelled("Download cancelled")


class DailyFetcher:
    """Walks a date range one file per day and keeps one station's rows.

    Args:
        source: Provider of daily tables (normally an ``ArchiveClient``)
        max_workers: Days fetched concurrently; 1 fetches strictly in order
    """

    def __init__(self, source: DailySource, max_workers: int = 1):
        self.source = source
        self.max_workers = max(1, max_workers)

    def _fetch_unit(
        self,
        date: CalendarDate,
        station: str,
        cancel: threading.Event | None,
    ) -> tuple[pl.DataFrame | None, UnitFailure | None]:
        check_cancelled(cancel)
        try:
            df = self.source.fetch_day(date)
            matches = df.filter(pl.col(STATION_CODE) == station)
        except Exception as e:
            logger.debug(f"No usable file for {date}: {e}")
            return None, UnitFailure(unit=str(date), reason=str(e) or type(e).__name__)
        return matches, None

    def fetch_range(
        self,
        start: CalendarDate,
        end: CalendarDate,
        station: str,
        cancel: threading.Event | None = None,
        on_unit: UnitCallback | None = None,
    ) -> FetchOutcome:
        """Fetch every day in [start, end] and keep rows for ``station``.

        Exactly one fetch is attempted per day. A day that cannot be fetched
        or parsed is recorded as a ``UnitFailure`` and skipped.

        Args:
            start: First day (inclusive)
            end: Last day (inclusive)
            station: Exact STATION_CODE to keep
            cancel: Event checked before every day
            on_unit: Progress callback, called after every day

        Returns:
            ``Rows`` with the matching records in date order, or ``Empty``
            when no day contributed a matching row

        Raises:
            FetchCancelled: If ``cancel`` was set; partial rows are discarded
        """
        dates = list(iter_dates(start, end))
        logger.info(f"Fetching {len(dates)} daily files ({start} to {end}) for station {station}")

        results: list[tuple[pl.DataFrame | None, UnitFailure | None]]
        if self.max_workers == 1 or len(dates) == 1:
            results = []
            for date in dates:
                result = self._fetch_unit(date, station, cancel)
                results.append(result)
                if on_unit is not None:
                    on_unit(date, result[1] is None)
        else:
            results = self._fetch_concurrently(dates, station, cancel, on_unit)

        # Results are indexed by date, so completion order never leaks into the output
        contributions = [df for df, _ in results if df is not None and df.height > 0]
        failures = tuple(failure for _, failure in results if failure is not None)

        logger.info(
            f"Station {station}, {start} to {end}: {len(contributions)} days with data, "
            f"{len(failures)} days unavailable"
        )

        if not contributions:
            return Empty(failures=failures)
        return Rows(data=reconcile_frames(contributions), failures=failures)

    def _fetch_concurrently(
        self,
        dates: list[CalendarDate],
        station: str,
        cancel: threading.Event | None,
        on_unit: UnitCallback | None,
    ) -> list[tuple[pl.DataFrame | None, UnitFailure | None]]:
        results: list[tuple[pl.DataFrame | None, UnitFailure | None]] = [(None, None)] * len(dates)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self._fetch_unit, date, station, cancel): i
                for i, date in enumerate(dates)
            }
            try:
                for future in as_completed(future_to_index):
                    i = future_to_index[future]
                    # FetchCancelled is the only exception _fetch_unit lets through
                    results[i] = future.result()
                    if on_unit is not None:
                        on_unit(dates[i], results[i][1] is None)
            except BaseException:
                # Queued days must not keep downloading once the caller has given up
                executor.shutdown(wait=True, cancel_futures=True)
                raise

        return results
