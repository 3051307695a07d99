"""Resolve a date request into fetch units and assemble one dataset."""

import logging
import threading
from dataclasses import replace

from bcws_weather.data.calendar import year_bounds
from bcws_weather.data.date_spec import DateSpec, ExactRange
from bcws_weather.data.outcome import Empty, Failed, FetchOutcome, Rows, UnitFailure, has_rows
from bcws_weather.data.schema import reconcile_frames
from bcws_weather.data.sources import (
    ConsolidatedSource,
    DailyFetcher,
    UnavailableConsolidatedSource,
    UnitCallback,
    check_cancelled,
)

logger = logging.getLogger(__name__)


class MultiYearAssembler:
    """Two-tier fetch: consolidated yearly file first, daily files as fallback.

    Exact date ranges always go straight to the daily tier. Year requests try
    the consolidated source once per year and fall back to walking January 1st
    to December 31st whenever it yields no rows.
    """

    def __init__(
        self,
        daily: DailyFetcher,
        consolidated: ConsolidatedSource | None = None,
    ):
        self.daily = daily
        self.consolidated = consolidated or UnavailableConsolidatedSource()

    def fetch_year(
        self,
        year: int,
        station: str,
        cancel: threading.Event | None = None,
        on_unit: UnitCallback | None = None,
    ) -> FetchOutcome:
        """One year's contribution, preferring the consolidated file."""
        try:
            outcome = self.consolidated.fetch_year(year, station)
        except Exception as e:
            # Consolidated sources should not raise; treat a misbehaving one as unavailable
            logger.warning(f"Consolidated source raised for {year}: {e}")
            outcome = Failed(reason=str(e))

        if has_rows(outcome):
            logger.info(f"Using consolidated file for station {station} in {year}")
            return outcome

        if isinstance(outcome, Failed):
            logger.info(f"Consolidated file for {year} failed ({outcome.reason}), using daily files")
        else:
            logger.debug(f"No consolidated file for {year}, using daily files")

        start, end = year_bounds(year)
        fallback = self.daily.fetch_range(start, end, station, cancel=cancel, on_unit=on_unit)
        if isinstance(outcome, Failed):
            consolidated_failure = UnitFailure(unit=f"{year} (consolidated)", reason=outcome.reason)
            failures = (consolidated_failure,) + fallback.failures
            return replace(fallback, failures=failures)
        return fallback

    def resolve(
        self,
        spec: DateSpec,
        station: str,
        cancel: threading.Event | None = None,
        on_unit: UnitCallback | None = None,
    ) -> FetchOutcome:
        """Fetch everything ``spec`` covers for ``station``.

        Returns:
            ``Rows`` with the aggregate in ascending date order, or ``Empty``
            when no unit produced a matching record. Unit failures of every
            year are carried on the outcome.

        Raises:
            FetchCancelled: If ``cancel`` is set at a year or day boundary
        """
        if isinstance(spec, ExactRange):
            return self.daily.fetch_range(
                spec.start_date, spec.end_date, station, cancel=cancel, on_unit=on_unit
            )

        aggregate = reconcile_frames([])
        failures: list[UnitFailure] = []

        for year in spec.years():
            check_cancelled(cancel)
            outcome = self.fetch_year(year, station, cancel=cancel, on_unit=on_unit)
            failures.extend(outcome.failures)
            if has_rows(outcome):
                aggregate = reconcile_frames([aggregate, outcome.data])

        if aggregate.height == 0:
            return Empty(failures=tuple(failures))
        return Rows(data=aggregate, failures=tuple(failures))
