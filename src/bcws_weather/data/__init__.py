"""Calendar walking, fetching, assembly and transforms for daily observation files."""

from bcws_weather.data.assemble import MultiYearAssembler
from bcws_weather.data.calendar import CalendarDate, days_in_month, is_valid_date, next_date
from bcws_weather.data.outcome import Empty, Failed, FetchOutcome, Rows, UnitFailure
from bcws_weather.data.sources import DailyFetcher, UnavailableConsolidatedSource

__all__ = [
    "CalendarDate",
    "DailyFetcher",
    "Empty",
    "Failed",
    "FetchOutcome",
    "MultiYearAssembler",
    "Rows",
    "UnavailableConsolidatedSource",
    "UnitFailure",
    "days_in_month",
    "is_valid_date",
    "next_date",
]
