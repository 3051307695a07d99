"""Deterministic export filenames."""

import logging

import polars as pl

from bcws_weather.data.archive import STATION_NAME
from bcws_weather.data.date_spec import DateSpec, ExactRange, Frequency, SingleYear, YearRange
from bcws_weather.errors import AmbiguousStationNameError

logger = logging.getLogger(__name__)

ARTIFACT_TAG = "BCWS_WX_OBS"


def artifact_name(station_name: str, spec: DateSpec, frequency: Frequency | str) -> str:
    """Export filename for a request.

    Examples:
        >>> from bcws_weather.data.calendar import CalendarDate
        >>> spec = ExactRange(CalendarDate(2023, 1, 1), CalendarDate(2023, 1, 3))
        >>> artifact_name("Kamloops", spec, Frequency.DAILY)
        'Kamloops_2023-01-01_to_2023-01-03_BCWS_WX_OBS_dailies.csv'
        >>> artifact_name("Kamloops", SingleYear(2023), Frequency.HOURLY)
        'Kamloops_2023_BCWS_WX_OBS.csv'
    """
    suffix = "_dailies" if Frequency(frequency) is Frequency.DAILY else ""

    if isinstance(spec, ExactRange):
        window = f"{spec.start_date}_to_{spec.end_date}"
    elif isinstance(spec, YearRange):
        window = f"{spec.start_year}-{spec.end_year}"
    elif isinstance(spec, SingleYear):
        window = f"{spec.year}"
    else:
        raise TypeError(f"Unsupported date spec: {spec!r}")

    return f"{station_name}_{window}_{ARTIFACT_TAG}{suffix}.csv"


def resolve_station_name(df: pl.DataFrame, fallback: str, strict: bool = False) -> str:
    """Station name to put in the export filename.

    Takes the first distinct STATION_NAME in row order. Several distinct names
    should not happen once rows are filtered by station code, but a station
    renamed mid-range or a malformed file can produce them: by default the
    first name wins and the rest are logged; with ``strict`` this raises.

    Args:
        df: Assembled observations
        fallback: Used when no row carries a name (normally the station code)
        strict: Raise instead of warning on several names

    Raises:
        AmbiguousStationNameError: If ``strict`` and several names are present
    """
    if STATION_NAME not in df.columns:
        return fallback

    names = [
        name.strip()
        for name in df.get_column(STATION_NAME).drop_nulls().unique(maintain_order=True).to_list()
        if name and name.strip()
    ]
    names = list(dict.fromkeys(names))
    if not names:
        return fallback

    if len(names) > 1:
        message = f"Data carries {len(names)} station names: {', '.join(names)}"
        if strict:
            raise AmbiguousStationNameError(message)
        logger.warning(f"{message}. Naming the export after '{names[0]}'")

    return names[0]
