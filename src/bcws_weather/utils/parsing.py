"""Parsing utilities for command-line arguments."""

from bcws_weather.data.calendar import parse_iso_date
from bcws_weather.data.date_spec import DateSpec, ExactRange, SingleYear, YearRange
from bcws_weather.errors import RequestValidationError


def parse_year_range(year_range_str: str) -> tuple[int, int]:
    """Parse a year range string into (start_year, end_year).

    Supports:
    - Year ranges: "2012:2015" (inclusive of both 2012 and 2015)
    - A single year: "2021", read as the range 2021:2021

    Raises:
        RequestValidationError: If the text is not a year or a range, or if
            the range runs backwards

    Examples:
        >>> parse_year_range("2018:2020")
        (2018, 2020)
        >>> parse_year_range(" 2021 ")
        (2021, 2021)
    """
    parts = [part.strip() for part in year_range_str.split(":")]
    if len(parts) == 1:
        parts = parts * 2
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise RequestValidationError(
            f"Invalid year range: '{year_range_str}'. Expected START:END, e.g. 2020:2023"
        )

    start, end = int(parts[0]), int(parts[1])
    if start > end:
        raise RequestValidationError("Start year must be before end year.")
    return start, end


def parse_station_code(station_code_str: str | None) -> str:
    """Trim a station code and reject blanks.

    Examples:
        >>> parse_station_code("  1002 ")
        '1002'
    """
    station = (station_code_str or "").strip()
    if not station:
        raise RequestValidationError("Station code cannot be empty.")
    return station


def build_date_spec(
    year: int | None = None,
    years: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
) -> DateSpec:
    """Build a date spec from exactly one of the three request forms.

    Args:
        year: Single year
        years: Year range text ("2020:2023")
        start_date: First day of an exact range (YYYY-MM-DD)
        end_date: Last day of an exact range (YYYY-MM-DD)

    Raises:
        RequestValidationError: If no form or several forms are given, or the
            chosen form is invalid
    """
    exact = start_date is not None or end_date is not None
    chosen = sum([year is not None, years is not None, exact])
    if chosen != 1:
        raise RequestValidationError(
            "Specify exactly one of a single year, a year range, or a start and end date."
        )

    if year is not None:
        return SingleYear(year)
    if years is not None:
        return YearRange(*parse_year_range(years))
    if start_date is None or end_date is None:
        raise RequestValidationError("An exact date range needs both a start date and an end date.")
    return ExactRange(parse_iso_date(start_date), parse_iso_date(end_date))
