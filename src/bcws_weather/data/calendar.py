"""Gregorian calendar arithmetic for walking daily archive files.

The Data Mart publishes one file per calendar day, so every date range is
walked one day at a time. These helpers stay free of ``datetime`` so that the
carry rules (day -> month -> year) are explicit and easy to test.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from bcws_weather.errors import InvalidDateError

THIRTY_DAY_MONTHS = frozenset({4, 6, 9, 11})


def is_leap_year(year: int) -> bool:
    """Gregorian leap rule."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month.

    Args:
        year: Calendar year (only matters for February)
        month: Month number, 1-12

    Returns:
        28, 29, 30 or 31

    Raises:
        InvalidDateError: If month is outside 1-12

    Examples:
        >>> days_in_month(2024, 2)
        29
        >>> days_in_month(1900, 2)
        28
        >>> days_in_month(2023, 9)
        30
    """
    if month < 1 or month > 12:
        raise InvalidDateError(f"Invalid month: {month}")
    if month == 2:
        return 29 if is_leap_year(year) else 28
    if month in THIRTY_DAY_MONTHS:
        return 30
    return 31


def is_valid_date(year: int, month: int, day: int) -> bool:
    """Check that (year, month, day) names a real date."""
    if month < 1 or month > 12:
        return False
    return 1 <= day <= days_in_month(year, month)


@dataclass(frozen=True, order=True)
class CalendarDate:
    """An immutable, always-valid calendar date.

    Field order makes the generated comparisons chronological.
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if not is_valid_date(self.year, self.month, self.day):
            raise InvalidDateError(
                f"Invalid date: {self.year:04d}-{self.month:02d}-{self.day:02d}"
            )

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return self.isoformat()


def next_date(date: CalendarDate) -> CalendarDate:
    """The day after ``date``, carrying into the next month and year."""
    year, month, day = date.year, date.month, date.day + 1
    if day > days_in_month(year, month):
        day = 1
        month += 1
        if month > 12:
            month = 1
            year += 1
    return CalendarDate(year, month, day)


def iter_dates(start: CalendarDate, end: CalendarDate) -> Iterator[CalendarDate]:
    """Yield every date from ``start`` to ``end`` inclusive, in order.

    Yields nothing when ``start`` is after ``end``.
    """
    current = start
    while current <= end:
        yield current
        if current == end:
            return
        current = next_date(current)


def days_between(start: CalendarDate, end: CalendarDate) -> int:
    """Number of day steps from ``start`` to ``end`` (0 for the same day).

    Examples:
        >>> days_between(CalendarDate(2023, 12, 31), CalendarDate(2024, 1, 1))
        1
    """
    if end < start:
        return -days_between(end, start)
    return sum(1 for _ in iter_dates(start, end)) - 1


def year_bounds(year: int) -> tuple[CalendarDate, CalendarDate]:
    """January 1st and December 31st of ``year``."""
    return CalendarDate(year, 1, 1), CalendarDate(year, 12, 31)


def parse_iso_date(value: str) -> CalendarDate:
    """Parse a ``YYYY-MM-DD`` string.

    Raises:
        InvalidDateError: If the text is malformed or names no real date
    """
    parts = value.strip().split("-")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise InvalidDateError(f"Invalid date '{value}', expected YYYY-MM-DD")
    year, month, day = (int(part) for part in parts)
    return CalendarDate(year, month, day)
