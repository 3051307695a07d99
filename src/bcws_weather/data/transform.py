"""Timestamp normalization and frequency downsampling."""

import polars as pl

from bcws_weather.data.archive import DATE_TIME
from bcws_weather.data.date_spec import Frequency

NOON_SUFFIX = " 12:00"


def normalize_timestamps(df: pl.DataFrame, column: str = DATE_TIME) -> pl.DataFrame:
    """Rewrite compact ``YYYYMMDDHH`` stamps as ``YYYY-MM-DD HH:00``.

    This is a fixed-width split of the raw text; values are taken from the
    source file as they are and are not checked against the calendar.

    Examples:
        >>> normalize_timestamps(pl.DataFrame({"DATE_TIME": ["2023070412"]}))["DATE_TIME"][0]
        '2023-07-04 12:00'
    """
    stamp = pl.col(column).cast(pl.String)
    return df.with_columns(
        pl.concat_str(
            [
                stamp.str.slice(0, 4),
                pl.lit("-"),
                stamp.str.slice(4, 2),
                pl.lit("-"),
                stamp.str.slice(6, 2),
                pl.lit(" "),
                stamp.str.slice(8, 2),
                pl.lit(":00"),
            ]
        ).alias(column)
    )


def filter_frequency(
    df: pl.DataFrame,
    frequency: Frequency | str,
    column: str = DATE_TIME,
) -> pl.DataFrame:
    """Downsample to the requested frequency.

    Hourly keeps every row. Daily keeps only the noon reading of each day,
    matched on the normalized timestamp ending in `` 12:00``.
    """
    if Frequency(frequency) is Frequency.HOURLY:
        return df
    return df.filter(pl.col(column).str.ends_with(NOON_SUFFIX))
