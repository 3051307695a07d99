"""Schema reconciliation across daily files with drifting column sets."""

from collections.abc import Iterable

import polars as pl


def column_union(frames: Iterable[pl.DataFrame]) -> list[str]:
    """All column names across ``frames`` in first-seen order."""
    seen: dict[str, None] = {}
    for df in frames:
        for col in df.columns:
            seen.setdefault(col, None)
    return list(seen)


def reconcile_frames(frames: Iterable[pl.DataFrame]) -> pl.DataFrame:
    """Stack frames by column name into a new DataFrame.

    The result carries the union of all columns in first-seen order. A row
    from a frame that lacks a column gets null (the absent marker) there,
    never zero or an empty string. Input frames are left untouched.
    """
    frames = [df for df in frames if df.width > 0]
    if not frames:
        return pl.DataFrame()
    if len(frames) == 1:
        return frames[0].clone()

    columns = column_union(frames)
    # diagonal_relaxed fills missing columns with null and supercasts clashing dtypes
    return pl.concat(frames, how="diagonal_relaxed").select(columns)
