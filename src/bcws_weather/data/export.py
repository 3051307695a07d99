"""CSV export of an assembled dataset."""

import logging
from pathlib import Path

import polars as pl

logger = logging.getLogger(__name__)


def write_export(df: pl.DataFrame, path: Path | str, null_value: str = "") -> Path:
    """Write observations as CSV, header = every column seen in the data.

    Args:
        df: Observations to write
        path: Destination file; parent directories are created
        null_value: Text written for absent fields

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.write_csv(path, null_value=null_value)
    logger.info(f"Wrote {df.height} observations to {path}")
    return path
