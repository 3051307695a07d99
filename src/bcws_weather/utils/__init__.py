"""Utility functions for the BCWS downloader."""

from bcws_weather.utils.parsing import build_date_spec, parse_station_code, parse_year_range

__all__ = [
    "build_date_spec",
    "parse_station_code",
    "parse_year_range",
]
