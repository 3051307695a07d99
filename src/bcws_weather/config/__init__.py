"""Configuration management for the BCWS downloader."""

from bcws_weather.config.base import BaseConfig
from bcws_weather.config.download import (
    BCWS_DATA_MART_URL,
    AppConfig,
    DownloadSettings,
    ExportSettings,
)
from bcws_weather.config.paths import (
    EXPORT_DIR,
    ensure_directories,
    get_export_path,
)

__all__ = [
    "BaseConfig",
    "AppConfig",
    "DownloadSettings",
    "ExportSettings",
    "BCWS_DATA_MART_URL",
    "EXPORT_DIR",
    "ensure_directories",
    "get_export_path",
]
