"""Download and export settings for the BCWS Data Mart."""

from pathlib import Path

from pydantic import Field, field_validator

from bcws_weather.config.base import BaseConfig
from bcws_weather.config.paths import EXPORT_DIR

BCWS_DATA_MART_URL = "https://www.for.gov.bc.ca/ftp/HPR/external/!publish/BCWS_DATA_MART/"


class DownloadSettings(BaseConfig):
    """Configuration for fetching daily observation files."""

    base_url: str = Field(
        default=BCWS_DATA_MART_URL,
        description="Root of the Data Mart; daily files live under {year}/{year}-{mm}-{dd}.csv",
    )

    # Network settings
    timeout_seconds: int = Field(default=60, ge=1, le=3600)
    max_retries: int = Field(default=3, ge=1, le=10)
    retry_delay_seconds: float = Field(default=1.0, ge=0.0, le=60.0)
    max_concurrent_downloads: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Worker threads per date range; 1 fetches days strictly one at a time",
    )

    verify_ssl: bool = Field(default=True)
    user_agent: str = Field(default="bcws-weather/0.1.0")

    @field_validator("base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("base_url cannot be empty")
        return value if value.endswith("/") else value + "/"


class ExportSettings(BaseConfig):
    """Configuration for the CSV export and artifact naming."""

    output_dir: Path = Field(default=EXPORT_DIR, description="Directory the CSV export is written to")
    null_value: str = Field(default="", description="Text written for absent fields")
    strict_station_name: bool = Field(
        default=False,
        description="Fail instead of warning when the data carries several station names",
    )


class AppConfig(BaseConfig):
    """Top-level settings file layout (``download:`` and ``export:`` sections)."""

    download: DownloadSettings = Field(default_factory=DownloadSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
