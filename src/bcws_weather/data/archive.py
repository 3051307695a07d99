"""HTTP access to the BCWS Data Mart daily observation files.

Daily files are published as ``{base_url}{year}/{year}-{mm}-{dd}.csv`` and
hold one row per station per hour. Column sets drift over the years, so every
column is read as text and reconciled later by name.
"""

import io
import logging
import time

import polars as pl
import requests

from bcws_weather.config.download import DownloadSettings
from bcws_weather.data.calendar import CalendarDate
from bcws_weather.errors import ArchiveSchemaError

logger = logging.getLogger(__name__)

STATION_CODE = "STATION_CODE"
STATION_NAME = "STATION_NAME"
DATE_TIME = "DATE_TIME"
REQUIRED_COLUMNS = (STATION_CODE, STATION_NAME, DATE_TIME)

# HTTP codes worth another attempt; anything else (404 in particular) is final
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def daily_file_url(base_url: str, date: CalendarDate) -> str:
    """URL of the observation file for one day.

    Examples:
        >>> daily_file_url("https://host/mart/", CalendarDate(2023, 7, 4))
        'https://host/mart/2023/2023-07-04.csv'
    """
    if not base_url.endswith("/"):
        base_url += "/"
    return f"{base_url}{date.year}/{date.year}-{date.month:02d}-{date.day:02d}.csv"


def parse_observation_csv(content: bytes | str) -> pl.DataFrame:
    """Parse a daily file into a DataFrame of text columns.

    Raises:
        ArchiveSchemaError: If a required column is missing
        polars.exceptions.PolarsError: If the content is not parseable CSV
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    # Strip NULL bytes that occasionally appear in truncated uploads
    content = content.replace(b"\0", b"")

    df = pl.read_csv(io.BytesIO(content), infer_schema_length=0, encoding="utf8-lossy")
    df = df.rename({col: col.strip() for col in df.columns})

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ArchiveSchemaError(f"Missing required columns: {', '.join(missing)}")

    return df


class ArchiveClient:
    """Fetches and parses daily files, retrying transient network errors."""

    def __init__(
        self,
        settings: DownloadSettings | None = None,
        session: requests.Session | None = None,
    ):
        self.settings = settings if settings is not None else DownloadSettings()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.settings.user_agent})

    def url_for(self, date: CalendarDate) -> str:
        return daily_file_url(self.settings.base_url, date)

    def download(self, url: str) -> bytes:
        """Download a resource with exponential backoff on transient errors.

        Raises:
            requests.exceptions.RequestException: After the final attempt, or
                immediately for non-retryable HTTP errors such as 404
        """
        retry_count = 0

        while True:
            try:
                response = self.session.get(
                    url,
                    timeout=self.settings.timeout_seconds,
                    verify=self.settings.verify_ssl,
                )
                response.raise_for_status()
                return response.content

            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status not in RETRYABLE_STATUS_CODES:
                    raise
                retry_count += 1
                if retry_count >= self.settings.max_retries:
                    logger.debug(f"Giving up on {url} after {retry_count} attempts: {e}")
                    raise

            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                retry_count += 1
                if retry_count >= self.settings.max_retries:
                    logger.debug(f"Giving up on {url} after {retry_count} attempts: {e}")
                    raise

            wait_time = self.settings.retry_delay_seconds * 2 ** (retry_count - 1)
            logger.debug(
                f"Error fetching {url}. Retrying in {wait_time:.1f}s "
                f"(attempt {retry_count}/{self.settings.max_retries})"
            )
            time.sleep(wait_time)

    def fetch_day(self, date: CalendarDate) -> pl.DataFrame:
        """Download and parse the observation file for ``date``."""
        url = self.url_for(date)
        logger.debug(f"Fetching {url}")
        return parse_observation_csv(self.download(url))

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ArchiveClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
