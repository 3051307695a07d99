"""Tests for the Data Mart client and daily file parsing."""

from unittest.mock import MagicMock

import polars as pl
import pytest
import requests

from bcws_weather.config.download import DownloadSettings
from bcws_weather.data.archive import ArchiveClient, daily_file_url, parse_observation_csv
from bcws_weather.data.calendar import CalendarDate
from bcws_weather.errors import ArchiveSchemaError

SAMPLE_CSV = (
    "STATION_CODE,STATION_NAME,DATE_TIME,HOURLY_PRECIPITATION,HOURLY_TEMPERATURE\n"
    "11,AFTON,2023070412,0,21.4\n"
    "1002,KAMLOOPS,2023070412,,23.0\n"
    "0011,PADDED,2023070412,0.2,19.9\n"
)


def make_response(status_code: int = 200, content: bytes = b"") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    if status_code >= 400:
        error = requests.exceptions.HTTPError(f"{status_code} Error", response=response)
        response.raise_for_status.side_effect = error
    return response


@pytest.fixture
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr("bcws_weather.data.archive.time.sleep", sleeps.append)
    return sleeps


def test_daily_file_url_layout():
    base = "https://www.for.gov.bc.ca/ftp/HPR/external/!publish/BCWS_DATA_MART/"
    assert daily_file_url(base, CalendarDate(2023, 1, 5)) == base + "2023/2023-01-05.csv"
    assert daily_file_url(base.rstrip("/"), CalendarDate(1999, 12, 31)) == base + "1999/1999-12-31.csv"


def test_parse_keeps_everything_as_text():
    df = parse_observation_csv(SAMPLE_CSV.encode())
    assert df.height == 3
    assert all(dtype == pl.String for dtype in df.dtypes)
    # Codes are compared as text, so leading zeros survive
    assert df["STATION_CODE"].to_list() == ["11", "1002", "0011"]
    assert df["DATE_TIME"][0] == "2023070412"


def test_parse_blank_field_is_null():
    df = parse_observation_csv(SAMPLE_CSV)
    assert df["HOURLY_PRECIPITATION"].to_list() == ["0", None, "0.2"]


def test_parse_strips_header_whitespace_and_nul_bytes():
    content = b"STATION_CODE , STATION_NAME,DATE_TIME\n11,AFTON,2023070400\0\n"
    df = parse_observation_csv(content)
    assert df.columns == ["STATION_CODE", "STATION_NAME", "DATE_TIME"]
    assert df["DATE_TIME"][0] == "2023070400"


def test_parse_survives_non_utf8_bytes_in_other_rows():
    content = (
        b"STATION_CODE,STATION_NAME,DATE_TIME\n"
        b"1002,KAMLOOPS,2023010112\n"
        b"55,MONTR\xe9AL LAKE,2023010112\n"
    )
    df = parse_observation_csv(content)

    assert df.height == 2
    kept = df.filter(pl.col("STATION_CODE") == "1002")
    assert kept["STATION_NAME"].to_list() == ["KAMLOOPS"]
    assert df["STATION_NAME"][1].startswith("MONTR")


def test_parse_missing_required_column():
    with pytest.raises(ArchiveSchemaError, match="DATE_TIME"):
        parse_observation_csv(b"STATION_CODE,STATION_NAME\n11,AFTON\n")


def test_fetch_day_requests_the_day_url():
    session = MagicMock()
    session.headers = {}
    session.get.return_value = make_response(content=SAMPLE_CSV.encode())
    client = ArchiveClient(DownloadSettings(base_url="https://example.org/mart"), session=session)

    df = client.fetch_day(CalendarDate(2023, 7, 4))

    assert df.height == 3
    url = session.get.call_args.args[0]
    assert url == "https://example.org/mart/2023/2023-07-04.csv"
    assert session.headers["User-Agent"].startswith("bcws-weather")


def test_missing_day_is_not_retried(no_sleep):
    session = MagicMock()
    session.headers = {}
    session.get.return_value = make_response(404)
    client = ArchiveClient(DownloadSettings(max_retries=3), session=session)

    with pytest.raises(requests.exceptions.HTTPError):
        client.fetch_day(CalendarDate(2023, 7, 4))
    assert session.get.call_count == 1
    assert no_sleep == []


def test_transient_errors_are_retried_with_backoff(no_sleep):
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = [
        requests.exceptions.ConnectionError("reset"),
        make_response(503),
        make_response(content=SAMPLE_CSV.encode()),
    ]
    client = ArchiveClient(
        DownloadSettings(max_retries=3, retry_delay_seconds=0.5), session=session
    )

    df = client.fetch_day(CalendarDate(2023, 7, 4))

    assert df.height == 3
    assert session.get.call_count == 3
    assert no_sleep == [0.5, 1.0]


def test_gives_up_after_max_retries(no_sleep):
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = requests.exceptions.Timeout("slow")
    client = ArchiveClient(DownloadSettings(max_retries=2), session=session)

    with pytest.raises(requests.exceptions.Timeout):
        client.download("https://example.org/x.csv")
    assert session.get.call_count == 2
    assert len(no_sleep) == 1


def test_client_context_manager_closes_session():
    session = MagicMock()
    session.headers = {}
    with ArchiveClient(session=session):
        pass
    session.close.assert_called_once()


def test_default_settings_are_not_shared_between_clients():
    first = ArchiveClient(session=MagicMock(headers={}))
    second = ArchiveClient(session=MagicMock(headers={}))

    first.settings.max_retries = 7

    assert second.settings is not first.settings
    assert second.settings.max_retries == 3
    assert ArchiveClient(session=MagicMock(headers={})).settings.max_retries == 3
