"""CLI for downloading BCWS weather station observations.

Fetches the daily Data Mart files covering a year, a year range, or an
exact date range, keeps one station's rows, and writes them to a single CSV.

Usage:
    bcws-weather download 1002 --year 2023
    bcws-weather download 1002 --years 2020:2023 --dailies
    bcws-weather download 1002 --start 2023-01-01 --end 2023-01-31 -o exports/
    bcws-weather day-url 2023-07-04
"""

import logging
import signal
import threading
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from bcws_weather.config.download import AppConfig
from bcws_weather.config.paths import ensure_directories, get_export_path
from bcws_weather.data.archive import daily_file_url
from bcws_weather.data.calendar import CalendarDate, days_between, is_leap_year, parse_iso_date
from bcws_weather.data.date_spec import DateSpec, ExactRange, Frequency
from bcws_weather.data.export import write_export
from bcws_weather.errors import RequestValidationError
from bcws_weather.pipeline import DownloadRequest, ResultStatus, build_pipeline
from bcws_weather.utils.parsing import build_date_spec, parse_station_code
from bcws_weather.utils.progress import (
    create_fetch_progress,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
    status_spinner,
)

app = typer.Typer(help="Download BC Wildfire Service weather station observations.")
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else (logging.WARNING if quiet else logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_config(config_file: Path | None) -> AppConfig:
    if config_file is None:
        return AppConfig()
    if not config_file.exists():
        print_error(f"Config file not found: {config_file}")
        raise typer.Exit(1)
    try:
        return AppConfig.from_file(config_file)
    except ValidationError as e:
        print_error(f"Invalid config file {config_file}:\n{e}")
        raise typer.Exit(1)


def count_days(spec: DateSpec) -> int:
    """Number of daily files a spec walks when no consolidated file is used."""
    if isinstance(spec, ExactRange):
        return days_between(spec.start_date, spec.end_date) + 1
    return sum(366 if is_leap_year(year) else 365 for year in spec.years())


@app.command()
def download(
    station: str = typer.Argument(..., help="BCWS station code, e.g. 1002"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Single year"),
    years: Optional[str] = typer.Option(None, "--years", help="Year range, e.g. 2020:2023"),
    start: Optional[str] = typer.Option(None, "--start", help="First day (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", help="Last day (YYYY-MM-DD)"),
    dailies: bool = typer.Option(
        False,
        "--dailies",
        help="Keep only the noon (12:00) observation of each day",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the CSV export (default: data/exports)",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML or JSON settings file with download:/export: sections",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Daily files fetched concurrently (overrides the config file)",
        min=1,
        max=32,
    ),
    strict_station_name: bool = typer.Option(
        False,
        "--strict-station-name",
        help="Fail if the data carries more than one station name",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet output"),
) -> None:
    """Download one station's observations and write them to CSV."""
    setup_logging(verbose, quiet)

    config = load_config(config_file)
    if workers is not None:
        config.download.max_concurrent_downloads = workers
    if output_dir is not None:
        config.export.output_dir = output_dir
    if strict_station_name:
        config.export.strict_station_name = True

    # Reject bad input before any network activity
    try:
        station_code = parse_station_code(station)
        spec = build_date_spec(year=year, years=years, start_date=start, end_date=end)
    except RequestValidationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    frequency = Frequency.DAILY if dailies else Frequency.HOURLY
    request = DownloadRequest(station_code=station_code, spec=spec, frequency=frequency)
    pipeline = build_pipeline(config, on_status=print_info)

    cancel = threading.Event()

    def request_cancel(signum, frame) -> None:
        print_warning("Cancelling after the files in flight...")
        cancel.set()

    previous_handler = signal.signal(signal.SIGINT, request_cancel)
    try:
        with create_fetch_progress() as progress:
            task = progress.add_task(
                f"Station {station_code}", total=count_days(spec), failed=0
            )
            failed = 0

            def on_unit(date: CalendarDate, succeeded: bool) -> None:
                nonlocal failed
                if not succeeded:
                    failed += 1
                progress.update(task, advance=1, failed=failed)

            result = pipeline.run(request, cancel=cancel, on_unit=on_unit)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if result.status is ResultStatus.CANCELLED:
        print_warning(result.reason or "Cancelled")
        raise typer.Exit(130)
    if not result.ok:
        print_error(result.reason or "Download failed")
        for failure in result.failures[:10]:
            logger.debug(f"Unavailable: {failure}")
        raise typer.Exit(1)

    ensure_directories(config.export.output_dir)
    export_path = get_export_path(result.filename, config.export.output_dir)
    with status_spinner(f"Writing {export_path.name}..."):
        write_export(result.data, export_path, null_value=config.export.null_value)

    print_summary_table(
        "Download Summary",
        {
            "Station": station_code,
            "Frequency": frequency.value,
            "Observations": result.row_count,
            "Columns": result.data.width,
            "Unavailable files": len(result.failures),
            "Output": export_path,
        },
    )
    print_success(f"Saved {export_path}")


@app.command("day-url")
def day_url(
    date: str = typer.Argument(..., help="Day (YYYY-MM-DD)"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings file"),
) -> None:
    """Print the Data Mart URL of one day's observation file."""
    config = load_config(config_file)
    try:
        day = parse_iso_date(date)
    except RequestValidationError as e:
        print_error(str(e))
        raise typer.Exit(1)
    typer.echo(daily_file_url(config.download.base_url, day))


if __name__ == "__main__":
    app()
