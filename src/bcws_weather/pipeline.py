"""End-to-end download pipeline for one station request.

Stages run in order::

    VALIDATING -> FETCHING -> ACCUMULATING -> NORMALIZING -> FILTERING -> NAMING -> DONE

and any of FETCHING, ACCUMULATING or FILTERING may end the run early with a
NO_DATA result, each with its own message. Nothing in here raises to the
caller: validation problems, cancellation and unexpected errors all come back
as a ``PipelineResult`` carrying the operator-facing status messages.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

import polars as pl
import requests

from bcws_weather.config.download import AppConfig
from bcws_weather.data.archive import ArchiveClient
from bcws_weather.data.assemble import MultiYearAssembler
from bcws_weather.data.date_spec import DateSpec, Frequency
from bcws_weather.data.naming import artifact_name, resolve_station_name
from bcws_weather.data.outcome import Failed, Rows, UnitFailure
from bcws_weather.data.sources import ConsolidatedSource, DailyFetcher, UnitCallback
from bcws_weather.data.transform import filter_frequency, normalize_timestamps
from bcws_weather.errors import FetchCancelled, RequestValidationError

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]

NO_DATA_MESSAGE = "No data found for the specified station and time period."
NO_NOON_MESSAGE = "No noon observations found in the dataset"
CANCELLED_MESSAGE = "Download cancelled; partial data discarded."


class Stage(str, Enum):
    VALIDATING = "validating"
    FETCHING = "fetching"
    ACCUMULATING = "accumulating"
    NORMALIZING = "normalizing"
    FILTERING = "filtering"
    NAMING = "naming"
    DONE = "done"


class ResultStatus(str, Enum):
    SUCCESS = "success"
    NO_DATA = "no_data"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DownloadRequest:
    """One station, one date window, one frequency."""

    station_code: str
    spec: DateSpec
    frequency: Frequency = Frequency.HOURLY

    @property
    def station(self) -> str:
        return self.station_code.strip()

    def validate(self) -> None:
        """Raises RequestValidationError for a blank station code."""
        if not self.station:
            raise RequestValidationError("Station code cannot be empty.")


@dataclass
class PipelineResult:
    """Outcome of a run: data and filename on success, a reason otherwise."""

    status: ResultStatus
    stage: Stage
    messages: list[str] = field(default_factory=list)
    data: pl.DataFrame | None = None
    filename: str | None = None
    reason: str | None = None
    failures: tuple[UnitFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @property
    def row_count(self) -> int:
        return 0 if self.data is None else self.data.height


class DownloadPipeline:
    """Runs requests through fetch, normalize, filter and naming.

    Args:
        assembler: Two-tier fetcher used for every request
        strict_station_name: Error out when the data carries several station names
        on_status: Receives every status message as it is produced
    """

    def __init__(
        self,
        assembler: MultiYearAssembler,
        strict_station_name: bool = False,
        on_status: StatusCallback | None = None,
    ):
        self.assembler = assembler
        self.strict_station_name = strict_station_name
        self.on_status = on_status

    def run(
        self,
        request: DownloadRequest,
        cancel: threading.Event | None = None,
        on_unit: UnitCallback | None = None,
    ) -> PipelineResult:
        messages: list[str] = []
        stage = Stage.VALIDATING
        failures: tuple[UnitFailure, ...] = ()

        def status(message: str) -> None:
            messages.append(message)
            logger.debug(message)
            if self.on_status is not None:
                self.on_status(message)

        def finish(result_status: ResultStatus, reason: str | None, **kwargs) -> PipelineResult:
            return PipelineResult(
                status=result_status,
                stage=stage,
                messages=messages,
                reason=reason,
                failures=failures,
                **kwargs,
            )

        try:
            request.validate()
        except RequestValidationError as e:
            status(f"Error: {e}")
            return finish(ResultStatus.ERROR, str(e))

        station = request.station
        status(request.spec.describe())

        try:
            stage = Stage.FETCHING
            status("Downloading weather data...")
            outcome = self.assembler.resolve(request.spec, station, cancel=cancel, on_unit=on_unit)
            failures = outcome.failures

            if failures:
                status(f"Skipped {len(failures)} files that could not be fetched or parsed")
            if isinstance(outcome, Failed):
                status(NO_DATA_MESSAGE)
                return finish(ResultStatus.NO_DATA, outcome.reason)
            if not isinstance(outcome, Rows):
                status(NO_DATA_MESSAGE)
                return finish(ResultStatus.NO_DATA, NO_DATA_MESSAGE)

            stage = Stage.ACCUMULATING
            data = outcome.data
            if data.height == 0:
                status(NO_DATA_MESSAGE)
                return finish(ResultStatus.NO_DATA, NO_DATA_MESSAGE)

            stage = Stage.NORMALIZING
            data = normalize_timestamps(data)

            stage = Stage.FILTERING
            frequency = Frequency(request.frequency)
            if frequency is Frequency.DAILY:
                status("Filtering for noon (12:00) observations only...")
                data = filter_frequency(data, frequency)
                if data.height == 0:
                    status(NO_NOON_MESSAGE)
                    return finish(ResultStatus.NO_DATA, NO_NOON_MESSAGE)

            stage = Stage.NAMING
            station_name = resolve_station_name(data, fallback=station, strict=self.strict_station_name)
            filename = artifact_name(station_name, request.spec, frequency)

        except FetchCancelled:
            status(CANCELLED_MESSAGE)
            return finish(ResultStatus.CANCELLED, CANCELLED_MESSAGE)
        except Exception as e:
            logger.exception(f"Download failed during {stage.value}")
            status(f"Error: {e}")
            return finish(ResultStatus.ERROR, str(e))

        stage = Stage.DONE
        status("Processing complete!")
        status(f"Number of observations: {data.height}")
        return finish(ResultStatus.SUCCESS, None, data=data, filename=filename)


def build_pipeline(
    config: AppConfig | None = None,
    consolidated: ConsolidatedSource | None = None,
    session: requests.Session | None = None,
    on_status: StatusCallback | None = None,
) -> DownloadPipeline:
    """Wire an ``ArchiveClient``-backed pipeline from settings."""
    config = config or AppConfig()
    client = ArchiveClient(config.download, session=session)
    daily = DailyFetcher(client, max_workers=config.download.max_concurrent_downloads)
    assembler = MultiYearAssembler(daily, consolidated=consolidated)
    return DownloadPipeline(
        assembler,
        strict_station_name=config.export.strict_station_name,
        on_status=on_status,
    )
