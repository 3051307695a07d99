"""Assemble BC Wildfire Service weather station observations from the BCWS Data Mart."""

from bcws_weather.data.date_spec import ExactRange, Frequency, SingleYear, YearRange
from bcws_weather.pipeline import (
    DownloadPipeline,
    DownloadRequest,
    PipelineResult,
    ResultStatus,
    build_pipeline,
)

__version__ = "0.1.0"

__all__ = [
    "DownloadPipeline",
    "DownloadRequest",
    "ExactRange",
    "Frequency",
    "PipelineResult",
    "ResultStatus",
    "SingleYear",
    "YearRange",
    "build_pipeline",
]
