"""Exceptions raised by the BCWS downloader."""


class RequestValidationError(ValueError):
    """A download request was rejected before any file was fetched."""


class InvalidDateError(RequestValidationError):
    """A year/month/day triple does not name a real calendar date."""


class ArchiveSchemaError(ValueError):
    """A daily file is missing one of the columns every observation needs."""


class AmbiguousStationNameError(ValueError):
    """The assembled data carries more than one STATION_NAME."""


class FetchCancelled(Exception):
    """The operator cancelled a download between two fetch units."""
