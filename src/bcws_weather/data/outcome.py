"""Result of one fetch unit (a day, a year, or a whole range).

``Empty`` and ``Failed`` are both non-fatal: callers keep going and report
"no data" only once every unit has been tried. Failures collected along the
way travel with the outcome so they can be shown to the operator.
"""

from dataclasses import dataclass, field
from typing import Union

import polars as pl


@dataclass(frozen=True)
class UnitFailure:
    """A single day's (or year's) resource that could not be used."""

    unit: str
    reason: str

    def __str__(self) -> str:
        return f"{self.unit}: {self.reason}"


@dataclass(frozen=True, eq=False)
class Rows:
    data: pl.DataFrame
    failures: tuple[UnitFailure, ...] = field(default_factory=tuple)

    @property
    def height(self) -> int:
        return self.data.height


@dataclass(frozen=True)
class Empty:
    failures: tuple[UnitFailure, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Failed:
    reason: str

    @property
    def failures(self) -> tuple[UnitFailure, ...]:
        return ()


FetchOutcome = Union[Rows, Empty, Failed]


def has_rows(outcome: FetchOutcome) -> bool:
    """True only for ``Rows`` carrying at least one record."""
    return isinstance(outcome, Rows) and outcome.height > 0
