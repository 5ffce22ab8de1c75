"""Exception types raised by the calculator layer."""
from __future__ import annotations

__all__: list[str] = [
    "StatsCalcError",
    "ParseError",
    "EmptyDatasetError",
]


class StatsCalcError(Exception):
    """Base class for calculator failures."""


class ParseError(StatsCalcError, ValueError):
    """A token in the input could not be converted to a number."""

    def __init__(self, token: str, line: int | None = None, message: str | None = None):
        self.token = token
        self.line = line
        where = f" on line {line}" if line is not None else ""
        super().__init__(message or f"invalid numeric token {token!r}{where}")


class EmptyDatasetError(StatsCalcError, ValueError):
    """The requested statistic is undefined for an empty dataset."""
