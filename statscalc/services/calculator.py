"""Accumulate numeric samples and compute sum, mean and sample standard deviation."""
from __future__ import annotations

import math
import os
import sys
from typing import Iterable, TextIO, Union

from statscalc.services.errors import EmptyDatasetError, ParseError

__all__: list[str] = [
    "Calculator",
    "SUMMARY_PRECISION",
    "parse_numbers",
]

# Decimal places used in the printed/written summary
SUMMARY_PRECISION = 6

Source = Union[str, os.PathLike, TextIO]


def parse_numbers(lines: Iterable[str]) -> list[float]:
    """
    Split each line on whitespace and convert every token to float.
    Raises ParseError for the first token float() rejects, or if the
    underlying stream cannot be decoded as text.
    """
    values: list[float] = []
    try:
        for lineno, line in enumerate(lines, start=1):
            for token in line.split():
                try:
                    values.append(float(token))
                except ValueError as exc:
                    raise ParseError(token, lineno) from exc
    except UnicodeDecodeError as exc:
        bad = exc.object[exc.start:exc.end]
        raise ParseError(
            repr(bad),
            message=f"input is not valid {exc.encoding} text (byte {bad!r} at offset {exc.start})",
        ) from exc
    return values


def _total(values: Iterable[float]) -> float:
    # fsum raises on overflow and on inf + -inf; plain sum yields inf/nan instead
    values = list(values)
    try:
        return math.fsum(values)
    except (OverflowError, ValueError):
        return float(sum(values))


class Calculator:
    """Append-only collection of samples with on-demand statistics."""

    def __init__(self) -> None:
        self._values: list[float] = []

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Calculator(count={len(self._values)})"

    @property
    def count(self) -> int:
        return len(self._values)

    @property
    def values(self) -> tuple[float, ...]:
        # Read-only view; samples are only added via append_value/read_from
        return tuple(self._values)

    def append_value(self, value: float) -> None:
        self._values.append(float(value))

    def read_from(self, source: Source) -> int:
        """
        Read whitespace-separated numbers from a path or an open text stream.

        Nothing is appended if any token fails to parse. OSError from opening or
        reading a path propagates. Returns the number of samples added.
        """
        if hasattr(source, "read"):
            parsed = parse_numbers(source)  # type: ignore[arg-type]
        else:
            with open(source, "r", encoding="utf-8") as fh:  # type: ignore[arg-type]
                parsed = parse_numbers(fh)
        self._values.extend(parsed)
        return len(parsed)

    def get_sum(self) -> float:
        """Overflow yields inf (nan for inf + -inf) instead of raising."""
        return _total(self._values)

    def get_mean(self) -> float:
        """Raises EmptyDatasetError if no samples have been added."""
        if not self._values:
            raise EmptyDatasetError("mean is undefined for an empty dataset")
        return self.get_sum() / len(self._values)

    def get_standard_deviation(self) -> float:
        """
        Sample standard deviation (divisor n - 1).
        Returns 0.0 when fewer than two samples are stored; overflowing or
        non-finite samples give inf or nan.
        """
        n = len(self._values)
        if n < 2:
            return 0.0
        avg = self.get_mean()
        return math.sqrt(_total((x - avg) * (x - avg) for x in self._values) / (n - 1))

    def summary_lines(self) -> list[str]:
        p = SUMMARY_PRECISION
        mean = f"{self.get_mean():.{p}f}" if self._values else "undefined"
        return [
            f"Count: {self.count}",
            f"Sum: {self.get_sum():.{p}f}",
            f"Mean: {mean}",
            f"Standard Deviation: {self.get_standard_deviation():.{p}f}",
        ]

    def write_summary_to(self, sink: Source) -> None:
        """Write the summary to a path (truncating it) or an open text stream."""
        text = "\n".join(self.summary_lines()) + "\n"
        if hasattr(sink, "write"):
            sink.write(text)  # type: ignore[union-attr]
            return
        with open(sink, "w", encoding="utf-8") as fh:  # type: ignore[arg-type]
            fh.write(text)

    def print_summary(self) -> None:
        self.write_summary_to(sys.stdout)
