"""Handle-based access to Calculator instances.

Callers that cannot hold Python objects (HTTP clients, foreign callers) refer to
a calculator by an integer handle. Every operation takes and returns primitives
only. Failures never propagate out of this layer: an unknown handle, an I/O
error, a malformed token or an empty dataset is logged and degrades to a no-op
or a zero result.
"""
from __future__ import annotations

import logging
import os
from typing import Callable, Iterator, TypeVar, Union

from statscalc.services.calculator import Calculator
from statscalc.services.errors import StatsCalcError

__all__: list[str] = [
    "HandleRegistry",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures swallowed at the handle boundary: I/O, bad or undecodable input,
# empty datasets, and values float() rejects or cannot represent
_SWALLOWED = (OSError, StatsCalcError, ValueError, ArithmeticError)

PathArg = Union[str, os.PathLike]


class HandleRegistry:
    """Owns Calculator instances keyed by integer handle.

    A new handle is one greater than the largest live handle, or 0 when the
    registry is empty.
    """

    def __init__(self) -> None:
        self._calculators: dict[int, Calculator] = {}

    def __len__(self) -> int:
        return len(self._calculators)

    def __contains__(self, handle: object) -> bool:
        return handle in self._calculators

    def __iter__(self) -> Iterator[int]:
        return iter(self.handles())

    def handles(self) -> list[int]:
        return sorted(self._calculators)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def create(self) -> int:
        handle = max(self._calculators) + 1 if self._calculators else 0
        self._calculators[handle] = Calculator()
        logger.debug("created calculator handle=%d live=%d", handle, len(self._calculators))
        return handle

    def destroy(self, handle: int) -> None:
        if self._calculators.pop(handle, None) is None:
            logger.debug("destroy ignored, unknown handle=%d", handle)
            return
        logger.debug("destroyed calculator handle=%d live=%d", handle, len(self._calculators))

    def lookup(self, handle: int) -> Calculator | None:
        return self._calculators.get(handle)

    # ------------------------------------------------------------------
    # Delegated operations
    # ------------------------------------------------------------------
    def _call(self, handle: int, op: str, fn: Callable[[Calculator], T], default: T) -> T:
        calc = self.lookup(handle)
        if calc is None:
            logger.warning("%s: unknown handle=%d", op, handle)
            return default
        try:
            return fn(calc)
        except _SWALLOWED as exc:
            logger.warning("%s failed for handle=%d: %s", op, handle, exc)
            return default

    def append_value(self, handle: int, value: float) -> None:
        self._call(handle, "append_value", lambda c: c.append_value(value), None)

    def read_file(self, handle: int, path: PathArg) -> None:
        self._call(handle, "read_file", lambda c: c.read_from(path), None)

    def write_stats(self, handle: int, path: PathArg) -> None:
        self._call(handle, "write_stats", lambda c: c.write_summary_to(path), None)

    def get_sum(self, handle: int) -> float:
        return self._call(handle, "get_sum", Calculator.get_sum, 0.0)

    def get_mean(self, handle: int) -> float:
        return self._call(handle, "get_mean", Calculator.get_mean, 0.0)

    def get_std_dev(self, handle: int) -> float:
        return self._call(handle, "get_std_dev", Calculator.get_standard_deviation, 0.0)

    def get_count(self, handle: int) -> int:
        return self._call(handle, "get_count", len, 0)
