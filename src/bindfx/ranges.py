"""Step ranges and closed intervals used by ranged widgets.

StepRange is inclusive: ``StepRange(0, 10, 2)`` holds 0, 2, 4, 6, 8, 10.
Python ``range`` objects are accepted wherever a StepRange is expected and
are converted with their exclusive stop resolved to the last element.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Union

Number = Union[int, float]

# Relative tolerance for float grid arithmetic.
_EPS = 1e-9


@dataclass(frozen=True)
class StepRange:
    """An inclusive arithmetic progression ``start, start+step, ... <= stop``."""

    start: Number
    stop: Number
    step: Number = 1

    def __post_init__(self) -> None:
        if self.step == 0:
            raise ValueError("step cannot be zero")

    def __len__(self) -> int:
        n = math.floor((self.stop - self.start) / self.step + _EPS) + 1
        return max(n, 0)

    def __getitem__(self, index: int) -> Number:
        n = len(self)
        if index < 0:
            index += n
        if not 0 <= index < n:
            raise IndexError("StepRange index out of range")
        value = self.start + index * self.step
        if isinstance(value, float):
            # Trim float noise like 0.30000000000000004
            value = round(value, 12)
        return value

    def __iter__(self) -> Iterator[Number]:
        for i in range(len(self)):
            yield self[i]

    def __contains__(self, value) -> bool:
        if not isinstance(value, (int, float)) or isinstance(value, bool) or not self:
            return False
        lo, hi = min(self.first, self.last), max(self.first, self.last)
        if not lo <= value <= hi:
            return False
        k = (value - self.start) / self.step
        return math.isclose(k, round(k), abs_tol=_EPS)

    def __bool__(self) -> bool:
        return len(self) > 0

    @property
    def first(self) -> Number:
        return self[0]

    @property
    def last(self) -> Number:
        return self[-1]

    def median_element(self) -> Number:
        """The element at the middle index; unlike a median it is always a member."""
        return self[(len(self) - 1) // 2]

    def nearest(self, value: Number) -> Number:
        """Snap ``value`` to the closest grid point, clamped to the range."""
        i = round((value - self.start) / self.step)
        return self[min(max(i, 0), len(self) - 1)]

    def widened(self, slots: int = 1) -> StepRange:
        """This range extended by ``slots`` steps past each end."""
        return StepRange(self.start - slots * self.step, self.last + slots * self.step, self.step)

    def __str__(self) -> str:
        return f"{self.start}:{self.step}:{self.last}"


def as_step_range(r) -> StepRange:
    """Coerce a StepRange or a Python ``range`` to a StepRange."""
    if isinstance(r, StepRange):
        return r
    if isinstance(r, range):
        if len(r) == 0:
            raise ValueError(f"empty range {r!r}")
        return StepRange(r.start, r[-1], r.step)
    raise TypeError(f"expected a range or StepRange, got {type(r).__name__}")


def range_eltype(r: StepRange) -> type:
    """``int`` when every element of ``r`` is integral, else ``float``."""
    if all(isinstance(x, int) for x in (r.start, r.stop, r.step)):
        return int
    return float


@dataclass(frozen=True)
class Interval:
    """A closed interval ``[lo, hi]``."""

    lo: Number
    hi: Number

    @property
    def width(self) -> Number:
        return self.hi - self.lo

    def __contains__(self, value) -> bool:
        return self.lo <= value <= self.hi

    def fraction(self, value: Number) -> float:
        """Position of ``value`` in the interval as a number in [0, 1]."""
        if self.width == 0:
            return 0.0
        return (value - self.lo) / self.width

    def __str__(self) -> str:
        return f"{self.lo}..{self.hi}"


def as_interval(x) -> Interval:
    """Coerce an Interval, a range, or a ``(lo, hi)`` pair to an Interval."""
    if isinstance(x, Interval):
        return x
    if isinstance(x, (range, StepRange)):
        r = as_step_range(x)
        return Interval(r.first, r.last)
    lo, hi = x
    return Interval(lo, hi)
