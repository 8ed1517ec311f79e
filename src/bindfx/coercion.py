"""Value coercion between widget display values and typed observables.

Forward path (widget -> observable) rounds or parses native values into the
observable's element type. Parse failures are not errors here: try_parse
returns None and the caller restores the last good value.
"""

from __future__ import annotations

import math
from typing import NamedTuple

from bindfx.errors import TypeMismatchError
from bindfx.ranges import StepRange

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def _describe(eltype) -> str:
    if isinstance(eltype, tuple):
        return " | ".join(t.__name__ for t in eltype)
    return eltype.__name__


def convert(eltype, value):
    """Convert ``value`` to ``eltype`` or raise TypeMismatchError.

    ``None`` accepts anything. Ints widen to float; integral floats narrow
    to int; everything else must already be an instance.
    """
    if eltype is None or isinstance(value, eltype):
        return value
    if eltype is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if eltype is int and isinstance(value, float) and value.is_integer():
        return int(value)
    raise TypeMismatchError(
        f"cannot convert {value!r} ({type(value).__name__}) to {_describe(eltype)}"
    )


def compatible(declared, requested) -> bool:
    """Whether an observable declaring ``declared`` can serve as ``requested``."""
    if declared is None or requested is None:
        return True
    declared_types = declared if isinstance(declared, tuple) else (declared,)
    return all(issubclass(t, requested) for t in declared_types)


def round_to(eltype, value):
    """Round a native numeric value to ``eltype`` (half-to-even for int)."""
    if eltype is int:
        return int(round(value))
    if eltype is float:
        return float(value)
    return value


def try_parse(eltype, text: str):
    """Parse ``text`` as ``eltype``; returns None when it does not parse.

    Non-finite floats ("nan", "inf", "1e400") count as parse failures.
    """
    text = text.strip()
    if eltype is str:
        return text
    if eltype is bool:
        lowered = text.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        return None
    try:
        value = eltype(text)
    except (TypeError, ValueError):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def nearest(value, rng: StepRange | None):
    """Snap ``value`` onto ``rng`` (no-op without a range)."""
    if rng is None:
        return value
    return rng.nearest(value)


def format_value(value) -> str:
    """Display text for a value written into a text entry."""
    return "" if value is None else str(value)


class RGBA(NamedTuple):
    red: float
    green: float
    blue: float
    alpha: float = 1.0


class RGB(NamedTuple):
    red: float
    green: float
    blue: float


def to_rgba(color) -> RGBA:
    """Convert an RGB or RGBA colour to the native RGBA form."""
    if isinstance(color, RGBA):
        return color
    if isinstance(color, RGB):
        return RGBA(color.red, color.green, color.blue, 1.0)
    red, green, blue, *rest = color
    return RGBA(red, green, blue, rest[0] if rest else 1.0)


def from_rgba(rgba: RGBA, kind: type):
    """Convert a native RGBA colour to ``kind`` (RGB drops alpha)."""
    if kind is RGB:
        return RGB(rgba.red, rgba.green, rgba.blue)
    if kind is RGBA:
        return RGBA(*rgba)
    return kind(*rgba[:3])
