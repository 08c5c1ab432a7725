"""
Param parsing utilities shared by the resolver and the DSP stages.
Everything here is tolerant: bad input degrades to a documented default, never raises.
"""
import math
from dataclasses import dataclass
from typing import Any, Optional


# -----------------------------------------------------------------------------
# Param definition (bounds + fallback used by params.resolve)
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ParamDef:
    """
    Definition of a single parameter.
    fallback: value substituted when the incoming value is NaN or not a number.
    """
    name: str
    default: Any
    min: Optional[float] = None
    max: Optional[float] = None
    unit: Optional[str] = None
    fallback: Optional[float] = None
    description: str = ""


def to_float(value: Any, default: float) -> float:
    """float(value), or default when value is not numeric or is NaN."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(v):
        return default
    return v


def clamp_if_bounds(
    value: float,
    min: Optional[float] = None,
    max: Optional[float] = None,
) -> float:
    """
    Clamp value to [min, max] when bounds are not None.
    If both are None, returns value unchanged.
    """
    try:
        v = float(value)
    except (TypeError, ValueError):
        return value
    if min is not None and v < min:
        return min
    if max is not None and v > max:
        return max
    return v


def sanitize(value: Any, pdef: ParamDef) -> float:
    """
    Coerce value against pdef: non-numeric/NaN -> fallback (or default), then clamp.
    +/-inf clamp to the bounds when bounds exist.
    """
    fallback = pdef.fallback if pdef.fallback is not None else pdef.default
    v = to_float(value, fallback)
    return clamp_if_bounds(v, pdef.min, pdef.max)


def round_half_away(x: float) -> int:
    """Round half away from zero (0.5 -> 1, -0.5 -> -1)."""
    return int(math.floor(abs(x) + 0.5)) * (1 if x >= 0 else -1)
