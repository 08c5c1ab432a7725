"""
Parameter resolution: merge ENGINE_DEFAULTS with incoming params, then sanitize every field.
The pipeline calls this on every render; callers are never trusted to have clamped anything.
"""
import math
import logging
from dataclasses import fields
from typing import Dict, Any, Union

from boom808.core.params import sanitize, to_float, round_half_away
from boom808.core.rng import SEED_MASK
from boom808.core.types import ParameterSet
from boom808.params.canonical_defaults import (
    ENGINE_DEFAULTS,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_LENGTH_SECONDS,
)
from boom808.params.engine_params import to_engine_params
from boom808.params.schema import PARAM_SCHEMA

logger = logging.getLogger(__name__)

_FIELD_NAMES = tuple(f.name for f in fields(ParameterSet))


def _resolve_seed(value: Any) -> int:
    """Any integral value, folded to unsigned 64 bits. Bad input -> 0."""
    if isinstance(value, bool):
        return int(value)
    try:
        if isinstance(value, float):
            if not math.isfinite(value):
                return 0
            value = int(value)
        return int(value) & SEED_MASK
    except (TypeError, ValueError, OverflowError):
        return 0


def _resolve_positive(value: Any, default: float) -> float:
    """Non-finite or non-positive -> default; any other value passes through unchanged."""
    v = to_float(value, default)
    if not math.isfinite(v) or v <= 0:
        return default
    return v


def resolve_params(params: Union[ParameterSet, Dict[str, Any], None] = None) -> ParameterSet:
    """
    Resolve params by:
    1. Starting from ENGINE_DEFAULTS
    2. Overlaying incoming fields (ParameterSet or dict; camelCase aliases accepted)
    3. Sanitizing every field: NaN -> documented fallback, out of range -> nearest bound,
       non-positive sample_rate -> 44100, non-positive length -> 1.5 s

    Never raises. Returns a new ParameterSet; the input is not modified.
    """
    if isinstance(params, ParameterSet):
        incoming = params.to_dict()
    else:
        incoming = to_engine_params(params or {})

    merged = {**ENGINE_DEFAULTS, **incoming}
    resolved: Dict[str, Any] = {}

    resolved["seed"] = _resolve_seed(merged["seed"])
    resolved["sample_rate"] = _resolve_positive(merged["sample_rate"], DEFAULT_SAMPLE_RATE)
    resolved["length_seconds"] = _resolve_positive(merged["length_seconds"], DEFAULT_LENGTH_SECONDS)
    for name in _FIELD_NAMES:
        if name in resolved:
            continue
        resolved[name] = float(sanitize(merged[name], PARAM_SCHEMA[name]))

    changed = [k for k in _FIELD_NAMES if k in incoming and _differs(incoming[k], resolved[k])]
    if changed:
        logger.debug("Corrected out-of-range params: %s", {k: incoming[k] for k in changed})

    return ParameterSet(**resolved)


def _differs(raw: Any, resolved: Any) -> bool:
    try:
        return float(raw) != float(resolved)
    except (TypeError, ValueError, OverflowError):
        return True


def num_samples(params: ParameterSet) -> int:
    """round(sample_rate * length_seconds) for an already resolved ParameterSet."""
    return max(0, round_half_away(params.sample_rate * params.length_seconds))
