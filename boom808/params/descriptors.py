"""
Descriptor-to-parameter mapping.
Each selected keyword token carries an intensity in [0, 1] and adds a scaled amount
onto one ParameterSet field; descriptor fields are clamped back into [0, 1].
"""
import logging
from dataclasses import replace
from typing import Dict, Tuple, Union

from boom808.core.params import to_float
from boom808.core.types import ParameterSet
from boom808.dsp.envelopes import clamp01
from boom808.params.resolve import resolve_params

logger = logging.getLogger(__name__)

# token -> (field, amount added at intensity 1.0)
DESCRIPTOR_MAP: Dict[str, Tuple[str, float]] = {
    "sub": ("sub_amount", 0.6),
    "boomy": ("boom_amount", 0.5),
    "short": ("shortness", 0.9),
    "punchy": ("punch", 0.8),
    "growl": ("growl", 0.75),
    "detuned": ("detune", 0.8),
    "analog": ("analog", 0.6),
    "clean": ("clean", 1.0),
    "deep": ("sub_amount", 0.4),
    "saturated": ("master_gain_db", 0.5),
}

# Fields that are not 0-1 intensities; their sum is left to resolve_params' bounds.
_UNBOUNDED_FIELDS = frozenset({"master_gain_db"})


def _intensity(value) -> float:
    return clamp01(to_float(value, 0.0))


def apply_descriptors(
    params: Union[ParameterSet, dict, None],
    selections: Dict[str, float],
) -> ParameterSet:
    """
    Apply selected descriptor tokens to params, in selection order.

    Args:
        params: Base ParameterSet (or dict of fields)
        selections: token -> intensity (0-1). Unknown tokens are ignored.

    Returns a new, resolved ParameterSet.
    """
    current = resolve_params(params)
    updates: Dict[str, float] = {}

    for token, raw_intensity in (selections or {}).items():
        entry = DESCRIPTOR_MAP.get(str(token).lower())
        if entry is None:
            logger.debug("Ignoring unknown descriptor token: %s", token)
            continue
        field_name, amount = entry
        base = updates.get(field_name, getattr(current, field_name))
        value = base + amount * _intensity(raw_intensity)
        if field_name not in _UNBOUNDED_FIELDS:
            value = clamp01(value)
        updates[field_name] = value

    if not updates:
        return current
    return resolve_params(replace(current, **updates))
