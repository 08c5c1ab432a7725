"""
Engine params contract: only ParameterSet fields pass through here to the resolver.
Also holds the environment-driven settings shared by the service and the CLI.
"""
from typing import Dict, Any, Tuple
import os
import logging

from boom808.params.schema import PARAM_SCHEMA, PARAM_ALIASES

logger = logging.getLogger("boom808")

DEV = os.environ.get("ENV", "development").lower() in ("development", "dev", "test")

SUPPORTED_BIT_DEPTHS = (16, 24, 32)


def _env_float(name: str, default: float) -> float:
    try:
        value = float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _env_bit_depth(name: str, default: int) -> int:
    try:
        value = int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value in SUPPORTED_BIT_DEPTHS else default


SERVICE_SAMPLE_RATE = _env_float("BOOM808_SAMPLE_RATE", 44100.0)
EXPORT_BIT_DEPTH = _env_bit_depth("BOOM808_BIT_DEPTH", 24)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def split_engine_params(raw: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Split a request body into (engine fields, everything else).
    camelCase aliases are renamed to their snake_case field names.
    """
    engine: Dict[str, Any] = {}
    rest: Dict[str, Any] = {}
    for key, value in (raw or {}).items():
        name = PARAM_ALIASES.get(key, key)
        if name in PARAM_SCHEMA:
            engine[name] = value
        else:
            rest[key] = value
    return engine, rest


def to_engine_params(raw: Dict[str, Any], allowed_extra: Tuple[str, ...] = ()) -> Dict[str, Any]:
    """
    Normalize raw request body to engine params: unknown keys are dropped.
    This is the single entry point for dict params that reach resolve_params.
    """
    engine, rest = split_engine_params(raw)
    unknown = [k for k in rest if k not in allowed_extra]
    if unknown and DEV:
        logger.warning("[Parameter Contract] Unknown fields stripped before engine: %s", unknown)
    return engine
