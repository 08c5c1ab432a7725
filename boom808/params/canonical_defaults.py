"""
Canonical engine defaults: single source for synthesis initialization.
Used by resolve_params as the merge base and by the schema for NaN fallbacks.
"""

from typing import Dict, Any

DEFAULT_SAMPLE_RATE = 44100.0
DEFAULT_LENGTH_SECONDS = 1.5

# Field defaults of a fresh ParameterSet (all descriptors off).
ENGINE_DEFAULTS: Dict[str, Any] = {
    "seed": 0,
    "sample_rate": DEFAULT_SAMPLE_RATE,
    "length_seconds": DEFAULT_LENGTH_SECONDS,
    "tune_semitones": 0.0,
    "master_gain_db": 0.0,
    "sub_amount": 0.0,
    "boom_amount": 0.0,
    "shortness": 0.0,
    "punch": 0.0,
    "growl": 0.0,
    "detune": 0.0,
    "analog": 0.0,
    "clean": 0.0,
}

# Substituted for NaN / non-numeric descriptor input.
# Same values the editor and batch renderer fall back to when no last params exist.
FALLBACK_DEFAULTS: Dict[str, float] = {
    "sub_amount": 0.6,
    "boom_amount": 0.4,
    "shortness": 0.0,
    "punch": 0.55,
    "growl": 0.2,
    "detune": 0.05,
    "analog": 0.08,
    "clean": 0.0,
    "tune_semitones": 0.0,
    "master_gain_db": 0.0,
}
