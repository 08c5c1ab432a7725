"""
Parameter schema: bounds, units, fallbacks and UI descriptions for every ParameterSet field.
"""
from typing import Dict, Optional

from boom808.core.params import ParamDef
from boom808.params.canonical_defaults import ENGINE_DEFAULTS, FALLBACK_DEFAULTS


def _make_param(
    name: str,
    min_val: Optional[float],
    max_val: Optional[float],
    unit: Optional[str],
    description: str,
) -> ParamDef:
    """Helper to create a schema entry with canonical default and fallback."""
    return ParamDef(
        name=name,
        default=ENGINE_DEFAULTS[name],
        min=min_val,
        max=max_val,
        unit=unit,
        fallback=FALLBACK_DEFAULTS.get(name),
        description=description,
    )


# -----------------------------------------------------------------------------
# PARAM_SCHEMA
# -----------------------------------------------------------------------------

PARAM_SCHEMA: Dict[str, ParamDef] = {
    "seed": _make_param("seed", None, None, None, "64-bit seed for every random choice in a render"),
    "sample_rate": _make_param("sample_rate", None, None, "Hz", "Render sample rate (<= 0 -> 44100)"),
    "length_seconds": _make_param("length_seconds", None, None, "s", "Output length (<= 0 -> 1.5 s)"),
    "tune_semitones": _make_param("tune_semitones", -48.0, 48.0, "st", "Offset on the random base pitch"),
    "master_gain_db": _make_param("master_gain_db", -120.0, 24.0, "dB", "Output gain before the soft clip"),
    # Descriptor intensities
    "sub_amount": _make_param("sub_amount", 0.0, 1.0, None, "Lowers pitch up to 2 st and adds a sine one octave down"),
    "boom_amount": _make_param("boom_amount", 0.0, 1.0, None, "Longer decay and low-shelf boost"),
    "shortness": _make_param("shortness", 0.0, 1.0, None, "Compresses the decay"),
    "punch": _make_param("punch", 0.0, 1.0, None, "Depth of the initial pitch glide"),
    "growl": _make_param("growl", 0.0, 1.0, None, "Harmonic-phase modulation"),
    "detune": _make_param("detune", 0.0, 1.0, None, "Micro-delay stereo width"),
    "analog": _make_param("analog", 0.0, 1.0, None, "Noise floor and saturation drive"),
    "clean": _make_param("clean", 0.0, 1.0, None, "Carried for presets; no DSP effect"),
}

# camelCase spellings accepted from JSON clients and presets.
PARAM_ALIASES: Dict[str, str] = {
    "sampleRate": "sample_rate",
    "lengthSeconds": "length_seconds",
    "tuneSemitones": "tune_semitones",
    "masterGainDb": "master_gain_db",
    "subAmount": "sub_amount",
    "boomAmount": "boom_amount",
}
