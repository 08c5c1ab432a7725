"""
Resynthesis: turn an AnalysisResult plus a handful of 0-1 knobs into a ParameterSet.
"""
import time
from dataclasses import dataclass, asdict
from typing import Dict, Optional

from boom808.core.params import to_float
from boom808.core.pitch import hz_to_midi
from boom808.core.types import AnalysisResult, ParameterSet
from boom808.dsp.envelopes import clamp01
from boom808.params.resolve import resolve_params

# Undetermined pitch falls back to C1.
FALLBACK_FREQUENCY_HZ = 32.7
MIDI_LOW = 28.0
MIDI_HIGH = 48.0
# Roughly the middle of the engine's random base range (32..42).
GENERATOR_CENTER_MIDI = 36.0
RESYNTH_LENGTH_SECONDS = 1.6
RESYNTH_GAIN_DB = -1.5


@dataclass
class ResynthKnobs:
    harmonic_smooth: float = 0.5
    envelope_smooth: float = 0.5  # accepted, not mapped yet
    sub_weight: float = 0.5
    transient: float = 0.5
    distortion: float = 0.5
    noise_blend: float = 0.5
    glide: float = 0.5
    accuracy: float = 0.5

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, float]]) -> "ResynthKnobs":
        knobs = cls()
        if not isinstance(data, dict):
            return knobs
        for key, value in data.items():
            if hasattr(knobs, key):
                setattr(knobs, key, clamp01(to_float(value, getattr(knobs, key))))
        return knobs

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def target_midi(analysis: AnalysisResult) -> float:
    """Detected pitch as fractional MIDI, held inside the 808 range 28..48."""
    freq = analysis.dominant_frequency_hz if analysis.is_pitched else FALLBACK_FREQUENCY_HZ
    midi = hz_to_midi(freq)
    return max(MIDI_LOW, min(MIDI_HIGH, midi))


def params_from_analysis(
    analysis: AnalysisResult,
    knobs: Optional[ResynthKnobs] = None,
    seed: Optional[int] = None,
) -> ParameterSet:
    """
    Pre-fill a ParameterSet from analysis output.
    seed defaults to a time-based value, like pressing "generate" in the UI.
    """
    knobs = knobs or ResynthKnobs()
    if seed is None:
        seed = time.time_ns()

    return resolve_params({
        "seed": seed,
        "sample_rate": analysis.sample_rate if analysis.sample_rate > 0 else 44100.0,
        "length_seconds": RESYNTH_LENGTH_SECONDS,
        "tune_semitones": target_midi(analysis) - GENERATOR_CENTER_MIDI,
        "master_gain_db": RESYNTH_GAIN_DB,
        "sub_amount": knobs.sub_weight,
        "boom_amount": knobs.harmonic_smooth,
        "growl": knobs.distortion,
        "punch": knobs.transient,
        "detune": knobs.glide * 0.4,
        "analog": knobs.noise_blend * 0.6,
        "clean": 1.0 - knobs.accuracy,
    })
