import math
from typing import Optional

NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")


def midi_to_hz(midi: float) -> float:
    return 440.0 * 2.0 ** ((midi - 69.0) / 12.0)


def hz_to_midi(freq_hz: float) -> Optional[float]:
    """Fractional MIDI note for freq_hz; None when freq_hz <= 0."""
    if not freq_hz or freq_hz <= 0 or math.isnan(freq_hz):
        return None
    return 69.0 + 12.0 * math.log2(freq_hz / 440.0)


def semitones_to_ratio(semitones: float) -> float:
    return 2.0 ** (semitones / 12.0)


def note_name(midi: int) -> str:
    """e.g. 33 -> 'A1', 60 -> 'C4'."""
    return f"{NOTE_NAMES[(midi + 120) % 12]}{midi // 12 - 1}"


def nearest_note(freq_hz: float) -> Optional[int]:
    midi = hz_to_midi(freq_hz)
    if midi is None:
        return None
    return int(math.floor(midi + 0.5))
