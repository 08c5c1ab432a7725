import torch
import numpy as np
from typing import Union


# -----------------------------------------------------------------------------
# Helpers (reusable across envelopes and instruments)
# -----------------------------------------------------------------------------

def db_to_lin(db: float) -> float:
    """Convert decibels to linear gain. 0 dB -> 1.0."""
    return 10.0 ** (db / 20.0)


def lin_to_db(gain: float) -> float:
    """Convert linear gain to decibels. Non-positive gain -> -inf."""
    if gain <= 0:
        return -np.inf
    return 20.0 * np.log10(gain)


def ms_to_s(ms: float) -> float:
    """Convert milliseconds to seconds."""
    return ms / 1000.0


def clamp01(x: Union[float, torch.Tensor]) -> Union[float, torch.Tensor]:
    """Clamp value(s) to [0, 1]. Accepts scalar or tensor."""
    if isinstance(x, torch.Tensor):
        return torch.clamp(x, 0.0, 1.0)
    return max(0.0, min(1.0, float(x)))


def time_axis(num_samples: int, sample_rate: float) -> torch.Tensor:
    """t[i] = i / sample_rate, float64."""
    return torch.arange(num_samples, dtype=torch.float64) / sample_rate


# -----------------------------------------------------------------------------
# One-shot envelopes
# -----------------------------------------------------------------------------

class Envelope:
    @staticmethod
    def attack_exp_decay(t: torch.Tensor, attack_s: float, decay_s: float) -> torch.Tensor:
        """
        Linear 0 -> 1 ramp over attack_s, then y(t) = e^(-(t - attack_s) / decay_s).
        Peaks at 1.0 where the ramp meets the decay; non-increasing afterwards.
        """
        decay_s = max(decay_s, 1e-6)
        if attack_s <= 0:
            return torch.exp(-t / decay_s)
        ramp = t / attack_s
        tail = torch.exp(-(t - attack_s) / decay_s)
        return torch.where(t < attack_s, ramp, tail)

    @staticmethod
    def pitch_glide(t: torch.Tensor, glide_s: float, drop_semitones: float) -> torch.Tensor:
        """
        Pitch multiplier. Inside the glide window the offset is -drop semitones decaying
        linearly to 0 at glide_s; 1.0 afterwards.
        """
        if glide_s <= 0:
            return torch.ones_like(t)
        frac = t / glide_s
        drop = drop_semitones * (1.0 - frac)
        mult = torch.pow(2.0, -drop / 12.0)
        return torch.where(t < glide_s, mult, torch.ones_like(t))
