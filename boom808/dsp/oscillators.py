"""
Oscillator generators with phase reset on trigger.
Every oscillator starts at phase 0 so seeded renders line up sample for sample.
"""

import torch
import numpy as np

TWO_PI = 2.0 * np.pi


class Oscillator:
    @staticmethod
    def accumulate_phase(increments: torch.Tensor) -> torch.Tensor:
        """
        Running phase for per-sample increments (radians/sample), wrapped to [0, 2*pi).

        Sample i sees the phase *before* its own increment is added:
            phase[0] = 0, phase[i] = (inc[0] + ... + inc[i-1]) mod 2*pi
        """
        if increments.numel() == 0:
            return increments.clone()
        total = torch.cumsum(increments, dim=-1)
        exclusive = total - increments
        return torch.remainder(exclusive, TWO_PI)

    @staticmethod
    def phase_from_frequency(frequency: torch.Tensor, sample_rate: float) -> torch.Tensor:
        """Accumulated phase for an instantaneous frequency track (Hz per sample)."""
        return Oscillator.accumulate_phase(TWO_PI * frequency / sample_rate)

    @staticmethod
    def sine(frequency: float, t: torch.Tensor, phase: float = 0.0) -> torch.Tensor:
        """
        Phase computed directly from t (not accumulated): sin(2*pi*f*t + phase).

        Args:
            frequency: Frequency (Hz)
            t: Time axis in seconds
            phase: Initial phase offset (radians)
        """
        return torch.sin(TWO_PI * frequency * t + phase)
