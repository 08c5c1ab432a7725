"""
Stereo width: duplicate mono to L/R, then blend a micro-delayed copy into the right channel.
The LFO runs once across the whole buffer (phase = 0.8 * 2*pi * i / n), not in Hz.
"""
import torch
import numpy as np

DETUNE_EPSILON = 1e-3
LFO_RATE = 0.8
LFO_DEPTH_S = 0.0005
DELAY_SCALE = 20.0
DRY_RIGHT = 0.6
WET_LEFT = 0.4


def _round_half_away(x: torch.Tensor) -> torch.Tensor:
    return torch.sign(x) * torch.floor(torch.abs(x) + 0.5)


class StereoImager:
    @staticmethod
    def delay_offsets(num_samples: int, sample_rate: float, detune: float) -> torch.Tensor:
        """Integer delay (samples) applied at each index when building the right channel."""
        i = torch.arange(num_samples, dtype=torch.float64)
        mod = LFO_DEPTH_S * torch.sin(2.0 * np.pi * LFO_RATE * i / num_samples)
        return _round_half_away(mod * sample_rate * detune * DELAY_SCALE).long()

    @staticmethod
    def widen(mono: torch.Tensor, sample_rate: float, detune: float) -> torch.Tensor:
        """
        Returns (2, n). Channels stay identical when detune is below 1e-3.
        Otherwise right[i] = 0.6 * right[i] + 0.4 * left[clamp(i - delay[i], 0, n - 1)].
        """
        mono = mono.view(-1)
        stereo = torch.stack([mono.clone(), mono.clone()])
        n = mono.shape[-1]
        if detune < DETUNE_EPSILON or n == 0:
            return stereo

        delays = StereoImager.delay_offsets(n, sample_rate, detune)
        idx = torch.clamp(torch.arange(n) - delays, 0, n - 1)
        left = stereo[0]
        stereo[1] = DRY_RIGHT * stereo[1] + WET_LEFT * left[idx]
        return stereo
