"""
Audio filters built on torchaudio's lfilter.
All filters are IIR (minimum-phase) to avoid pre-ringing on transients.
Output is never clamped inside a filter; the saturation stage owns the range.
"""

from typing import Tuple

import torch
import torchaudio.functional as F
import numpy as np


def _safe_cutoff(cutoff_freq: float, sample_rate: float) -> float:
    """Keep the cutoff strictly below Nyquist."""
    return max(1e-3, min(cutoff_freq, 0.49 * sample_rate))


class Filter:
    @staticmethod
    def lowpass_coefficients(sample_rate: float, cutoff_freq: float, q: float = 0.707) -> Tuple[list, list]:
        """
        RBJ cookbook low-pass biquad, normalised so a0 == 1.
        Returns (b, a) as [b0, b1, b2], [1, a1, a2].
        """
        cutoff_freq = _safe_cutoff(cutoff_freq, sample_rate)
        w0 = 2.0 * np.pi * cutoff_freq / sample_rate
        cos_w0 = np.cos(w0)
        alpha = np.sin(w0) / (2.0 * q)

        b0 = (1.0 - cos_w0) / 2.0
        b1 = 1.0 - cos_w0
        b2 = (1.0 - cos_w0) / 2.0
        a0 = 1.0 + alpha
        a1 = -2.0 * cos_w0
        a2 = 1.0 - alpha
        return [b0 / a0, b1 / a0, b2 / a0], [1.0, a1 / a0, a2 / a0]

    @staticmethod
    def lowpass(waveform: torch.Tensor, sample_rate: float, cutoff_freq: float, q: float = 0.707) -> torch.Tensor:
        """
        Apply a LowPass Biquad filter (minimum-phase IIR), zero initial state.
        Coefficients are derived on every call from sample_rate.
        """
        if waveform.numel() == 0:
            return waveform.clone()
        b, a = Filter.lowpass_coefficients(sample_rate, cutoff_freq, q)
        b_coeffs = torch.tensor(b, dtype=waveform.dtype)
        a_coeffs = torch.tensor(a, dtype=waveform.dtype)
        return F.lfilter(waveform, a_coeffs, b_coeffs, clamp=False)

    @staticmethod
    def one_pole_lowpass(waveform: torch.Tensor, sample_rate: float, cutoff_freq: float) -> torch.Tensor:
        """
        RC-style follower: y[n] = y[n-1] + alpha * (x[n] - y[n-1]),
        alpha = dt / (rc + dt), rc = 1 / (2*pi*fc), y[-1] = 0.
        """
        if waveform.numel() == 0:
            return waveform.clone()
        rc = 1.0 / (2.0 * np.pi * cutoff_freq)
        dt = 1.0 / sample_rate
        alpha = dt / (rc + dt)
        b_coeffs = torch.tensor([alpha, 0.0], dtype=waveform.dtype)
        a_coeffs = torch.tensor([1.0, alpha - 1.0], dtype=waveform.dtype)
        return F.lfilter(waveform, a_coeffs, b_coeffs, clamp=False)


class Effects:
    @staticmethod
    def low_shelf_boost(waveform: torch.Tensor, sample_rate: float, gain: float, center_freq: float = 60.0) -> torch.Tensor:
        """
        Crude low shelf: isolate the lows with a one-pole follower and add them back
        scaled by (gain - 1). gain == 1 leaves the signal untouched.
        """
        if gain == 1.0:
            return waveform.clone()
        low = Filter.one_pole_lowpass(waveform, sample_rate, center_freq)
        return waveform + low * (gain - 1.0)

    @staticmethod
    def saturate(waveform: torch.Tensor, drive: float = 1.0) -> torch.Tensor:
        """Clamp to [-1, 1], then tanh(x * drive)."""
        return torch.tanh(torch.clamp(waveform, -1.0, 1.0) * drive)

    @staticmethod
    def soft_clip(waveform: torch.Tensor, drive: float = 1.0) -> torch.Tensor:
        """
        Soft Clipping using tanh. Output is always inside (-1, 1).
        """
        return torch.tanh(waveform * drive)
