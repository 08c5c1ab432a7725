"""
Tests for the tone-shaping primitives: RBJ low-pass, one-pole follower, low shelf, saturation.
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
import torch
import numpy as np
from boom808.dsp.filters import Filter, Effects
from boom808.dsp.oscillators import Oscillator
from boom808.dsp.envelopes import time_axis

SR = 44100


def _rms(x: torch.Tensor) -> float:
    return float(torch.sqrt(torch.mean(x ** 2)))


def _tone(freq: float, seconds: float = 0.5) -> torch.Tensor:
    return Oscillator.sine(freq, time_axis(int(seconds * SR), SR))


class TestLowpass:
    def test_coefficients_normalised_and_unity_dc_gain(self):
        b, a = Filter.lowpass_coefficients(SR, 1400.0, 0.7)
        assert a[0] == 1.0
        assert abs(sum(b) / sum(a) - 1.0) < 1e-9

    def test_passes_bass_attenuates_highs(self):
        low = _tone(60.0)
        high = _tone(8000.0)
        low_out = Filter.lowpass(low, SR, 1400.0, q=0.7)
        high_out = Filter.lowpass(high, SR, 1400.0, q=0.7)
        assert abs(_rms(low_out) / _rms(low) - 1.0) < 0.05
        assert _rms(high_out) / _rms(high) < 0.05

    def test_does_not_clamp(self):
        loud = _tone(60.0) * 4.0
        out = Filter.lowpass(loud, SR, 1400.0)
        assert float(torch.max(torch.abs(out))) > 3.0

    def test_cutoff_above_nyquist_is_safe(self):
        out = Filter.lowpass(_tone(100.0, 0.05), 8000, 20000.0)
        assert torch.isfinite(out).all()

    def test_empty(self):
        assert Filter.lowpass(torch.zeros(0, dtype=torch.float64), SR, 1400.0).numel() == 0


class TestOnePole:
    def test_step_response_matches_recurrence(self):
        x = torch.ones(50, dtype=torch.float64)
        y = Filter.one_pole_lowpass(x, SR, 60.0)
        rc = 1.0 / (2.0 * np.pi * 60.0)
        dt = 1.0 / SR
        alpha = dt / (rc + dt)
        prev = 0.0
        for i in range(50):
            prev = prev + alpha * (1.0 - prev)
            assert abs(y[i].item() - prev) < 1e-12

    def test_low_shelf_unity_gain_is_identity(self):
        x = _tone(50.0, 0.1)
        assert torch.equal(Effects.low_shelf_boost(x, SR, 1.0), x)

    def test_low_shelf_boosts_lows_more_than_highs(self):
        low = _tone(30.0)
        high = _tone(3000.0)
        low_gain = _rms(Effects.low_shelf_boost(low, SR, 1.5)) / _rms(low)
        high_gain = _rms(Effects.low_shelf_boost(high, SR, 1.5)) / _rms(high)
        assert low_gain > 1.2
        assert high_gain < 1.05


class TestSaturation:
    def test_saturate_clamps_before_tanh(self):
        x = torch.tensor([-5.0, -1.0, 0.0, 0.5, 5.0], dtype=torch.float64)
        y = Effects.saturate(x, drive=1.0)
        expected = torch.tanh(torch.tensor([-1.0, -1.0, 0.0, 0.5, 1.0], dtype=torch.float64))
        assert torch.allclose(y, expected)

    @pytest.mark.parametrize("drive", [1.0, 1.2, 1.5])
    def test_soft_clip_bounded(self, drive):
        x = torch.linspace(-100.0, 100.0, 1001)
        y = Effects.soft_clip(x, drive=drive)
        assert float(torch.max(torch.abs(y))) <= 1.0
        assert torch.all(y[1:] >= y[:-1])
