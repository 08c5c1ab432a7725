"""
Feature extraction for uploaded samples: dominant frequency, RMS, attack and release times.
Read-only over its input. Only the Hann window is cached, per transform size.
"""
import logging
from typing import Dict, Sequence, Union

import numpy as np
import torch

from boom808.core.pitch import nearest_note, note_name
from boom808.core.types import AnalysisResult

logger = logging.getLogger(__name__)

MIN_SAMPLES = 64
DEFAULT_FFT_SIZE = 4096
MIN_MAGNITUDE = 1e-9
ATTACK_THRESHOLD = 0.1
RELEASE_THRESHOLD = 0.05
DEFAULT_SAMPLE_RATE = 44100.0

ArrayLike = Union[np.ndarray, torch.Tensor, Sequence[float]]


def _to_mono(samples: ArrayLike) -> torch.Tensor:
    """
    float64 1-D tensor. 2-D input is averaged across its channel axis, taken to be
    the shorter one, so both (channels, n) and soundfile's (frames, channels) work.
    """
    if isinstance(samples, torch.Tensor):
        x = samples.detach().cpu().to(torch.float64)
    else:
        x = torch.as_tensor(np.asarray(samples, dtype=np.float64))
    if x.dim() == 0:
        return x.reshape(1)
    if x.dim() == 2 and x.shape[0] > x.shape[1]:
        x = x.mean(dim=1)
    elif x.dim() > 1:
        x = x.reshape(x.shape[0], -1).mean(dim=0)
    return x


class FeatureExtractor:
    def __init__(self, fft_size: int = DEFAULT_FFT_SIZE):
        if fft_size < 2 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two, got {fft_size}")
        self.fft_size = fft_size
        self._windows: Dict[int, torch.Tensor] = {}

    def window(self, size: int) -> torch.Tensor:
        """Symmetric Hann: 0.5 * (1 - cos(2*pi*i / (size - 1)))."""
        if size not in self._windows:
            self._windows[size] = torch.hann_window(size, periodic=False, dtype=torch.float64)
        return self._windows[size]

    def bin_width(self, sample_rate: float) -> float:
        """Frequency resolution in Hz."""
        return sample_rate / self.fft_size

    def dominant_frequency(self, x: torch.Tensor, sample_rate: float) -> float:
        """
        Strongest bin (DC excluded, Nyquist included) of a Hann-windowed, centered,
        zero-padded segment. 0.0 when the input is too short or effectively silent.
        """
        n = x.shape[-1]
        if n < MIN_SAMPLES:
            return 0.0

        size = self.fft_size
        seg_len = min(size, n)
        start = min(max(0, n // 2 - seg_len // 2), n - seg_len)

        frame = torch.zeros(size, dtype=torch.float64)
        frame[:seg_len] = x[start:start + seg_len]
        frame = frame * self.window(size)

        magnitudes = torch.abs(torch.fft.rfft(frame))
        candidates = magnitudes[1:]
        best = int(torch.argmax(candidates).item())
        if float(candidates[best]) < MIN_MAGNITUDE:
            return 0.0
        return (best + 1) * sample_rate / size

    def analyze(self, samples: ArrayLike, sample_rate: float) -> AnalysisResult:
        """
        Analyze a recorded sample. Never raises on degenerate input:
        fewer than 64 samples -> dominant frequency 0.0; empty input -> all zeros.
        """
        try:
            sr = float(sample_rate)
        except (TypeError, ValueError):
            sr = DEFAULT_SAMPLE_RATE
        if not np.isfinite(sr) or sr <= 0:
            sr = DEFAULT_SAMPLE_RATE

        x = _to_mono(samples)
        x = torch.nan_to_num(x, nan=0.0, posinf=0.0, neginf=0.0)
        n = x.shape[-1]
        if n == 0:
            return AnalysisResult(sample_rate=sr)

        rms = float(torch.sqrt(torch.mean(x ** 2)))

        # Envelope timing
        abs_x = torch.abs(x)
        peak_index = int(torch.argmax(abs_x).item())
        peak = float(abs_x[peak_index])

        head = abs_x[:peak_index + 1] >= peak * ATTACK_THRESHOLD
        attack_start = int(torch.nonzero(head)[0].item())

        tail = abs_x[peak_index:] <= peak * RELEASE_THRESHOLD
        hits = torch.nonzero(tail)
        release_index = peak_index + int(hits[0].item()) if hits.numel() else n - 1

        freq = self.dominant_frequency(x, sr)
        midi = nearest_note(freq)
        if freq <= 0.0:
            logger.debug("No dominant frequency (n=%d, peak=%.3g)", n, peak)

        return AnalysisResult(
            dominant_frequency_hz=freq,
            rms=rms,
            attack_time_seconds=(peak_index - attack_start) / sr,
            release_time_seconds=(release_index - peak_index) / sr,
            peak=peak,
            peak_index=peak_index,
            attack_start_index=attack_start,
            release_index=release_index,
            sample_rate=sr,
            midi_note=midi,
            note_name=note_name(midi) if midi is not None else None,
        )


_default_extractor = FeatureExtractor()


def analyze(samples: ArrayLike, sample_rate: float) -> AnalysisResult:
    """Module-level shortcut using a shared extractor (window cache only)."""
    return _default_extractor.analyze(samples, sample_rate)
