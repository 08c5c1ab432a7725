import io
import logging
import os
import tempfile
from typing import Tuple, Union

import numpy as np
import soundfile as sf
import torch

from boom808.core.types import RenderedAudio

logger = logging.getLogger(__name__)

PCM_SUBTYPES = {16: "PCM_16", 24: "PCM_24", 32: "PCM_32"}

AudioLike = Union[RenderedAudio, torch.Tensor, np.ndarray]


def _frames(waveform: AudioLike) -> np.ndarray:
    """(frames, channels) float32 clipped to [-1, 1], the layout soundfile expects."""
    if isinstance(waveform, RenderedAudio):
        data = waveform.samples
    elif isinstance(waveform, torch.Tensor):
        data = waveform.detach().cpu().numpy()
    else:
        data = np.asarray(waveform)
    data = np.asarray(data, dtype=np.float32)
    if data.ndim == 1:
        data = data.reshape(1, -1)
    # Clamp to avoid wrap-around clipping
    return np.clip(data, -1.0, 1.0).T


class AudioIO:
    @staticmethod
    def save_wav(waveform: AudioLike, sample_rate: float, path: str, bit_depth: int = 24) -> bool:
        """
        Write little-endian signed PCM WAV. Returns False instead of raising on failure.
        Written to a temp file next to path and moved into place, so a failed write
        never leaves a partial file behind.
        """
        subtype = PCM_SUBTYPES.get(bit_depth)
        if subtype is None:
            logger.warning("Unsupported bit depth %s (expected one of %s)", bit_depth, sorted(PCM_SUBTYPES))
            return False

        path = os.fspath(path)
        directory = os.path.dirname(os.path.abspath(path))
        tmp_path = None
        try:
            data = _frames(waveform)
            fd, tmp_path = tempfile.mkstemp(suffix=".wav.tmp", dir=directory)
            os.close(fd)
            sf.write(tmp_path, data, int(round(sample_rate)), subtype=subtype, format="WAV")
            os.replace(tmp_path, path)
            tmp_path = None
            return True
        except (OSError, RuntimeError, ValueError, TypeError) as e:
            logger.warning("WAV export failed for %s: %s", path, e)
            return False
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

    @staticmethod
    def to_bytes(waveform: AudioLike, sample_rate: float, format: str = "WAV", bit_depth: int = 24) -> bytes:
        """Returns audio file as bytes (for API responses)."""
        buffer = io.BytesIO()
        subtype = PCM_SUBTYPES.get(bit_depth, "PCM_24")
        sf.write(buffer, _frames(waveform), int(round(sample_rate)), format=format, subtype=subtype)
        return buffer.getvalue()

    @staticmethod
    def load_mono(source) -> Tuple[np.ndarray, float]:
        """
        Read a file path, file-like object or raw bytes. Multichannel input is
        averaged down to mono. Returns (samples float64, sample_rate).
        """
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        data, sample_rate = sf.read(source, dtype="float64", always_2d=True)
        return data.mean(axis=1), float(sample_rate)
