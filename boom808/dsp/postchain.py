"""
Mastering: output gain, then a fixed tanh soft clip so nothing leaves the pipeline outside [-1, 1].
Deterministic; no randomness.
"""
import torch

from boom808.dsp.envelopes import db_to_lin
from boom808.dsp.filters import Effects

SOFT_CLIP_DRIVE = 1.2


class PostChain:
    """
    Final stage of the render pipeline: gain -> soft clip.
    """

    @staticmethod
    def _apply_gain(buffer: torch.Tensor, gain_db: float) -> torch.Tensor:
        return buffer * db_to_lin(gain_db)

    @staticmethod
    def _soft_clip(buffer: torch.Tensor) -> torch.Tensor:
        """tanh(1.2 * x) per sample."""
        return Effects.soft_clip(buffer, drive=SOFT_CLIP_DRIVE)

    @classmethod
    def process(cls, buffer: torch.Tensor, master_gain_db: float = 0.0) -> torch.Tensor:
        """
        Run the master chain on a (channels, n) buffer. Returns a new tensor.
        """
        x = cls._apply_gain(buffer, master_gain_db)
        return cls._soft_clip(x)
