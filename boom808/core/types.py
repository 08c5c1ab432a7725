from dataclasses import dataclass, asdict
import numpy as np
import torch
from typing import Dict, Any, Optional

DESCRIPTOR_FIELDS = (
    "sub_amount",
    "boom_amount",
    "shortness",
    "punch",
    "growl",
    "detune",
    "analog",
    "clean",
)


@dataclass(frozen=True)
class ParameterSet:
    """Everything one render needs. Read-only input to the pipeline."""
    seed: int = 0
    sample_rate: float = 44100.0
    length_seconds: float = 1.5
    tune_semitones: float = 0.0
    master_gain_db: float = 0.0
    # descriptor intensities (0-1)
    sub_amount: float = 0.0
    boom_amount: float = 0.0
    shortness: float = 0.0
    punch: float = 0.0
    growl: float = 0.0
    detune: float = 0.0
    analog: float = 0.0
    clean: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def descriptors(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in DESCRIPTOR_FIELDS}


@dataclass(frozen=True)
class RenderedAudio:
    """
    Rendered buffer handed to players, exporters and displays.
    samples: (channels, num_samples) float32, write-protected.
    """
    samples: np.ndarray
    sample_rate: float

    def __post_init__(self):
        data = np.ascontiguousarray(self.samples, dtype=np.float32)
        if data.ndim == 1:
            data = data.reshape(1, -1)
        if data is self.samples:
            data = data.copy()
        data.setflags(write=False)
        object.__setattr__(self, "samples", data)

    @property
    def num_channels(self) -> int:
        return self.samples.shape[0]

    @property
    def num_samples(self) -> int:
        return self.samples.shape[1]

    @property
    def duration_seconds(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.num_samples / self.sample_rate

    @property
    def peak(self) -> float:
        if self.samples.size == 0:
            return 0.0
        return float(np.max(np.abs(self.samples)))

    def as_tensor(self) -> torch.Tensor:
        """Copy of the samples as a float32 tensor (channels, num_samples)."""
        return torch.from_numpy(self.samples.copy())


@dataclass
class AnalysisResult:
    dominant_frequency_hz: float = 0.0  # 0.0 = undetermined
    rms: float = 0.0
    attack_time_seconds: float = 0.0
    release_time_seconds: float = 0.0
    peak: float = 0.0
    peak_index: int = 0
    attack_start_index: int = 0
    release_index: int = 0
    sample_rate: float = 44100.0
    midi_note: Optional[int] = None
    note_name: Optional[str] = None

    @property
    def is_pitched(self) -> bool:
        return self.dominant_frequency_hz > 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
