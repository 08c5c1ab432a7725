"""
Per-render random stream.
Each render owns its own torch.Generator; the global torch seed is never touched,
so concurrent renders cannot race on shared RNG state.
"""
import torch

SEED_MASK = 0xFFFF_FFFF_FFFF_FFFF
SEED_MIX = 0x9E37_79B9_7F4A_7C15


def mix_seed(seed: int) -> int:
    """Fold any int into 64 bits and XOR with the mixing constant."""
    try:
        s = int(seed)
    except (TypeError, ValueError, OverflowError):
        s = 0
    return (s & SEED_MASK) ^ SEED_MIX


class RandomStream:
    """Uniform [0, 1) draws in a fixed order from one seeded generator."""

    def __init__(self, seed: int):
        self.generator = torch.Generator(device="cpu")
        self.generator.manual_seed(mix_seed(seed))

    def uniform(self) -> float:
        return float(torch.rand(1, generator=self.generator, dtype=torch.float64).item())

    def uniform_block(self, rows: int, cols: int) -> torch.Tensor:
        """
        rows x cols draws, row-major, so column j of row i is draw number i*cols + j.
        Used for interleaved per-sample draws.
        """
        if rows <= 0 or cols <= 0:
            return torch.zeros((max(rows, 0), max(cols, 0)), dtype=torch.float64)
        return torch.rand((rows, cols), generator=self.generator, dtype=torch.float64)
