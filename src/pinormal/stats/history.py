"""
Convergence history: one sample per completed batch, bounded.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

from .histogram import DigitStatistics

DEFAULT_CAPACITY = 300


class ConvergenceSample(NamedTuple):
    digit_count: int
    chi_squared: float
    entropy_bits: float
    max_deviation: float

    @classmethod
    def from_statistics(cls, stats: DigitStatistics) -> "ConvergenceSample":
        return cls(stats.total, stats.chi_squared, stats.entropy_bits, stats.max_deviation)


@dataclass
class ConvergenceHistory:
    """
    Append-only sample series with a fixed capacity.

    Once full, every append removes one interior sample at a sweeping
    cursor. One full sweep drops every other sample, so the series
    thins out evenly over time while its length stays at `capacity`.
    The first sample is never removed.
    """
    capacity: int = DEFAULT_CAPACITY

    def __post_init__(self):
        if self.capacity < 3:
            raise ValueError(f"history capacity must be at least 3, got {self.capacity}")
        self._samples: List[ConvergenceSample] = []
        self._cursor = 1

    def append(self, sample: ConvergenceSample) -> None:
        if self._samples and sample.digit_count < self._samples[-1].digit_count:
            raise ValueError("convergence samples must have non-decreasing digit counts")
        if len(self._samples) >= self.capacity:
            del self._samples[self._cursor]
            self._cursor += 1
            if self._cursor >= len(self._samples):
                self._cursor = 1
        self._samples.append(sample)

    def series(self, name: str) -> List[float]:
        """One metric column, e.g. series("entropy_bits")."""
        if name not in ConvergenceSample._fields:
            raise KeyError(name)
        return [getattr(s, name) for s in self._samples]

    def samples(self) -> Tuple[ConvergenceSample, ...]:
        return tuple(self._samples)

    def __len__(self) -> int:
        return len(self._samples)
