"""
Digit Histogram and Uniformity Statistics

Fixed alphabet {0..9}, so every statistic is O(10) over the counts.

    n   = total digits
    e   = n / 10                       expected count per digit
    χ²  = Σ (c_i - e)² / e
    H   = -Σ p_i log2(p_i)             (c_i = 0 contributes 0)
    dev = max |p_i - 0.1|              as a fraction, 0.0 .. 0.9
"""

import math
from dataclasses import dataclass
from typing import Iterable, Tuple, Union

import numpy as np

NUM_DIGITS = 10
UNIFORM_P = 1.0 / NUM_DIGITS
MAX_ENTROPY = math.log2(NUM_DIGITS)

# 95th percentile of χ² with 9 degrees of freedom
CHI_SQUARED_CRITICAL_95 = 16.919


@dataclass(frozen=True)
class DigitStatistics:
    """Point-in-time uniformity statistics."""
    total: int
    chi_squared: float
    entropy_bits: float
    max_deviation: float

    @property
    def looks_uniform(self) -> bool:
        return self.chi_squared < CHI_SQUARED_CRITICAL_95


def chi_squared(counts: np.ndarray) -> float:
    n = int(counts.sum())
    if n == 0:
        return 0.0
    expected = n / NUM_DIGITS
    diff = counts.astype(np.float64) - expected
    return float((diff * diff / expected).sum())


def entropy_bits(counts: np.ndarray) -> float:
    n = int(counts.sum())
    if n == 0:
        return 0.0
    nonzero = counts[counts > 0].astype(np.float64)
    if nonzero.size == NUM_DIGITS and np.all(nonzero == nonzero[0]):
        return MAX_ENTROPY
    p = nonzero / n
    h = float(-(p * np.log2(p)).sum())
    # only an exactly uniform histogram may reach the maximum
    return min(max(h, 0.0), math.nextafter(MAX_ENTROPY, 0.0))


def max_deviation(counts: np.ndarray) -> float:
    n = int(counts.sum())
    if n == 0:
        return 0.0
    return float(np.abs(counts / n - UNIFORM_P).max())


def summarize(counts: np.ndarray) -> DigitStatistics:
    return DigitStatistics(
        total=int(counts.sum()),
        chi_squared=chi_squared(counts),
        entropy_bits=entropy_bits(counts),
        max_deviation=max_deviation(counts),
    )


class DigitHistogram:
    """
    Running occurrence counts of the digits 0-9.

    The invariant sum(counts) == total holds after every call.
    """

    def __init__(self):
        self._counts = np.zeros(NUM_DIGITS, dtype=np.int64)
        self._total = 0

    def ingest(self, digit: int) -> None:
        if not 0 <= digit < NUM_DIGITS:
            raise ValueError(f"digit out of range: {digit!r}")
        self._counts[digit] += 1
        self._total += 1

    def ingest_many(self, digits: Union[str, Iterable[int]]) -> int:
        """Add a block of digits (a digit string or ints). Returns the block size."""
        if isinstance(digits, str):
            arr = np.frombuffer(digits.encode("ascii"), dtype=np.uint8).astype(np.int64) - 48
        else:
            arr = np.fromiter(digits, dtype=np.int64)
        if arr.size == 0:
            return 0
        if arr.min() < 0 or arr.max() >= NUM_DIGITS:
            raise ValueError("digit block contains values outside 0-9")
        self._counts += np.bincount(arr, minlength=NUM_DIGITS)
        self._total += int(arr.size)
        return int(arr.size)

    @property
    def counts(self) -> Tuple[int, ...]:
        return tuple(int(c) for c in self._counts)

    @property
    def total(self) -> int:
        return self._total

    def fractions(self) -> np.ndarray:
        if self._total == 0:
            return np.zeros(NUM_DIGITS, dtype=np.float64)
        return self._counts / self._total

    def statistics(self) -> DigitStatistics:
        return summarize(self._counts)

    def __len__(self) -> int:
        return self._total
