"""
Statistics Engine

Running digit histogram, uniformity statistics and their bounded
convergence history.
"""

from .histogram import (
    CHI_SQUARED_CRITICAL_95,
    MAX_ENTROPY,
    NUM_DIGITS,
    DigitHistogram,
    DigitStatistics,
    chi_squared,
    entropy_bits,
    max_deviation,
    summarize,
)
from .history import ConvergenceHistory, ConvergenceSample
from .engine import StatisticsEngine

__all__ = [
    "StatisticsEngine",
    "DigitHistogram",
    "DigitStatistics",
    "ConvergenceHistory",
    "ConvergenceSample",
    "chi_squared",
    "entropy_bits",
    "max_deviation",
    "summarize",
    "CHI_SQUARED_CRITICAL_95",
    "MAX_ENTROPY",
    "NUM_DIGITS",
]
