"""
Statistics Engine

Owns the histogram and the convergence history for one run, plus the
digit windows the dashboard shows (first digits of π, latest digits).
"""

from collections import deque
from typing import Iterable, Tuple, Union

from .histogram import DigitHistogram, DigitStatistics
from .history import DEFAULT_CAPACITY, ConvergenceHistory, ConvergenceSample

LEADING_DIGITS = 200
RECENT_DIGITS = 500


class StatisticsEngine:
    """
    Incremental uniformity statistics over the fractional digits of π.

    The leading "3" is never ingested; the histogram covers fractional
    digits only.

    Args:
        history_capacity: maximum number of convergence samples kept
    """

    def __init__(self, history_capacity: int = DEFAULT_CAPACITY):
        self.histogram = DigitHistogram()
        self.history = ConvergenceHistory(history_capacity)
        self._leading = []
        self._recent = deque(maxlen=RECENT_DIGITS)

    def ingest(self, digit: int) -> None:
        self.histogram.ingest(digit)
        if len(self._leading) < LEADING_DIGITS:
            self._leading.append(str(digit))
        self._recent.append(str(digit))

    def ingest_many(self, digits: Union[str, Iterable[int]]) -> int:
        if isinstance(digits, str):
            added = self.histogram.ingest_many(digits)
        else:
            values = list(digits)
            added = self.histogram.ingest_many(values)
            digits = "".join(str(d) for d in values)
        room = LEADING_DIGITS - len(self._leading)
        if room > 0:
            self._leading.extend(digits[:room])
        self._recent.extend(digits[-RECENT_DIGITS:])
        return added

    def snapshot(self) -> DigitStatistics:
        return self.histogram.statistics()

    def record_sample(self) -> ConvergenceSample:
        """Append the current statistics to the convergence history."""
        sample = ConvergenceSample.from_statistics(self.snapshot())
        self.history.append(sample)
        return sample

    @property
    def total(self) -> int:
        return self.histogram.total

    @property
    def counts(self) -> Tuple[int, ...]:
        return self.histogram.counts

    @property
    def leading_digits(self) -> str:
        return "".join(self._leading)

    @property
    def recent_digits(self) -> str:
        return "".join(self._recent)
