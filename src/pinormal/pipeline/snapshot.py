"""
Published status record: the only thing that crosses from the
computation thread to the display.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from ..stats import NUM_DIGITS, ConvergenceSample


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of a run after a completed batch."""
    digits_emitted: int = 0
    histogram: Tuple[int, ...] = (0,) * NUM_DIGITS
    chi_squared: float = 0.0
    entropy_bits: float = 0.0
    max_deviation: float = 0.0
    convergence_history: Tuple[ConvergenceSample, ...] = ()
    status: SchedulerState = SchedulerState.IDLE
    terms: int = 0
    batches_completed: int = 0
    elapsed_seconds: float = 0.0
    leading_digits: str = ""
    recent_digits: str = field(default="", repr=False)

    @property
    def digits_per_second(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.digits_emitted / self.elapsed_seconds

    def series(self, name: str) -> Tuple[float, ...]:
        return tuple(getattr(s, name) for s in self.convergence_history)
