"""
Run configuration.

Batch growth and guard precision are tuning knobs: growth only has to be
geometric and the guard only has to be non-negative for the digit stream
to stay correct.
"""

import argparse
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class RunConfig:
    """Configuration for one computation run."""
    max_digits: Optional[int] = None   # stop after this many digits (None = until cancelled)
    initial_terms: int = 72            # first batch, ~1,000 digits
    max_terms: int = 141_000           # batch cap, ~2,000,000 digits
    growth: int = 2                    # batch size multiplier per round
    guard_digits: int = 10
    workers: int = 1                   # processes for the binary split
    history_capacity: int = 300
    refresh_hz: float = 20.0
    log_level: str = "INFO"
    log_file: Optional[str] = None
    display: bool = True

    def validate(self) -> "RunConfig":
        """Raise ValueError on the first invalid field; return self otherwise."""
        if self.max_digits is not None and self.max_digits < 1:
            raise ValueError(f"max_digits must be positive, got {self.max_digits}")
        if self.initial_terms < 1:
            raise ValueError(f"initial_terms must be positive, got {self.initial_terms}")
        if self.max_terms < self.initial_terms:
            raise ValueError(
                f"max_terms ({self.max_terms}) must be >= initial_terms ({self.initial_terms})")
        if self.growth < 2:
            raise ValueError(f"growth must be at least 2, got {self.growth}")
        if self.guard_digits < 0:
            raise ValueError(f"guard_digits must be non-negative, got {self.guard_digits}")
        if self.workers < 1:
            raise ValueError(f"workers must be positive, got {self.workers}")
        if self.history_capacity < 3:
            raise ValueError(f"history_capacity must be at least 3, got {self.history_capacity}")
        if self.refresh_hz <= 0:
            raise ValueError(f"refresh_hz must be positive, got {self.refresh_hz}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return self

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunConfig":
        return cls(
            max_digits=args.max_digits,
            initial_terms=args.initial_terms,
            max_terms=args.max_terms,
            guard_digits=args.guard_digits,
            workers=args.workers,
            history_capacity=args.history,
            refresh_hz=args.refresh,
            log_level=args.log_level.upper(),
            log_file=args.log_file,
            display=not args.no_display,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
