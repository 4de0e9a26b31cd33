"""
pinormal - Is π normal? Watch the evidence accumulate.

Computes decimal digits of π with the Chudnovsky series (binary splitting
over exact GMP integers) and tracks how uniformly the digits 0-9 occur:
chi-squared, Shannon entropy, max deviation, and their convergence.

Quick Start - digits:
    from pinormal import compute_pi_digits

    compute_pi_digits(20)   # '14159265358979323846'

Streaming statistics:
    from pinormal import BatchScheduler, RunConfig

    scheduler = BatchScheduler(RunConfig(max_digits=100_000))
    final = scheduler.run()
    final.chi_squared, final.entropy_bits, final.max_deviation

Live dashboard:
    $ pinormal
"""

__version__ = "0.1.0"

# =============================================================================
# ENGINE: Binary splitting and digit extraction
# =============================================================================

from .engine import (
    SplitNode,
    binary_split,
    parallel_split,
    PrecisionState,
    DigitExtractor,
    compute_pi_digits,
)

# =============================================================================
# STATISTICS
# =============================================================================

from .stats import (
    StatisticsEngine,
    DigitHistogram,
    ConvergenceHistory,
    ConvergenceSample,
)

# =============================================================================
# PIPELINE
# =============================================================================

from .config import RunConfig
from .pipeline import (
    BatchScheduler,
    BatchPlan,
    SnapshotChannel,
    Snapshot,
    SchedulerState,
)

__all__ = [
    "__version__",

    # Engine
    "SplitNode",
    "binary_split",
    "parallel_split",
    "PrecisionState",
    "DigitExtractor",
    "compute_pi_digits",

    # Statistics
    "StatisticsEngine",
    "DigitHistogram",
    "ConvergenceHistory",
    "ConvergenceSample",

    # Pipeline
    "RunConfig",
    "BatchScheduler",
    "BatchPlan",
    "SnapshotChannel",
    "Snapshot",
    "SchedulerState",
]
