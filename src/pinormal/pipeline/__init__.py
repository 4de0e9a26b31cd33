"""
Producer/consumer pipeline: batch plan, scheduler state machine and the
latest-value snapshot handoff to the display.
"""

from .snapshot import SchedulerState, Snapshot
from .channel import SnapshotChannel
from .plan import BatchPlan
from .scheduler import BatchScheduler

__all__ = [
    "BatchScheduler",
    "BatchPlan",
    "SnapshotChannel",
    "Snapshot",
    "SchedulerState",
]
