"""
Batch Scheduler

Drives the computation path:

    extend (P, Q, T) → extract stable digits → ingest → sample → publish

    IDLE ──run()──► RUNNING ──stop() / max_digits──► STOPPED

Cancellation is checked between batches only. A batch in flight always
completes, so every published snapshot reflects a fully merged state.
"""

import logging
import threading
import time
from typing import Callable, Optional

from ..config import RunConfig
from ..engine import DigitExtractor, PrecisionState
from ..stats import StatisticsEngine
from .channel import SnapshotChannel
from .plan import BatchPlan
from .snapshot import SchedulerState, Snapshot

logger = logging.getLogger(__name__)


class BatchScheduler:
    """
    Single computation worker feeding a latest-value snapshot channel.

    Args:
        config: run configuration (validated on construction)
        channel: where snapshots are published; a new one if omitted
        clock: monotonic time source, injectable for tests
    """

    def __init__(self,
                 config: Optional[RunConfig] = None,
                 channel: Optional[SnapshotChannel] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.config = (config or RunConfig()).validate()
        self.channel = channel or SnapshotChannel()
        self.clock = clock

        self.plan = BatchPlan(self.config.initial_terms, self.config.max_terms, self.config.growth)
        self.precision = PrecisionState()
        self.extractor = DigitExtractor(self.config.guard_digits)
        self.stats = StatisticsEngine(self.config.history_capacity)

        self.status = SchedulerState.IDLE
        self.batches_completed = 0
        self.error: Optional[BaseException] = None

        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._started_at: Optional[float] = None

    # -------------------------------------------------------------------------
    # Batches
    # -------------------------------------------------------------------------

    @property
    def finished(self) -> bool:
        limit = self.config.max_digits
        return limit is not None and self.precision.digits_emitted >= limit

    def step(self) -> Optional[Snapshot]:
        """
        Run one batch. Returns the published snapshot, or None when the
        new terms did not settle any further digit.
        """
        if self.status is SchedulerState.STOPPED:
            raise RuntimeError("scheduler is stopped")
        if self._started_at is None:
            self._started_at = self.clock()

        batch = self.plan.current
        target = self.precision.n_total + batch
        t0 = time.perf_counter()

        self.precision.extend(target, workers=self.config.workers)
        extraction = self.extractor.extract(self.precision, limit=self.config.max_digits)
        self.plan.advance()

        if extraction.needs_more_terms:
            logger.debug("batch of %d terms settled no new digits; next batch %d terms",
                         batch, self.plan.current)
            return None

        self.stats.ingest_many(extraction.digits)
        self.stats.record_sample()
        self.batches_completed += 1

        snapshot = self._snapshot(SchedulerState.RUNNING)
        self.channel.publish(snapshot)
        logger.debug("batch %d: +%d digits (%d total, %d terms) in %.3fs",
                     self.batches_completed, len(extraction.digits),
                     self.precision.digits_emitted, self.precision.n_total,
                     time.perf_counter() - t0)
        return snapshot

    def run(self) -> Snapshot:
        """Run batches until stopped or max_digits is reached."""
        if self.status is not SchedulerState.IDLE:
            raise RuntimeError(f"scheduler already {self.status.value}")

        self.status = SchedulerState.RUNNING
        logger.info("computation started (first batch %d terms, cap %d, guard %d digits)",
                    self.plan.current, self.plan.max_terms, self.extractor.guard_digits)
        try:
            while not self._stop.is_set() and not self.finished:
                self.step()
        except Exception as exc:
            self.error = exc
            logger.exception("computation failed after %d batches", self.batches_completed)
            raise
        finally:
            self.status = SchedulerState.STOPPED
            final = self._snapshot(SchedulerState.STOPPED)
            self.channel.publish(final)

        logger.info("computation stopped: %d digits in %d batches (%.1fs)",
                    final.digits_emitted, final.batches_completed, final.elapsed_seconds)
        return final

    def _snapshot(self, status: SchedulerState) -> Snapshot:
        stats = self.stats.snapshot()
        elapsed = 0.0 if self._started_at is None else self.clock() - self._started_at
        return Snapshot(
            digits_emitted=self.stats.total,
            histogram=self.stats.counts,
            chi_squared=stats.chi_squared,
            entropy_bits=stats.entropy_bits,
            max_deviation=stats.max_deviation,
            convergence_history=self.stats.history.samples(),
            status=status,
            terms=self.precision.n_total,
            batches_completed=self.batches_completed,
            elapsed_seconds=elapsed,
            leading_digits=self.stats.leading_digits,
            recent_digits=self.stats.recent_digits,
        )

    # -------------------------------------------------------------------------
    # Thread lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> threading.Thread:
        """Run the scheduler on a background daemon thread."""
        if self._thread is not None:
            raise RuntimeError("scheduler already started")
        self._thread = threading.Thread(target=self._worker, name="pinormal-compute", daemon=True)
        self._thread.start()
        return self._thread

    def _worker(self):
        try:
            self.run()
        except Exception:
            # already logged and kept on self.error for the caller
            return

    def stop(self) -> None:
        """Request cancellation; the batch in flight still completes."""
        self._stop.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker thread; True once it has exited."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
