"""
Command line entry point.

Usage:
    pinormal                        # run until Ctrl+C or Esc
    pinormal --max-digits 1e6       # stop after one million digits
    pinormal --no-display --log-level DEBUG
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console

from . import __version__
from .config import LOG_LEVELS, RunConfig
from .display import Dashboard, EscapeKeyWatcher, fmt_num
from .log import setup_logging
from .pipeline import BatchScheduler, Snapshot

logger = logging.getLogger("pinormal.cli")

EXIT_OK = 0
EXIT_FAULT = 1


def _count(value: str) -> int:
    """Accept 1000000, 1_000_000 or 1e6."""
    try:
        return int(float(value.replace("_", "")))
    except (ValueError, OverflowError):
        raise argparse.ArgumentTypeError(f"not a finite number: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    defaults = RunConfig()
    parser = argparse.ArgumentParser(
        prog="pinormal",
        description="Compute digits of π and watch their distribution converge to uniform.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pinormal                          # run until Ctrl+C or Esc
  pinormal --max-digits 1e6         # stop after 1,000,000 digits
  pinormal --workers 4              # split each batch over 4 processes
  pinormal --no-display             # plain log lines instead of the dashboard
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--max-digits", type=_count, default=None,
                        help="stop after this many fractional digits")
    parser.add_argument("--initial-terms", type=_count, default=defaults.initial_terms,
                        help="series terms in the first batch (default: %(default)s)")
    parser.add_argument("--max-terms", type=_count, default=defaults.max_terms,
                        help="cap on series terms per batch (default: %(default)s)")
    parser.add_argument("--guard-digits", type=int, default=defaults.guard_digits,
                        help="extra working digits during extraction (default: %(default)s)")
    parser.add_argument("--workers", type=int, default=defaults.workers,
                        help="processes used for binary splitting (default: %(default)s)")
    parser.add_argument("--history", type=int, default=defaults.history_capacity,
                        help="convergence samples kept for sparklines (default: %(default)s)")
    parser.add_argument("--refresh", type=float, default=defaults.refresh_hz,
                        help="dashboard redraws per second (default: %(default)s)")
    parser.add_argument("--log-level", default=defaults.log_level,
                        type=str.upper, choices=LOG_LEVELS)
    parser.add_argument("--log-file", default=None,
                        help="also write DEBUG logs to this file")
    parser.add_argument("--no-display", action="store_true",
                        help="log one line per batch instead of the live dashboard")
    return parser


def _log_progress(scheduler: BatchScheduler, interval: float = 0.5) -> None:
    version = scheduler.channel.version
    while scheduler.alive:
        new_version, snap = scheduler.channel.wait_for_update(version, timeout=interval)
        if new_version != version and snap.digits_emitted:
            logger.info("%12s digits  χ²=%8.3f  H=%.5f bits  |dev|max=%.4f%%",
                        fmt_num(snap.digits_emitted), snap.chi_squared,
                        snap.entropy_bits, snap.max_deviation * 100)
        version = new_version


def _finish(scheduler: BatchScheduler) -> None:
    """Wait for the in-flight batch; a second Ctrl+C abandons it."""
    try:
        scheduler.join()
    except KeyboardInterrupt:
        logger.warning("abandoning the batch in flight; keeping the last completed snapshot")


def _summary(console: Console, snapshot: Snapshot) -> None:
    console.print(
        f"[bold]{fmt_num(snapshot.digits_emitted)}[/bold] digits of π in "
        f"{snapshot.batches_completed} batches ({snapshot.elapsed_seconds:.1f}s)  "
        f"χ²={snapshot.chi_squared:.3f}  "
        f"entropy={snapshot.entropy_bits:.5f} bits  "
        f"|dev|max={snapshot.max_deviation * 100:.4f}%"
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = RunConfig.from_args(args).validate()
    except ValueError as exc:
        parser.error(str(exc))

    setup_logging(config.log_level, config.log_file)
    logger.debug("config: %s", config.to_dict())

    scheduler = BatchScheduler(config)
    scheduler.start()
    try:
        if config.display:
            with EscapeKeyWatcher(scheduler.stop):
                Dashboard(refresh_hz=config.refresh_hz).run(scheduler)
        else:
            _log_progress(scheduler)
    except KeyboardInterrupt:
        logger.info("interrupted; finishing the current batch")
    finally:
        scheduler.stop()
        _finish(scheduler)

    if scheduler.error is not None:
        logger.error("internal fault: %s", scheduler.error)
        return EXIT_FAULT

    _, final = scheduler.channel.latest()
    _summary(Console(), final)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
