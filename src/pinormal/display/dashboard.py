"""
Live terminal dashboard.

A pure consumer of Snapshot: it redraws the latest published snapshot at
its own cadence and never touches the computation state.

Layout:
    title (digits, digits/sec)
    ───────
    0 │ ████████   count (pct  dev)      × 10
    ───────
    Pi = 3.14159...
    Latest: ...digits
    ───────
    χ² / entropy / max deviation
    three convergence sparklines
    controls
"""

import logging
from typing import Optional

from rich.console import Console, Group
from rich.live import Live
from rich.text import Text

from ..pipeline import BatchScheduler, SchedulerState, Snapshot
from ..stats import CHI_SQUARED_CRITICAL_95, MAX_ENTROPY
from .sparkline import fmt_num, sparkline

logger = logging.getLogger(__name__)

BAR_COLORS = [
    "red", "green", "yellow", "blue", "magenta",
    "cyan", "white", "dark_red", "dark_green", "dark_goldenrod",
]


def render_snapshot(snapshot: Snapshot, width: int = 80) -> Group:
    """Build the full dashboard for one snapshot."""
    sep = Text("─" * width)
    lines = [
        Text.assemble(
            (f"  Pi Normal Number Test — {fmt_num(snapshot.digits_emitted)} digits "
             f"({snapshot.digits_per_second:,.0f} d/s)", "bold"),
            ("     [Chudnovsky Binary Splitting]", "bold"),
            _status_label(snapshot.status),
        ),
        sep,
    ]
    lines.extend(_bar_chart(snapshot, width))
    lines.append(sep)
    lines.extend(_digit_feed(snapshot, width))
    lines.append(sep)
    lines.append(_statistics_line(snapshot))
    lines.append(Text(""))
    lines.extend(_sparklines(snapshot, width))
    lines.append(Text(""))
    lines.append(Text("  Press Ctrl+C or ESC to stop", style="bright_black"))
    return Group(*lines)


def _status_label(status: SchedulerState) -> Text:
    if status is SchedulerState.STOPPED:
        return Text("  STOPPED", style="bold red")
    return Text("")


def _bar_chart(snapshot: Snapshot, width: int):
    total = snapshot.digits_emitted
    max_count = max(max(snapshot.histogram), 1)
    bar_max = max(width - 36, 10)
    for digit, count in enumerate(snapshot.histogram):
        pct = count / total * 100.0 if total else 0.0
        bar_len = int(count / max_count * bar_max)
        yield Text.assemble(
            f"  {digit} │ ",
            ("█" * bar_len, BAR_COLORS[digit]),
            f" {fmt_num(count):>8} ({pct:>5.2f}% {pct - 10.0:>+6.2f}%)",
        )


def _digit_feed(snapshot: Snapshot, width: int):
    first_width = max(width - 14, 0)
    ellipsis = "..." if snapshot.digits_emitted > len(snapshot.leading_digits) else ""
    yield Text.assemble(
        ("  Pi = 3.", "bold"),
        snapshot.leading_digits[:first_width],
        (ellipsis, "bright_black"),
    )
    recent_width = max(width - 16, 0)
    recent = snapshot.recent_digits[-recent_width:] if recent_width else ""
    yield Text.assemble(("  Latest: ...", "bright_black"), recent)


def _statistics_line(snapshot: Snapshot) -> Text:
    if snapshot.digits_emitted == 0:
        return Text("  waiting for the first batch...", style="bright_black")
    chi = snapshot.chi_squared
    label = ("UNIFORM", "green") if chi < CHI_SQUARED_CRITICAL_95 else ("SKEWED", "yellow")
    ent = snapshot.entropy_bits
    return Text.assemble(
        ("  χ²= ", "bold"),
        f"{chi:<8.3f} ",
        label,
        f"   Entropy: {ent:.4f}/{MAX_ENTROPY:.4f} bits ({ent / MAX_ENTROPY * 100:.2f}%)",
        f"   |dev|max: {snapshot.max_deviation * 100:.3f}%",
    )


def _sparklines(snapshot: Snapshot, width: int):
    spark_width = max(width - 38, 10)
    rows = [
        ("  Max |deviation| → 0 : ", "max_deviation", "cyan"),
        ("  Entropy → 3.3219    : ", "entropy_bits", "green"),
        ("  χ² → 0              : ", "chi_squared", "yellow"),
    ]
    for label, column, color in rows:
        yield Text.assemble(
            (label, "bright_black"),
            (sparkline(snapshot.series(column), spark_width), color),
        )


class Dashboard:
    """
    Renders a running scheduler until it stops or the user cancels.

    Args:
        console: rich console to draw on
        refresh_hz: redraw rate
    """

    def __init__(self, console: Optional[Console] = None, refresh_hz: float = 20.0):
        self.console = console or Console()
        self.refresh_hz = refresh_hz

    def render(self, snapshot: Snapshot) -> Group:
        return render_snapshot(snapshot, self.console.size.width)

    def run(self, scheduler: BatchScheduler) -> Snapshot:
        """
        Draw snapshots from scheduler.channel while the worker is alive.

        Raises KeyboardInterrupt through to the caller after requesting a
        stop, so Ctrl+C handling stays in one place.
        """
        channel = scheduler.channel
        version, snapshot = channel.latest()
        interval = 1.0 / self.refresh_hz

        with Live(self.render(snapshot), console=self.console,
                  refresh_per_second=self.refresh_hz, screen=True) as live:
            while scheduler.alive:
                version, snapshot = channel.wait_for_update(version, timeout=interval)
                live.update(self.render(snapshot))
            version, snapshot = channel.latest()
            live.update(self.render(snapshot))
        return snapshot
