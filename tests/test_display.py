"""
Display Tests

Sparklines, number formatting and dashboard rendering from snapshots.
"""

import io
import threading

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from rich.console import Console

from pinormal.config import RunConfig
from pinormal.display import BLOCKS, Dashboard, EscapeKeyWatcher, fmt_num, render_snapshot, sparkline
from pinormal.pipeline import BatchScheduler, SchedulerState, Snapshot


def render_text(snapshot, width=100):
    console = Console(file=io.StringIO(), width=width, color_system=None)
    console.print(render_snapshot(snapshot, width))
    return console.file.getvalue()


class TestSparkline:
    """Block-glyph series."""

    def test_empty(self):
        assert sparkline([], 10) == ""

    def test_scaled_to_max(self):
        assert sparkline([0.0, 1.0], 10) == BLOCKS[0] + BLOCKS[-1]

    def test_only_last_values_shown(self):
        line = sparkline(list(range(100)), 5)
        assert len(line) == 5
        assert line[-1] == BLOCKS[-1]

    def test_all_zero_uses_floor(self):
        assert sparkline([0.0, 0.0, 0.0], 10) == BLOCKS[0] * 3

    def test_zero_width(self):
        assert sparkline([1.0, 2.0], 0) == ""


class TestFormatting:

    def test_thousands(self):
        assert fmt_num(0) == "0"
        assert fmt_num(1234567) == "1,234,567"


class TestRender:
    """Dashboard content."""

    def test_idle_snapshot(self):
        text = render_text(Snapshot())
        assert "waiting for the first batch" in text
        assert "Press Ctrl+C or ESC to stop" in text

    def test_live_snapshot(self):
        scheduler = BatchScheduler(RunConfig(initial_terms=8, max_terms=32, max_digits=1000))
        snap = scheduler.run()
        text = render_text(snap)
        assert "1,000 digits" in text
        assert "Pi = 3.14159265358979" in text
        assert "UNIFORM" in text or "SKEWED" in text
        assert "Entropy:" in text
        assert "STOPPED" in text
        for digit in range(10):
            assert f"  {digit} │ " in text

    def test_skewed_label(self):
        snap = Snapshot(digits_emitted=100, histogram=(100,) + (0,) * 9,
                        chi_squared=900.0, entropy_bits=0.0, max_deviation=0.9,
                        status=SchedulerState.RUNNING)
        text = render_text(snap)
        assert "SKEWED" in text
        assert "90.000%" in text

    def test_narrow_terminal(self):
        text = render_text(Snapshot(digits_emitted=5, histogram=(1,) * 5 + (0,) * 5,
                                    leading_digits="14159"), width=20)
        assert "Pi = 3." in text


class TestDashboard:

    def test_run_until_scheduler_stops(self):
        console = Console(file=io.StringIO(), width=100, force_terminal=False)
        scheduler = BatchScheduler(RunConfig(initial_terms=4, max_terms=16, max_digits=500))
        scheduler.start()
        final = Dashboard(console=console, refresh_hz=50).run(scheduler)
        assert final.status is SchedulerState.STOPPED
        assert final.digits_emitted == 500


class TestKeyWatcher:

    def test_non_tty_is_noop(self):
        called = []
        with EscapeKeyWatcher(lambda: called.append(1), stream=io.StringIO()) as watcher:
            assert not watcher.supported
        assert called == []

    @pytest.fixture
    def terminal(self):
        pty = pytest.importorskip("pty")
        pytest.importorskip("termios")
        master, slave = pty.openpty()
        stream = os.fdopen(slave, "rb", buffering=0)
        yield master, stream
        stream.close()
        os.close(master)

    def test_lone_escape_cancels(self, terminal):
        master, stream = terminal
        pressed = threading.Event()
        with EscapeKeyWatcher(pressed.set, stream=stream, poll_interval=0.02) as watcher:
            assert watcher.supported
            os.write(master, b"\x1b")
            assert pressed.wait(2.0)

    def test_arrow_key_does_not_cancel(self, terminal):
        master, stream = terminal
        pressed = threading.Event()
        with EscapeKeyWatcher(pressed.set, stream=stream, poll_interval=0.02):
            os.write(master, b"\x1b[A")
            assert not pressed.wait(0.3)

    def test_escape_after_arrow_key_cancels(self, terminal):
        master, stream = terminal
        pressed = threading.Event()
        with EscapeKeyWatcher(pressed.set, stream=stream, poll_interval=0.02):
            os.write(master, b"\x1b[B\x1bOP")
            assert not pressed.wait(0.3)
            os.write(master, b"\x1b")
            assert pressed.wait(2.0)
