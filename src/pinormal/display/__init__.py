"""
Terminal display: rich dashboard, sparklines and the Esc key watcher.
"""

from .sparkline import BLOCKS, fmt_num, sparkline
from .dashboard import Dashboard, render_snapshot
from .keys import EscapeKeyWatcher

__all__ = [
    "Dashboard",
    "render_snapshot",
    "sparkline",
    "fmt_num",
    "BLOCKS",
    "EscapeKeyWatcher",
]
