"""
Text helpers for the dashboard.
"""

from typing import Sequence

BLOCKS = "▁▂▃▄▅▆▇█"


def sparkline(values: Sequence[float], max_width: int) -> str:
    """
    One block glyph per value, scaled to the largest visible value.

    Only the last `max_width` values are drawn.
    """
    if not values or max_width <= 0:
        return ""
    shown = list(values[-max_width:])
    top = max(max(shown), 0.001)
    out = []
    for v in shown:
        idx = int(round(max(v, 0.0) / top * (len(BLOCKS) - 1)))
        out.append(BLOCKS[min(idx, len(BLOCKS) - 1)])
    return "".join(out)


def fmt_num(n: int) -> str:
    return f"{n:,}"
