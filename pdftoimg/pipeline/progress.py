"""Single-line text progress bar."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

BAR_WIDTH = 20
BAR_SYMBOL = "#"


def format_bar(current: int, total: int, width: int = BAR_WIDTH) -> str:
    """Render ``[###   ] 15.0%`` for ``current`` out of ``total``."""
    if total <= 0:
        raise ValueError(f"total must be positive, got {total}")
    # integer ceil(width * current / total), no float rounding at the edges
    filled = -(-width * current // total)
    filled = min(max(filled, 0), width)
    percent = current / total * 100
    return f"[{BAR_SYMBOL * filled}{' ' * (width - filled)}] {percent:.1f}%"


class ProgressReporter:
    """Redraw the progress line in place on ``stream``."""

    def __init__(self, stream: Optional[TextIO] = None, *, width: int = BAR_WIDTH) -> None:
        self.stream = stream
        self.width = width
        self.updates = 0

    def __call__(self, current: int, total: int) -> None:
        stream = self.stream or sys.stdout
        stream.write(f"\rthrough pg: {current}\t{format_bar(current, total, self.width)}")
        stream.flush()
        self.updates += 1

    def finish(self) -> None:
        if self.updates:
            stream = self.stream or sys.stdout
            stream.write("\n")
            stream.flush()
