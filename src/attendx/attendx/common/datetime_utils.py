from __future__ import annotations

import time


def now_ms() -> int:
    """Current time as epoch milliseconds.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return int(time.time() * 1000)


def minutes_to_ms(minutes: float) -> int:
    return int(minutes * 60 * 1000)


def format_countdown(remaining_ms: int) -> str:
    """Render a remaining duration as M:SS, or EXPIRED once it runs out."""
    if remaining_ms <= 0:
        return "EXPIRED"
    mins = remaining_ms // 60000
    secs = (remaining_ms % 60000) // 1000
    return f"{mins}:{secs:02d}"
