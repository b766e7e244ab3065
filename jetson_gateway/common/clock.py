"""Wall-clock helpers."""

from __future__ import annotations

import time
import typing as typ

Clock = typ.Callable[[], int]

_NS_PER_MS = 1_000_000


def now_unix_ms() -> int:
    """Return milliseconds since the Unix epoch, or 0 for a pre-epoch clock."""
    return max(time.time_ns() // _NS_PER_MS, 0)
