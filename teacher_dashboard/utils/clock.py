"""Millisecond wall-clock helpers shared by the session services."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], int]

MILLIS_PER_SECOND = 1000


def now_millis() -> int:
    """Return the current Unix time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def seconds_to_millis(seconds: float) -> int:
    return int(seconds * MILLIS_PER_SECOND)


__all__ = ["Clock", "MILLIS_PER_SECOND", "now_millis", "seconds_to_millis"]
