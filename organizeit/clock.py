"""Time helpers. Components take a `clock` callable so tests can pin it."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], float]

HOUR_MS = 60 * 60 * 1000
MINUTE_MS = 60 * 1000


def now_ms(clock: Clock = time.time) -> int:
    return int(clock() * 1000)


def iso_from_ms(ms: int | float) -> str:
    """Epoch milliseconds to an ISO-8601 UTC string with millisecond precision."""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat(timespec="milliseconds")


def ms_from_iso(value: str) -> int:
    """Parse an ISO-8601 string back to epoch milliseconds. Naive values are UTC."""
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)
