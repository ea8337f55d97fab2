"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

import threading
from datetime import datetime, timedelta, timezone
from uuid import uuid4


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive
    and assumed to be UTC.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    """Return a fresh random identifier for a stored record."""
    return str(uuid4())


class MonotonicClock:
    """
    Strictly increasing UTC timestamps.

    Two writes that land in the same microsecond still get distinct,
    ordered timestamps, so "most recently modified first" is a total order.
    """

    _TICK = timedelta(microseconds=1)

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last: datetime | None = None

    def now(self) -> datetime:
        with self._lock:
            current = utc_now()
            if self._last is not None and current <= self._last:
                current = self._last + self._TICK
            self._last = current
            return current
