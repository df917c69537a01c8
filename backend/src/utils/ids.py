"""Millisecond clock and identifier helpers for submissions."""

import threading
import time
from datetime import UTC, datetime

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

_lock = threading.Lock()
_last_millis = 0


def monotonic_millis() -> int:
    """Return the current Unix time in milliseconds, strictly increasing.

    Two calls within the same millisecond (or after the wall clock steps
    backwards) get distinct values, so ids and attachment names derived from
    it never repeat inside one process.
    """
    global _last_millis
    with _lock:
        now = time.time_ns() // 1_000_000
        if now <= _last_millis:
            now = _last_millis + 1
        _last_millis = now
        return now


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def millis_to_iso(millis: int) -> str:
    """Format a millisecond timestamp as an ISO-8601 UTC instant."""
    seconds, remainder = divmod(millis, 1000)
    instant = datetime.fromtimestamp(seconds, UTC).replace(microsecond=remainder * 1000)
    return instant.isoformat(timespec="milliseconds")


def reset_clock() -> None:
    """Forget the last issued timestamp. Used by tests."""
    global _last_millis
    with _lock:
        _last_millis = 0
