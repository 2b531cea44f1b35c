"""Human-readable rendering of millisecond spans."""

from __future__ import annotations

from .errors import require_non_negative
from .models import ReadableDuration


def to_readable(duration_ms: float) -> ReadableDuration:
    """Split a span in milliseconds into whole hours, minutes and seconds.

    Fractions of a second are discarded.
    """
    require_non_negative(duration_ms, "duration_ms")
    total_seconds = int(duration_ms // 1000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return ReadableDuration(hours=hours, minutes=minutes, seconds=seconds)


def format_readable(duration_ms: float) -> str:
    readable = to_readable(duration_ms)
    return f"{readable.hours:02d}:{readable.minutes:02d}:{readable.seconds:02d}"


def describe_readable(duration_ms: float) -> str:
    """Compact label such as ``1h 2m 5s`` without leading zero units."""
    readable = to_readable(duration_ms)
    parts: list[str] = []
    if readable.hours:
        parts.append(f"{readable.hours}h")
    if readable.hours or readable.minutes:
        parts.append(f"{readable.minutes}m")
    parts.append(f"{readable.seconds}s")
    return " ".join(parts)
