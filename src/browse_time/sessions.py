"""Rebuild continuous activity spans from discrete heartbeats."""

from __future__ import annotations

import logging
from operator import attrgetter
from typing import Iterable, Sequence

from .errors import require_non_negative
from .models import Duration, Heartbeat

logger = logging.getLogger(__name__)


def reconstruct(heartbeats: Sequence[Heartbeat], timeout_ms: float) -> list[Duration]:
    """Merge heartbeats into durations.

    Consecutive heartbeats (after sorting by time) that are at most
    ``timeout_ms`` apart share a duration; a larger gap starts a new one.
    Only the gap to the previous heartbeat counts, so a slow run of closely
    spaced heartbeats stays a single duration however long it lasts.
    """
    require_non_negative(timeout_ms, "timeout_ms")

    if not heartbeats:
        return []

    if len(heartbeats) == 1:
        only = heartbeats[0]
        return [Duration(start=only.time, end=only.time)]

    ordered = sorted(heartbeats, key=attrgetter("time"))
    durations: list[Duration] = []
    current = Duration(start=ordered[0].time, end=ordered[0].time)
    previous = ordered[0]

    for heartbeat in ordered[1:]:
        if heartbeat.time - previous.time <= timeout_ms:
            current.end = heartbeat.time
        else:
            durations.append(current)
            current = Duration(start=heartbeat.time, end=heartbeat.time)
        previous = heartbeat

    durations.append(current)
    logger.debug(
        "Rebuilt %d durations from %d heartbeats (timeout=%sms).",
        len(durations),
        len(ordered),
        timeout_ms,
    )
    return durations


def total_length(durations: Iterable[Duration]) -> int:
    return sum(duration.length for duration in durations)
