"""Decide when page activity should be recorded as a heartbeat."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .errors import require_non_negative
from .models import Heartbeat
from .normalization import normalize_title, split_page_url

logger = logging.getLogger(__name__)

LIFECYCLE_EVENTS: tuple[str, ...] = ("load", "focus", "blur", "unload")
INTERACTION_EVENTS: tuple[str, ...] = ("scroll", "click", "keypress", "mousemove")


def should_emit(
    last_heartbeat: Optional[Heartbeat],
    event_type: str,
    now_ms: int,
    page_key: str,
    *,
    min_interval_ms: int,
) -> bool:
    """Return whether an event at ``now_ms`` on ``page_key`` needs a heartbeat.

    Lifecycle events are always recorded. Interaction events are recorded when
    nothing has been recorded yet, when the page path changed, or once more
    than ``min_interval_ms`` has passed since the last heartbeat.
    """
    require_non_negative(min_interval_ms, "min_interval_ms")
    if event_type in LIFECYCLE_EVENTS:
        return True
    if last_heartbeat is None:
        return True
    if last_heartbeat.path != page_key:
        return True
    return last_heartbeat.time + min_interval_ms < now_ms


def create_heartbeat(event_type: str, url: str, title: Optional[str], time_ms: int) -> Heartbeat:
    require_non_negative(time_ms, "time_ms")
    origin, path = split_page_url(url)
    return Heartbeat(
        type=event_type,
        time=int(time_ms),
        origin=origin,
        path=path,
        title=normalize_title(title),
    )


@dataclass(frozen=True, slots=True)
class CaptureSession:
    """Capture state for one page: the last heartbeat that was recorded."""

    min_interval_ms: int
    last_heartbeat: Optional[Heartbeat] = None

    def observe(
        self, event_type: str, url: str, title: Optional[str], now_ms: int
    ) -> tuple["CaptureSession", Optional[Heartbeat]]:
        """Return the next session state and the heartbeat to store, if any."""
        candidate = create_heartbeat(event_type, url, title, now_ms)
        if not should_emit(
            self.last_heartbeat,
            event_type,
            now_ms,
            candidate.path,
            min_interval_ms=self.min_interval_ms,
        ):
            logger.debug("Skipping %s event at %d; recorded recently.", event_type, now_ms)
            return self, None
        return replace(self, last_heartbeat=candidate), candidate
