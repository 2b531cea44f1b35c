"""Date-window predicates over heartbeats, evaluated in local time."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from .errors import InvalidArgument
from .models import Heartbeat

LAST_WEEK_DAYS = 7


def _local_datetime(time_ms: int) -> datetime:
    return datetime.fromtimestamp(time_ms / 1000)


def _to_ms(value: datetime) -> int:
    return int(round(value.timestamp() * 1000))


def from_today(
    heartbeat: Heartbeat,
    index: Optional[int] = None,
    heartbeats: Optional[Sequence[Heartbeat]] = None,
    *,
    now: Optional[datetime] = None,
) -> bool:
    """True when the heartbeat falls on the current local calendar day."""
    today = (now or datetime.now()).date()
    return _local_datetime(heartbeat.time).date() == today


def from_last_seven_days(
    heartbeat: Heartbeat,
    index: Optional[int] = None,
    heartbeats: Optional[Sequence[Heartbeat]] = None,
    *,
    now: Optional[datetime] = None,
) -> bool:
    """True when the heartbeat lies between local midnight seven days ago and
    the last millisecond of today, both ends inclusive."""
    current = now or datetime.now()
    start_of_today = current.replace(hour=0, minute=0, second=0, microsecond=0)
    window_start = start_of_today - timedelta(days=LAST_WEEK_DAYS)
    window_end = start_of_today.replace(hour=23, minute=59, second=59, microsecond=999000)
    return _to_ms(window_start) <= heartbeat.time <= _to_ms(window_end)


def everything(
    heartbeat: Heartbeat,
    index: Optional[int] = None,
    heartbeats: Optional[Sequence[Heartbeat]] = None,
) -> bool:
    return True


WINDOWS: dict[str, Callable[..., bool]] = {
    "today": from_today,
    "week": from_last_seven_days,
    "all": everything,
}


def resolve_window(name: str) -> Callable[..., bool]:
    try:
        return WINDOWS[name]
    except KeyError as exc:
        raise InvalidArgument(
            f"Unknown window {name!r}; expected one of {', '.join(WINDOWS)}"
        ) from exc
