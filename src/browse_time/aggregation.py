"""Grouping, totals and rankings over heartbeat batches."""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Callable, Hashable, Iterable, Optional, Sequence, TypeVar, Union

from .errors import InvalidArgument, require_non_negative
from .models import Aggregate, Heartbeat
from .sessions import reconstruct, total_length

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)

HeartbeatFilter = Callable[[Heartbeat, int, Sequence[Heartbeat]], bool]
KeyFunction = Callable[[Heartbeat], Any]

HEARTBEAT_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(Heartbeat))


def field_key(name: str) -> KeyFunction:
    """Return a key function reading the named heartbeat field."""
    if name not in HEARTBEAT_FIELDS:
        raise InvalidArgument(
            f"Unknown heartbeat field {name!r}; expected one of {', '.join(HEARTBEAT_FIELDS)}"
        )

    def _key(heartbeat: Heartbeat) -> Any:
        return getattr(heartbeat, name, None)

    return _key


def group_heartbeats(
    heartbeats: Iterable[Heartbeat], key_fn: Callable[[Heartbeat], K]
) -> list[tuple[K, list[Heartbeat]]]:
    """Partition heartbeats by key, keeping groups in order of first appearance."""
    groups: dict[K, list[Heartbeat]] = {}
    for heartbeat in heartbeats:
        groups.setdefault(key_fn(heartbeat), []).append(heartbeat)
    return list(groups.items())


def filter_heartbeats(
    heartbeats: Sequence[Heartbeat], heartbeat_filter: Optional[HeartbeatFilter]
) -> list[Heartbeat]:
    if heartbeat_filter is None:
        return list(heartbeats)
    return [
        heartbeat
        for index, heartbeat in enumerate(heartbeats)
        if heartbeat_filter(heartbeat, index, heartbeats)
    ]


def aggregate(
    heartbeats: Sequence[Heartbeat],
    timeout_ms: float,
    group_key: Union[str, KeyFunction],
    heartbeat_filter: Optional[HeartbeatFilter] = None,
) -> list[Aggregate]:
    """Total the reconstructed duration of each group of heartbeats.

    The filter runs before grouping, so removing heartbeats can join spans
    that would otherwise be separate sessions.
    """
    require_non_negative(timeout_ms, "timeout_ms")
    key_fn = field_key(group_key) if isinstance(group_key, str) else group_key
    retained = filter_heartbeats(heartbeats, heartbeat_filter)
    results = [
        Aggregate(key=key, total_time=total_length(reconstruct(group, timeout_ms)))
        for key, group in group_heartbeats(retained, key_fn)
    ]
    logger.debug(
        "Aggregated %d of %d heartbeats into %d groups.",
        len(retained),
        len(heartbeats),
        len(results),
    )
    return results


def top_n(aggregates: Iterable[Aggregate], limit: int) -> list[Aggregate]:
    """Return the ``limit`` largest aggregates by total time."""
    if limit <= 0:
        return []
    ranked = sorted(aggregates, key=lambda item: item.total_time, reverse=True)
    return ranked[:limit]


def top_origins(
    heartbeats: Sequence[Heartbeat],
    timeout_ms: float,
    limit: int,
    heartbeat_filter: Optional[HeartbeatFilter] = None,
) -> list[Aggregate]:
    return top_n(aggregate(heartbeats, timeout_ms, "origin", heartbeat_filter), limit)
