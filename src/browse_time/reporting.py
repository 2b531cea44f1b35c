"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from .aggregation import HeartbeatFilter, aggregate, top_n
from .formatting import format_readable
from .models import Aggregate, Duration, Heartbeat
from .sessions import reconstruct, total_length


class SummaryPrinter:
    """Render human-readable summaries in the console."""

    def __init__(self, heartbeats: Sequence[Heartbeat], timeout_ms: int) -> None:
        self.heartbeats = list(heartbeats)
        self.timeout_ms = timeout_ms

    def print_top(
        self,
        group_by: str,
        limit: int,
        heartbeat_filter: Optional[HeartbeatFilter] = None,
        title: str = "Top origins",
    ) -> list[Aggregate]:
        aggregates = aggregate(self.heartbeats, self.timeout_ms, group_by, heartbeat_filter)
        ranked = top_n(aggregates, limit)
        if not ranked:
            print("No activity recorded for the selected window.")
            return ranked

        print(title)
        print("-" * 50)
        for entry in ranked:
            label = "(none)" if entry.key is None else str(entry.key)
            print(f"  {label[:38]:<38} {format_readable(entry.total_time)}")
        total = sum(entry.total_time for entry in aggregates)
        print("-" * 50)
        print(f"  {'Total':<38} {format_readable(total)}")
        return ranked

    def print_durations(self, heartbeats: Optional[Sequence[Heartbeat]] = None) -> list[Duration]:
        durations = reconstruct(self.heartbeats if heartbeats is None else heartbeats, self.timeout_ms)
        if not durations:
            print("No activity recorded for the selected window.")
            return durations

        for duration in durations:
            start = _format_time(duration.start)
            end = _format_time(duration.end)
            print(f"  {start} -> {end}  {format_readable(duration.length)}")
        print(f"  {len(durations)} spans, {format_readable(total_length(durations))} in total")
        return durations


def _format_time(time_ms: int) -> str:
    return datetime.fromtimestamp(time_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")
