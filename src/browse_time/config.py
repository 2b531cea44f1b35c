"""Configuration models and helpers for heartbeat reporting."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .errors import InvalidArgument, require_non_negative


@dataclass(slots=True)
class EngineSettings:
    """Caller-side preferences handed to the aggregation functions."""

    timeout: timedelta = timedelta(minutes=15)
    interaction_interval: timedelta = timedelta(minutes=2)
    top_limit: int = 10

    @classmethod
    def from_minutes(
        cls,
        timeout_minutes: float,
        interaction_minutes: float | None = None,
        top_limit: int | None = None,
    ) -> "EngineSettings":
        interaction = interaction_minutes if interaction_minutes is not None else 2.0
        require_non_negative(timeout_minutes, "timeout_minutes")
        require_non_negative(interaction, "interaction_minutes")
        try:
            return cls(
                timeout=timedelta(minutes=timeout_minutes),
                interaction_interval=timedelta(minutes=interaction),
                top_limit=top_limit if top_limit is not None else 10,
            )
        except OverflowError as exc:
            raise InvalidArgument(f"Interval too large: {exc}") from exc

    @property
    def timeout_ms(self) -> int:
        return int(self.timeout.total_seconds() * 1000)

    @property
    def interaction_interval_ms(self) -> int:
        return int(self.interaction_interval.total_seconds() * 1000)
