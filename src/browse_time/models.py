"""Domain models for recorded browsing activity."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Heartbeat:
    """A single observed moment of activity on a page."""

    type: str
    time: int
    origin: str
    path: str
    title: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class Duration:
    """Represents a contiguous span of activity rebuilt from heartbeats."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end, "length": self.length}


@dataclass(frozen=True, slots=True)
class Aggregate:
    """Total active time attributed to one value of a grouping key."""

    key: Any
    total_time: int

    def to_dict(self, key_name: str = "key") -> dict[str, Any]:
        return {key_name: self.key, "totalTime": self.total_time}


@dataclass(frozen=True, slots=True)
class ReadableDuration:
    hours: int
    minutes: int
    seconds: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)
