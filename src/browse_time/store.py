"""JSON document adapter for the heartbeat store."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .aggregation import HeartbeatFilter, filter_heartbeats
from .capture import CaptureSession
from .errors import StoreError
from .models import Heartbeat
from .normalization import split_page_url

logger = logging.getLogger(__name__)


class HeartbeatRecord(BaseModel):
    type: str
    time: int = Field(ge=0)
    origin: str
    path: str
    title: str

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_heartbeat(cls, heartbeat: Heartbeat) -> "HeartbeatRecord":
        return cls.model_validate(heartbeat.to_dict())

    def to_heartbeat(self) -> Heartbeat:
        return Heartbeat(
            type=self.type,
            time=self.time,
            origin=self.origin,
            path=self.path,
            title=self.title,
        )


class HeartbeatDocument(BaseModel):
    heartbeats: list[HeartbeatRecord] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class HeartbeatStore:
    """Reads and appends heartbeats in a ``{"heartbeats": [...]}`` document."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def get_heartbeats(self, heartbeat_filter: Optional[HeartbeatFilter] = None) -> list[Heartbeat]:
        with self._lock:
            document = self._read_locked()
        heartbeats = [record.to_heartbeat() for record in document.heartbeats]
        return filter_heartbeats(heartbeats, heartbeat_filter)

    def last_heartbeat(self, origin: Optional[str] = None) -> Optional[Heartbeat]:
        """Return the newest heartbeat, optionally only among those for ``origin``."""
        with self._lock:
            document = self._read_locked()
        return _latest(document, origin)

    def record_event(
        self,
        event_type: str,
        url: str,
        title: Optional[str],
        now_ms: int,
        *,
        min_interval_ms: int,
    ) -> Optional[Heartbeat]:
        """Append a heartbeat for a page event unless the page was recorded too recently.

        The throttle compares against the newest heartbeat of the same origin.
        Deciding and appending happen under one lock.
        """
        origin, _ = split_page_url(url)
        with self._lock:
            document = self._read_locked()
            session = CaptureSession(
                min_interval_ms=min_interval_ms,
                last_heartbeat=_latest(document, origin),
            )
            _, heartbeat = session.observe(event_type, url, title, now_ms)
            if heartbeat is None:
                logger.debug("Skipped %s event for %s.", event_type, origin)
                return None
            document.heartbeats.append(HeartbeatRecord.from_heartbeat(heartbeat))
            self._write_locked(document)
        return heartbeat

    def store_heartbeat(self, heartbeat: Heartbeat) -> None:
        self.store_heartbeats([heartbeat])

    def store_heartbeats(self, heartbeats: Iterable[Heartbeat]) -> None:
        records = [HeartbeatRecord.from_heartbeat(heartbeat) for heartbeat in heartbeats]
        if not records:
            return
        with self._lock:
            document = self._read_locked()
            document.heartbeats.extend(records)
            self._write_locked(document)
        logger.debug("Stored %d heartbeats in %s.", len(records), self.path)

    def _read_locked(self) -> HeartbeatDocument:
        if not self.path.exists():
            return HeartbeatDocument()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Could not read heartbeat store {self.path}: {exc}") from exc
        if not raw.strip():
            return HeartbeatDocument()
        try:
            return HeartbeatDocument.model_validate_json(raw)
        except ValidationError as exc:
            raise StoreError(f"Malformed heartbeat store {self.path}: {exc}") from exc

    def _write_locked(self, document: HeartbeatDocument) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(document.model_dump_json(), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StoreError(f"Could not write heartbeat store {self.path}: {exc}") from exc


def _latest(document: HeartbeatDocument, origin: Optional[str]) -> Optional[Heartbeat]:
    records = [
        record for record in document.heartbeats if origin is None or record.origin == origin
    ]
    if not records:
        return None
    return max(records, key=lambda record: record.time).to_heartbeat()
