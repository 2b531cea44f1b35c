"""FastAPI application that exposes heartbeat statistics over HTTP."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from .aggregation import aggregate, field_key, top_n
from .charts import aggregate_to_chart_data
from .config import EngineSettings
from .errors import InvalidArgument, StoreError
from .filters import resolve_window
from .formatting import to_readable
from .models import Aggregate, Heartbeat
from .paths import get_store_path
from .sessions import reconstruct, total_length
from .store import HeartbeatStore

logger = logging.getLogger(__name__)


class HeartbeatPayload(BaseModel):
    type: str
    url: str
    title: str = ""
    time: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    store_path: Optional[Path] = None,
    settings: Optional[EngineSettings] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_store_path = Path(store_path or get_store_path())
    resolved_settings = settings or EngineSettings()
    store = HeartbeatStore(resolved_store_path)

    app = FastAPI(title="Browse Time", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store
    app.state.settings = resolved_settings

    def _load(request: Request, window: str) -> list[Heartbeat]:
        try:
            window_filter = resolve_window(window)
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        try:
            return request.app.state.store.get_heartbeats(window_filter)
        except StoreError as exc:
            logger.exception("Failed to read heartbeat store.")
            raise HTTPException(status_code=500, detail=str(exc)) from exc

    def _timeout_ms(timeout_minutes: Optional[float]) -> int:
        if timeout_minutes is None:
            return resolved_settings.timeout_ms
        try:
            return EngineSettings.from_minutes(timeout_minutes).timeout_ms
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    def _grouped(
        request: Request,
        window: str,
        group_by: str,
        timeout_minutes: Optional[float],
        limit: int,
    ) -> list[Aggregate]:
        heartbeats = _load(request, window)
        try:
            return top_n(
                aggregate(heartbeats, _timeout_ms(timeout_minutes), field_key(group_by)),
                limit,
            )
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        return {
            "store_path": str(request.app.state.store.path),
            "timeout_minutes": resolved_settings.timeout.total_seconds() / 60.0,
            "interaction_minutes": resolved_settings.interaction_interval.total_seconds() / 60.0,
        }

    @app.get("/api/top")
    def top_origins_endpoint(
        request: Request,
        window: str = Query(default="today", description="today, week or all."),
        limit: int = Query(default=resolved_settings.top_limit, ge=0),
        timeout_minutes: Optional[float] = Query(default=None, ge=0),
    ) -> Dict[str, Any]:
        ranked = _grouped(request, window, "origin", timeout_minutes, limit)
        return {
            "window": window,
            "entries": [_aggregate_payload(entry, "origin") for entry in ranked],
        }

    @app.get("/api/aggregate")
    def aggregate_endpoint(
        request: Request,
        group_by: str = Query(default="origin", description="Heartbeat field to group by."),
        window: str = Query(default="today", description="today, week or all."),
        limit: int = Query(default=resolved_settings.top_limit, ge=0),
        timeout_minutes: Optional[float] = Query(default=None, ge=0),
    ) -> Dict[str, Any]:
        ranked = _grouped(request, window, group_by, timeout_minutes, limit)
        return {
            "window": window,
            "group_by": group_by,
            "entries": [_aggregate_payload(entry, group_by) for entry in ranked],
        }

    @app.get("/api/durations")
    def durations_endpoint(
        request: Request,
        window: str = Query(default="today", description="today, week or all."),
        origin: Optional[str] = Query(default=None),
        timeout_minutes: Optional[float] = Query(default=None, ge=0),
    ) -> Dict[str, Any]:
        heartbeats = _load(request, window)
        if origin is not None:
            heartbeats = [heartbeat for heartbeat in heartbeats if heartbeat.origin == origin]
        spans = reconstruct(heartbeats, _timeout_ms(timeout_minutes))
        total = total_length(spans)
        return {
            "window": window,
            "durations": [span.to_dict() for span in spans],
            "total_time": total,
            "readable": to_readable(total).to_dict(),
        }

    @app.get("/api/chart")
    def chart_endpoint(
        request: Request,
        window: str = Query(default="today", description="today, week or all."),
        limit: int = Query(default=resolved_settings.top_limit, ge=0),
        timeout_minutes: Optional[float] = Query(default=None, ge=0),
    ) -> Dict[str, Any]:
        ranked = _grouped(request, window, "origin", timeout_minutes, limit)
        return aggregate_to_chart_data(
            ranked,
            "Minutes",
            get_value=lambda entry: round(entry.total_time / 60000, 2),
        )

    @app.post("/api/heartbeats")
    def record_heartbeat(payload: HeartbeatPayload, request: Request) -> Dict[str, Any]:
        now_ms = payload.time if payload.time is not None else int(time.time() * 1000)
        store: HeartbeatStore = request.app.state.store
        try:
            heartbeat = store.record_event(
                payload.type,
                payload.url,
                payload.title,
                now_ms,
                min_interval_ms=resolved_settings.interaction_interval_ms,
            )
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except StoreError as exc:
            logger.exception("Failed to store heartbeat.")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        if heartbeat is None:
            return {"status": "ignored"}
        return {"status": "ok", "heartbeat": heartbeat.to_dict()}

    return app


def _aggregate_payload(entry: Aggregate, key_name: str) -> Dict[str, Any]:
    payload = entry.to_dict(key_name)
    payload["readable"] = to_readable(entry.total_time).to_dict()
    return payload
