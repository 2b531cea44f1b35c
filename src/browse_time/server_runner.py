"""Helpers to launch the local statistics API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import uvicorn

from .config import EngineSettings
from .paths import get_store_path
from .webapp import create_app


def run_api(
    *,
    host: str = "127.0.0.1",
    port: int = 8766,
    store_path: Optional[Path] = None,
    settings: Optional[EngineSettings] = None,
    log_level: str = "info",
) -> None:
    """Start the FastAPI statistics service."""
    app = create_app(
        store_path=store_path or get_store_path(),
        settings=settings or EngineSettings(),
    )

    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    logging.getLogger(__name__).info("Serving heartbeat statistics on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=log_level)
