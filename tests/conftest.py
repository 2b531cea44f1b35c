"""Shared fixtures for browse-time tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from browse_time.models import Heartbeat


def make_heartbeat(
    time: int,
    origin: Any = "https://example.com",
    path: str = "/",
    type: str = "load",
    title: str = "Example",
) -> Heartbeat:
    return Heartbeat(type=type, time=time, origin=origin, path=path, title=title)


@pytest.fixture
def heartbeat() -> Callable[..., Heartbeat]:
    return make_heartbeat


@pytest.fixture
def store_file(tmp_path: Path) -> Callable[[list[Heartbeat]], Path]:
    """Write heartbeats into a store document and return its path."""

    def _write(heartbeats: list[Heartbeat]) -> Path:
        path = tmp_path / "heartbeats.json"
        path.write_text(
            json.dumps({"heartbeats": [item.to_dict() for item in heartbeats]}),
            encoding="utf-8",
        )
        return path

    return _write
