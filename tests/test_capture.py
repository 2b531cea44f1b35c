"""Tests for the heartbeat capture decision."""

from __future__ import annotations

import pytest

from browse_time.capture import (
    INTERACTION_EVENTS,
    LIFECYCLE_EVENTS,
    CaptureSession,
    create_heartbeat,
    should_emit,
)
from browse_time.errors import InvalidArgument
from browse_time.models import Heartbeat

from conftest import make_heartbeat

INTERVAL = 120000


class TestShouldEmit:
    @pytest.mark.parametrize("event", LIFECYCLE_EVENTS)
    def test_lifecycle_always_emits(self, event: str) -> None:
        last = make_heartbeat(1000, path="/")
        assert should_emit(last, event, 1001, "/", min_interval_ms=INTERVAL)

    def test_first_interaction_emits(self) -> None:
        assert should_emit(None, "scroll", 0, "/", min_interval_ms=INTERVAL)

    @pytest.mark.parametrize("event", INTERACTION_EVENTS)
    def test_interaction_is_throttled(self, event: str) -> None:
        last = make_heartbeat(1000, path="/")
        assert not should_emit(last, event, 1000 + INTERVAL, "/", min_interval_ms=INTERVAL)
        assert should_emit(last, event, 1001 + INTERVAL, "/", min_interval_ms=INTERVAL)

    def test_path_change_emits(self) -> None:
        last = make_heartbeat(1000, path="/a")
        assert should_emit(last, "click", 1001, "/b", min_interval_ms=INTERVAL)

    def test_rejects_negative_interval(self) -> None:
        with pytest.raises(InvalidArgument):
            should_emit(None, "click", 0, "/", min_interval_ms=-1)


def test_create_heartbeat() -> None:
    heartbeat = create_heartbeat("load", "https://Example.com/a?b=1", "  Title ", 42)
    assert heartbeat == Heartbeat(
        type="load", time=42, origin="https://example.com", path="/a?b=1", title="Title"
    )


class TestCaptureSession:
    def test_tracks_last_heartbeat_without_mutation(self) -> None:
        session = CaptureSession(min_interval_ms=INTERVAL)
        after_load, first = session.observe("load", "https://a.test/", "A", 0)
        assert first is not None
        assert session.last_heartbeat is None
        assert after_load.last_heartbeat == first

        same, skipped = after_load.observe("scroll", "https://a.test/", "A", 5000)
        assert skipped is None
        assert same is after_load

        later, emitted = after_load.observe("scroll", "https://a.test/", "A", INTERVAL + 1)
        assert emitted is not None and emitted.type == "scroll"
        assert later.last_heartbeat == emitted

    def test_navigation_emits(self) -> None:
        session = CaptureSession(min_interval_ms=INTERVAL)
        session, _ = session.observe("load", "https://a.test/one", "", 0)
        _, emitted = session.observe("click", "https://a.test/two", "", 10)
        assert emitted is not None
        assert emitted.path == "/two"
