"""Tests for rebuilding durations from heartbeats."""

from __future__ import annotations

import math
import random

import pytest

from browse_time.errors import InvalidArgument
from browse_time.models import Duration
from browse_time.sessions import reconstruct, total_length

from conftest import make_heartbeat


class TestReconstruct:
    def test_empty_batch(self) -> None:
        assert reconstruct([], 60000) == []

    def test_single_heartbeat(self) -> None:
        durations = reconstruct([make_heartbeat(5000)], 60000)
        assert durations == [Duration(start=5000, end=5000)]
        assert durations[0].length == 0

    def test_splits_on_gap_larger_than_timeout(self) -> None:
        heartbeats = [
            make_heartbeat(0, origin="a"),
            make_heartbeat(30000, origin="a"),
            make_heartbeat(200000, origin="a"),
        ]
        durations = reconstruct(heartbeats, 60000)
        assert [item.to_dict() for item in durations] == [
            {"start": 0, "end": 30000, "length": 30000},
            {"start": 200000, "end": 200000, "length": 0},
        ]

    def test_gap_equal_to_timeout_stays_in_session(self) -> None:
        durations = reconstruct([make_heartbeat(0), make_heartbeat(1000)], 1000)
        assert durations == [Duration(start=0, end=1000)]

    def test_slow_drift_is_one_session(self) -> None:
        heartbeats = [make_heartbeat(step * 50000) for step in range(20)]
        durations = reconstruct(heartbeats, 60000)
        assert len(durations) == 1
        assert durations[0].length == 19 * 50000

    def test_unordered_input_is_sorted_without_mutation(self) -> None:
        heartbeats = [make_heartbeat(300000), make_heartbeat(0), make_heartbeat(10000)]
        snapshot = list(heartbeats)
        durations = reconstruct(heartbeats, 60000)
        assert heartbeats == snapshot
        assert durations == [Duration(start=0, end=10000), Duration(start=300000, end=300000)]

    def test_duplicate_timestamps(self) -> None:
        heartbeats = [make_heartbeat(1000), make_heartbeat(1000), make_heartbeat(1000)]
        assert reconstruct(heartbeats, 0) == [Duration(start=1000, end=1000)]

    def test_zero_timeout_separates_distinct_times(self) -> None:
        heartbeats = [make_heartbeat(0), make_heartbeat(1), make_heartbeat(2)]
        assert len(reconstruct(heartbeats, 0)) == 3

    @pytest.mark.parametrize("timeout", [-1, -0.5, math.inf, math.nan])
    def test_rejects_invalid_timeout(self, timeout: float) -> None:
        with pytest.raises(InvalidArgument):
            reconstruct([make_heartbeat(0)], timeout)

    def test_rejects_negative_timeout_on_empty_batch(self) -> None:
        with pytest.raises(InvalidArgument):
            reconstruct([], -1)

    def test_random_batches_are_ordered_and_disjoint(self) -> None:
        rng = random.Random(1234)
        for _ in range(50):
            heartbeats = [make_heartbeat(rng.randint(0, 10_000_000)) for _ in range(rng.randint(1, 40))]
            timeout = rng.randint(0, 500_000)
            durations = reconstruct(heartbeats, timeout)
            for duration in durations:
                assert duration.start <= duration.end
                assert duration.length == duration.end - duration.start
            for earlier, later in zip(durations, durations[1:]):
                assert earlier.end < later.start
                assert later.start - earlier.end > timeout

    def test_boundaries_rebuild_the_same_sessions(self) -> None:
        heartbeats = [
            make_heartbeat(time)
            for time in (0, 20000, 40000, 500000, 510000, 2000000)
        ]
        durations = reconstruct(heartbeats, 60000)
        boundaries = [make_heartbeat(item.start) for item in durations] + [
            make_heartbeat(item.end) for item in durations
        ]
        assert reconstruct(boundaries, 60000) == durations


def test_total_length() -> None:
    durations = [Duration(start=0, end=100), Duration(start=500, end=750)]
    assert total_length(durations) == 350
    assert total_length([]) == 0
