"""Exceptions raised by the heartbeat engine."""

from __future__ import annotations

import math


class InvalidArgument(ValueError):
    """Raised when an engine operation receives an argument outside its domain."""


class StoreError(RuntimeError):
    """Raised when a heartbeat store document cannot be read or written."""


def require_non_negative(value: float, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidArgument(f"{name} must be finite, got {value!r}")
    if value < 0:
        raise InvalidArgument(f"{name} must be non-negative, got {value!r}")
