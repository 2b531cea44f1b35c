"""Utilities to normalize page addresses and titles."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit

from .errors import InvalidArgument

_DEFAULT_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
}

_WHITESPACE_PATTERN = re.compile(r"\s+")


def split_page_url(url: str) -> tuple[str, str]:
    """Return the ``(origin, path)`` pair a page reports for ``url``.

    The origin is ``scheme://host[:port]`` with default ports dropped; the
    path is the path plus query string, without the fragment.
    """
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError as exc:
        raise InvalidArgument(f"Invalid page URL {url!r}: {exc}") from exc

    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if not scheme or not host:
        raise InvalidArgument(f"Page URL {url!r} needs a scheme and a host")

    if ":" in host:
        host = f"[{host}]"
    origin = f"{scheme}://{host}"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        origin = f"{origin}:{port}"

    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    return origin, path


def normalize_title(title: Optional[str]) -> str:
    """Trim a document title and collapse runs of whitespace."""
    if not title:
        return ""
    return _WHITESPACE_PATTERN.sub(" ", title).strip()
