"""Helpers for reading the ``{"ok": ..., "result": {...}}`` envelope of dSS responses."""

from __future__ import annotations

from typing import Any

from .exceptions import DSSProtocolError


def is_ok(body: Any) -> bool:
    return isinstance(body, dict) and body.get("ok") is True


def result_field(body: Any, field: str, path: str) -> str:
    """Return ``body["result"][field]`` or raise :class:`DSSProtocolError`."""
    try:
        value = body["result"][field]
    except (KeyError, TypeError) as exc:
        raise DSSProtocolError(
            f"Response from {path} did not contain result.{field}"
        ) from exc
    if not value:
        raise DSSProtocolError(f"Response from {path} contained an empty result.{field}")
    return value
