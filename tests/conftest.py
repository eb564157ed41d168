"""Shared fixtures for tests."""

from __future__ import annotations

from typing import Any

import pytest

from dss_api_client.exceptions import DSSTransportError


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedTransport:
    """Transport double replaying queued responses in order.

    Each queued item is either a body to return or an exception to
    raise.  Every call is recorded as ``(path, copy of query)``.
    """

    def __init__(self) -> None:
        self.responses: list[Any] = []
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def send(self, path: str, query: Any = None) -> Any:
        self.calls.append((path, dict(query or {})))
        if not self.responses:
            raise AssertionError(f"unexpected request to {path}")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.calls]


def login_ok(token: str) -> dict[str, Any]:
    return {"ok": True, "result": {"token": token}}


def transport_failure(path: str, status_code: int = 500) -> DSSTransportError:
    return DSSTransportError(path, status_code=status_code)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()
