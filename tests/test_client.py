"""Tests for DSSClient and the authentication bootstrap."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from conftest import ManualClock, ScriptedTransport, login_ok, transport_failure
from dss_api_client import DSSClient
from dss_api_client.credentials import (
    ENABLE_TOKEN_PATH,
    LOGIN_PATH,
    REQUEST_APPLICATION_TOKEN_PATH,
)
from dss_api_client.exceptions import DSSAuthError, DSSProtocolError
from dss_api_client.session import LOGIN_APPLICATION_PATH


@pytest.fixture
def client(transport: ScriptedTransport, clock: ManualClock) -> DSSClient:
    with patch("dss_api_client.client.DSSTransport", return_value=transport):
        return DSSClient("192.168.1.10", clock=clock)


class TestConstruction:
    def test_host_required(self) -> None:
        with pytest.raises(ValueError, match="No dSS host"):
            DSSClient("")

    def test_log_level_applies_to_package_logger(self) -> None:
        package_logger = logging.getLogger("dss_api_client")
        previous = package_logger.level
        try:
            DSSClient("192.168.1.10", log_level=logging.DEBUG)
            assert package_logger.level == logging.DEBUG
        finally:
            package_logger.setLevel(previous)

    def test_session_timeout_is_passed_on(self) -> None:
        client = DSSClient("192.168.1.10", session_timeout=20)
        assert client.session.session_timeout == 20.0


class TestInitializeAuthentication:
    def test_returns_activated_token(
        self, client: DSSClient, transport: ScriptedTransport
    ) -> None:
        transport.queue(
            {"ok": True, "result": {"applicationToken": "A1"}},
            login_ok("T1"),
            {"ok": True},
        )

        assert client.initialize_authentication("my-app", "dssadmin", "secret") == "A1"
        assert transport.paths == [REQUEST_APPLICATION_TOKEN_PATH, LOGIN_PATH, ENABLE_TOKEN_PATH]

    def test_activation_skipped_when_request_fails(
        self, client: DSSClient, transport: ScriptedTransport
    ) -> None:
        transport.queue(transport_failure(REQUEST_APPLICATION_TOKEN_PATH, 500))

        with pytest.raises(DSSProtocolError):
            client.initialize_authentication("my-app", "dssadmin", "secret")

        assert transport.paths == [REQUEST_APPLICATION_TOKEN_PATH]

    def test_activation_failure_propagates(
        self, client: DSSClient, transport: ScriptedTransport
    ) -> None:
        transport.queue({"ok": True, "result": {"applicationToken": "A1"}}, {"ok": False})

        with pytest.raises(DSSAuthError, match="wrong credentials"):
            client.initialize_authentication("my-app", "dssadmin", "wrong")

    def test_does_not_touch_cached_session(
        self, client: DSSClient, transport: ScriptedTransport
    ) -> None:
        transport.queue(
            {"ok": True, "result": {"applicationToken": "A1"}},
            login_ok("T1"),
            {"ok": True},
        )

        client.initialize_authentication("my-app", "dssadmin", "secret")

        assert client.session.is_stale()
        assert client.app_token is None


class TestRequest:
    def test_requires_app_token(self, client: DSSClient) -> None:
        with pytest.raises(ValueError):
            client.request("/json/apartment/getName")

    def test_uses_constructor_app_token(
        self, transport: ScriptedTransport, clock: ManualClock
    ) -> None:
        with patch("dss_api_client.client.DSSTransport", return_value=transport):
            client = DSSClient("192.168.1.10", app_token="A1", clock=clock)
        transport.queue(login_ok("S1"), {"ok": True, "result": {"name": "Home"}})

        body = client.request("/json/apartment/getName", {"test": True})

        assert body == {"ok": True, "result": {"name": "Home"}}
        assert transport.calls == [
            (LOGIN_APPLICATION_PATH, {"loginToken": "A1"}),
            ("/json/apartment/getName", {"test": True, "token": "S1"}),
        ]

    def test_explicit_app_token_wins(
        self, client: DSSClient, transport: ScriptedTransport
    ) -> None:
        client.app_token = "A1"
        transport.queue(login_ok("S1"), {"ok": True})

        client.request("/json/apartment/getName", app_token="A2")

        assert transport.calls[0] == (LOGIN_APPLICATION_PATH, {"loginToken": "A2"})
