"""
Issuing and activating application tokens.

An application token is requested once under a human readable name and
then activated by a user login.  Both steps talk to the transport
directly: activation uses a one-shot session token from the login call,
not the session cached by :class:`~dss_api_client.session.SessionManager`.
"""

from __future__ import annotations

import logging

from .body import is_ok, result_field
from .exceptions import DSSAuthError, DSSProtocolError, DSSTransportError
from .transport import DSSTransport

logger = logging.getLogger(__name__)

REQUEST_APPLICATION_TOKEN_PATH = "/json/system/requestApplicationToken"
LOGIN_PATH = "/json/system/login"
ENABLE_TOKEN_PATH = "/json/system/enableToken"


class CredentialIssuer:
    """Obtain and activate application tokens."""

    def __init__(self, transport: DSSTransport) -> None:
        self._transport = transport

    def request_application_token(self, app_name: str) -> str:
        """Ask the server for a new application token named ``app_name``.

        The returned token is inactive until
        :meth:`activate_application_token` has been called with it.
        """
        path = REQUEST_APPLICATION_TOKEN_PATH
        try:
            body = self._transport.send(path, {"applicationName": app_name})
        except DSSTransportError as exc:
            raise DSSProtocolError(
                f"No valid application token response: {exc} (status {exc.status_code})"
            ) from exc
        return result_field(body, "applicationToken", path)

    def activate_application_token(self, username: str, password: str, app_token: str) -> None:
        """Enable ``app_token`` using the credentials of a dSS user.

        Raises
        ------
        DSSAuthError
            If the server rejects ``username`` and ``password``.
        DSSProtocolError
            If the server refuses to enable the token or answers with an
            unexpected body.
        DSSTransportError
            If either request fails on the transport level.
        """
        body = self._transport.send(LOGIN_PATH, {"user": username, "password": password})
        if not is_ok(body):
            raise DSSAuthError("wrong credentials")
        temporary_token = result_field(body, "token", LOGIN_PATH)

        body = self._transport.send(
            ENABLE_TOKEN_PATH,
            {"applicationToken": app_token, "token": temporary_token},
        )
        if not is_ok(body):
            raise DSSProtocolError("Unknown error while activating the application token")
        logger.debug("Application token activated for user %s", username)
