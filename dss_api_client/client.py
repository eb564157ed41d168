"""
Client implementation for the digitalSTROM server (dSS) JSON API.

This module defines the :class:`DSSClient` class which obtains and
activates an application token for a named application and performs
HTTPS requests against the dSS JSON API.  The client caches the
session token derived from the application token and automatically
renews it when it has gone unused for longer than the session timeout.

Usage
-----

.. code-block:: python

    from dss_api_client import DSSClient

    client = DSSClient("192.168.1.10")

    # One-time setup; store the returned token somewhere safe
    app_token = client.initialize_authentication("my-app", "dssadmin", "secret")

    # Query the server, the session token is handled by the client
    body = client.request("/json/apartment/getName", app_token=app_token)
    print(body["result"]["name"])

Once activated, an application token stays valid across restarts.  Pass
it to the constructor as ``app_token`` to avoid repeating it on every
call, and skip :meth:`DSSClient.initialize_authentication` on the next
start.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional, Union

from .credentials import CredentialIssuer
from .session import DEFAULT_SESSION_TIMEOUT, SessionManager
from .transport import DEFAULT_PORT, DSSTransport

logger = logging.getLogger(__name__)


class DSSClient:
    """A simple client for the dSS JSON API.

    Parameters
    ----------
    host : str
        Host name or IP address of the dSS.
    log_level : int or str, optional
        Level applied to the ``dss_api_client`` logger.  The library
        never installs handlers; it is left to the application to do so.
    session_timeout : float, optional
        Seconds after which an unused session token is renewed.  The
        default of 50 seconds stays below the server's own limit.
    port : int, optional
        HTTPS port of the JSON API.  Defaults to ``8080``.
    verify : bool, optional
        Whether to validate the TLS certificate of the server.
    timeout : float, optional
        Timeout in seconds for each HTTP request.
    app_token : str, optional
        An activated application token used when :meth:`request` is
        called without one.
    clock : callable, optional
        Monotonic clock used for session expiry.

    Notes
    -----
    One client holds one session.  Concurrent callers share it, and a
    stale session is renewed only once no matter how many requests find
    it stale at the same time.
    """

    def __init__(
        self,
        host: str,
        *,
        log_level: Optional[Union[int, str]] = None,
        session_timeout: float = DEFAULT_SESSION_TIMEOUT,
        port: int = DEFAULT_PORT,
        verify: bool = False,
        timeout: Optional[float] = None,
        app_token: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not host:
            raise ValueError("No dSS host specified")

        if log_level is not None:
            logging.getLogger(__package__).setLevel(log_level)

        self.host = host
        self.app_token = app_token
        self.transport = DSSTransport(host, port=port, verify=verify, timeout=timeout)
        self.issuer = CredentialIssuer(self.transport)
        self.session = SessionManager(
            self.transport,
            session_timeout=session_timeout,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def retrieve_application_token(self, app_name: str) -> str:
        """Request a new, not yet activated, application token."""
        return self.issuer.request_application_token(app_name)

    def activate_application_token(self, username: str, password: str, app_token: str) -> None:
        """Activate ``app_token`` with the credentials of a dSS user."""
        self.issuer.activate_application_token(username, password, app_token)

    def initialize_authentication(self, app_name: str, username: str, password: str) -> str:
        """Obtain and activate an application token in one go.

        The token is returned for the caller to persist; it is not
        stored on the client.  Errors from either step are raised
        unchanged, including the server refusing to activate a token
        that is already active.

        Raises
        ------
        DSSProtocolError
            If no application token could be obtained, or activation
            failed on the server.
        DSSAuthError
            If ``username`` and ``password`` are rejected.
        DSSTransportError
            If an activation request fails on the transport level.
        """
        app_token = self.retrieve_application_token(app_name)
        logger.debug("Retrieved application token for %s", app_name)
        try:
            self.activate_application_token(username, password, app_token)
        except Exception as exc:
            logger.debug("Error while activating application token: %s", exc)
            raise
        logger.debug("Authentication of %s successful", app_name)
        return app_token

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def request(
        self,
        path: str,
        query: Optional[Dict[str, Any]] = None,
        *,
        app_token: Optional[str] = None,
    ) -> Any:
        """Request ``path`` with a valid session token.

        ``query`` is updated in place with the session token.  See
        :meth:`SessionManager.request` for the errors raised.
        """
        token = app_token or self.app_token
        if not token:
            raise ValueError("app_token must be provided")
        return self.session.request(path, query, token)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "DSSClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
