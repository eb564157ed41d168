"""
Session token lifecycle.

Every request to a domain path of the dSS must carry a short-lived
session token.  :class:`SessionManager` caches that token, considers it
stale after ``session_timeout`` seconds without a successful use, and
exchanges the application token for a new one when the next request
finds it stale.  The renewal happens lazily inside :meth:`SessionManager.
request`; there is no background refresh.

The server has no distinguishable "session expired" answer, so staleness
is decided purely by elapsed time.  The default timeout of 50 seconds is
kept below the server's real session lifetime so an expired token is
never presented.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from .body import is_ok, result_field
from .exceptions import DSSAuthError, DSSTransportError
from .transport import DSSTransport

logger = logging.getLogger(__name__)

LOGIN_APPLICATION_PATH = "/json/system/loginApplication"
DEFAULT_SESSION_TIMEOUT = 50.0


@dataclasses.dataclass(frozen=True)
class SessionState:
    """The cached session token and the clock reading it was last confirmed at."""

    token: Optional[str] = None
    issued_at: float = 0.0


class SessionManager:
    """Send requests with a cached session token, renewing it when stale.

    Parameters
    ----------
    transport : DSSTransport
        Transport used for both the renewal and the actual requests.
    session_timeout : float, optional
        Seconds after which an unused session token is treated as stale.
    clock : callable, optional
        Monotonic clock returning seconds.  Defaults to
        :func:`time.monotonic`.
    max_renewals : int, optional
        Upper bound on renewals performed for a single request.

    Notes
    -----
    Renewal is serialized by a lock so that callers which find the
    session stale at the same time trigger a single round trip.  Requests
    with a fresh token never take the lock.
    """

    def __init__(
        self,
        transport: DSSTransport,
        *,
        session_timeout: float = DEFAULT_SESSION_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        max_renewals: int = 1,
    ) -> None:
        if session_timeout <= 0:
            raise ValueError("session_timeout must be positive, got %r" % session_timeout)
        if max_renewals < 1:
            raise ValueError("max_renewals must be at least 1, got %r" % max_renewals)

        self._transport = transport
        self.session_timeout = float(session_timeout)
        self.max_renewals = max_renewals
        self._clock = clock
        self._state = SessionState()
        self._renew_lock = threading.Lock()

    def _is_stale(self, state: SessionState) -> bool:
        return state.token is None or self._clock() >= state.issued_at + self.session_timeout

    def is_stale(self) -> bool:
        """Return ``True`` if the next request will renew the session first."""
        return self._is_stale(self._state)

    # ------------------------------------------------------------------
    # Renewal
    # ------------------------------------------------------------------
    def _renew(self, app_token: str, observed: SessionState) -> None:
        """Exchange ``app_token`` for a new session token.

        ``observed`` is the state that was found stale.  If another caller
        has replaced it with a fresh one while this caller waited for the
        lock, no request is made.  On any failure the cached state is left
        as it was.
        """
        with self._renew_lock:
            current = self._state
            if current is not observed and not self._is_stale(current):
                logger.debug("Session token was renewed by a concurrent request")
                return

            logger.debug("Requesting new session token")
            try:
                body = self._transport.send(LOGIN_APPLICATION_PATH, {"loginToken": app_token})
            except DSSTransportError as exc:
                raise DSSAuthError(f"Failed to obtain session token: {exc}") from exc

            if not is_ok(body):
                message = body.get("message") if isinstance(body, dict) else None
                raise DSSAuthError(f"Failed to obtain session token: {message}")

            token = result_field(body, "token", LOGIN_APPLICATION_PATH)
            self._state = SessionState(token=token, issued_at=self._clock())
            logger.debug("Obtained new session token")

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def _send(self, path: str, query: Dict[str, Any], state: SessionState) -> Any:
        query["token"] = state.token
        body = self._transport.send(path, query)
        # Slide the expiry, unless a renewal replaced the token meanwhile.
        if self._state.token == state.token:
            self._state = SessionState(token=state.token, issued_at=self._clock())
        return body

    def request(
        self,
        path: str,
        query: Optional[Dict[str, Any]],
        app_token: str,
    ) -> Any:
        """Request ``path`` with the session token added to ``query``.

        ``query`` is modified in place: its ``token`` entry is set to the
        current session token.  A stale session is renewed with
        ``app_token`` first and the request is then sent once.

        Raises
        ------
        DSSAuthError
            If the renewal is rejected or fails, or the session is still
            stale after ``max_renewals`` renewals.
        DSSProtocolError
            If the renewal response does not contain a token.
        DSSTransportError
            If the request itself fails.  It is not retried.
        """
        if query is None:
            query = {}

        renewals = 0
        while True:
            state = self._state
            if not self._is_stale(state):
                logger.debug("Requesting %s with cached session token", path)
                return self._send(path, query, state)
            if renewals >= self.max_renewals:
                raise DSSAuthError(
                    f"Session token for {path} still stale after {renewals} renewal(s)"
                )
            self._renew(app_token, state)
            renewals += 1
