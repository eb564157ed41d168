"""
Custom exception types for the dSS API client.

These exceptions allow callers to distinguish between failures of the
HTTP transport, rejected credentials, and responses whose shape the
client did not expect.
"""

from __future__ import annotations

from typing import Optional


class DSSError(Exception):
    """Base exception for all dSS client errors."""


class DSSTransportError(DSSError):
    """Raised when a request fails on the network or returns a non-200 status.

    ``path`` is the server path that was requested, ``status_code`` the
    HTTP status (``None`` when no response was received) and ``cause``
    the underlying exception, if any.
    """

    def __init__(
        self,
        path: str,
        *,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.path = path
        self.status_code = status_code
        self.cause = cause
        if cause is not None:
            message = f"Request to {path} failed: {cause}"
        else:
            message = f"Request to {path} failed with status {status_code}"
        super().__init__(message)


class DSSAuthError(DSSError):
    """Raised when the server rejects user credentials or a login token."""


class DSSProtocolError(DSSError):
    """Raised when a response does not have the expected shape."""
