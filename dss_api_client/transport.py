"""
HTTPS transport for the dSS JSON API.

:class:`DSSTransport` performs exactly one GET request per call against
``https://<host>:<port><path>`` and returns the decoded JSON body.  It
does not look at the ``ok`` flag the server embeds in its responses;
interpreting that flag is left to the callers.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
import urllib3

from .exceptions import DSSProtocolError, DSSTransportError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080


class DSSTransport:
    """Send GET requests to a dSS and decode the JSON responses.

    Parameters
    ----------
    host : str
        Host name or IP address of the dSS.
    port : int, optional
        HTTPS port of the JSON API.  Defaults to ``8080``.
    verify : bool, optional
        Whether to validate the server's TLS certificate.  A dSS ships
        with a self-signed certificate, so validation is off by default.
    timeout : float, optional
        Timeout in seconds for each request.  ``None`` waits forever.
    session : requests.Session, optional
        Session to send requests through.  A new one is created when
        omitted.
    """

    def __init__(
        self,
        host: str,
        *,
        port: int = DEFAULT_PORT,
        verify: bool = False,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not host:
            raise ValueError("host must be provided")

        self.host = host
        self.port = port
        self.verify = verify
        self.timeout = timeout
        self.base_url = f"https://{host}:{port}"
        self._session = session or requests.Session()

        if not verify:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def send(self, path: str, query: Optional[Dict[str, Any]] = None) -> Any:
        """Request ``path`` with ``query`` as URL parameters.

        Returns
        -------
        Any
            The decoded JSON body of a ``200`` response.

        Raises
        ------
        DSSTransportError
            If the request fails on the network or the status is not 200.
        DSSProtocolError
            If a ``200`` response does not carry valid JSON.
        """
        url = self.base_url + path
        logger.debug("GET %s", url)
        try:
            response = self._session.get(
                url,
                params=query,
                verify=self.verify,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise DSSTransportError(path, cause=exc) from exc

        if response.status_code != 200:
            raise DSSTransportError(path, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise DSSProtocolError(f"Response from {path} is not valid JSON") from exc

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "DSSTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
