"""
Python client for interacting with the digitalSTROM server (dSS) JSON API.

This package provides a `DSSClient` class that obtains and activates an
application token for a named application and makes authenticated
requests to the JSON API of a dSS.

Requests on domain paths need a short-lived session token.  The client
caches it, renews it from the application token when it has gone stale,
and then sends the original request.

Examples
--------

```python
from dss_api_client import DSSClient

client = DSSClient("192.168.1.10")

# Only needed once per application; persist the returned token
app_token = client.initialize_authentication("my-app", "dssadmin", "secret")

zones = client.request(
    "/json/apartment/getReachableGroups",
    app_token=app_token,
)
```
"""

from .client import DSSClient
from .credentials import CredentialIssuer
from .exceptions import DSSAuthError, DSSError, DSSProtocolError, DSSTransportError
from .session import SessionManager, SessionState
from .transport import DSSTransport

__all__ = [
    "DSSClient",
    "CredentialIssuer",
    "DSSTransport",
    "SessionManager",
    "SessionState",
    "DSSError",
    "DSSAuthError",
    "DSSProtocolError",
    "DSSTransportError",
]
