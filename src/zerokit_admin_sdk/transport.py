"""
HTTP transport for ZeroKit admin API calls

The signing client hands fully assembled requests to a transport and gets
back an explicit HttpResponse. Transports must verify TLS certificates and
host names; the client refuses any transport that does not declare
``verifies_tls = True``.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Tuple, Union, runtime_checkable

import requests

from .exceptions import TransportError, InvalidConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """
    Response returned by a transport.

    Attributes:
        status_code: HTTP status code
        headers: Response headers
        body: Raw response body
    """
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299


@runtime_checkable
class Transport(Protocol):
    """Anything able to send one HTTP request and return its response."""

    verifies_tls: bool

    def send(
        self,
        method: str,
        url: str,
        headers: Tuple[Tuple[str, str], ...],
        body: Optional[bytes],
    ) -> HttpResponse:
        ...


class RequestsTransport:
    """
    Transport backed by a requests.Session.

    Certificate and host name verification is always on; ``ca_bundle`` may
    point at a custom CA bundle but cannot disable verification.
    """

    verifies_tls = True

    def __init__(
        self,
        timeout: Optional[float] = 30.0,
        ca_bundle: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the transport.

        Args:
            timeout: Per-request timeout in seconds (None waits indefinitely)
            ca_bundle: Optional path to a CA bundle used for verification
            session: Optional existing requests session to use
        """
        if timeout is not None and timeout <= 0:
            raise InvalidConfigError("Timeout must be positive", field="timeout")

        if ca_bundle is not None and not isinstance(ca_bundle, str):
            raise InvalidConfigError("CA bundle must be a file path", field="caBundle")

        self.timeout = timeout
        self.ca_bundle = ca_bundle
        self.session = session or requests.Session()

    @property
    def _verify(self) -> Union[bool, str]:
        return self.ca_bundle if self.ca_bundle else True

    def send(
        self,
        method: str,
        url: str,
        headers: Tuple[Tuple[str, str], ...],
        body: Optional[bytes],
    ) -> HttpResponse:
        """
        Send one request.

        Raises:
            TransportError: On connection, TLS, timeout or other request failures
        """
        try:
            response = self.session.request(
                method,
                url,
                headers=dict(headers),
                data=body,
                timeout=self.timeout,
                verify=self._verify,
            )
        except requests.exceptions.SSLError as e:
            raise TransportError(f"TLS verification failed: {e}", "TLS_ERROR") from e
        except requests.exceptions.Timeout as e:
            raise TransportError(f"Request timeout after {self.timeout} seconds", "TIMEOUT") from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(f"Connection error: {e}", "CONNECTION_ERROR") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Failed to do the call: {e}", "REQUEST_FAILED") from e

        return HttpResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content or b"",
        )

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
        logger.debug("HTTP session closed")
