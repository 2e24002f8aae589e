"""
Signed HTTP client for the ZeroKit administrative API

This module assembles, signs and sends admin API calls and interprets the
responses, turning the service's error envelope into ApiError.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional, Tuple, Union

from .exceptions import ApiError, InvalidConfigError, TransportError, ZeroKitSDKError
from .identity import ClientConfig, resolve_client_config
from .json_envelope import JSON_CONTENT_TYPE, decode_json_body, encode_json_payload, parse_error_envelope
from .signing import (
    AUTHORIZATION_SCHEME,
    DEFAULT_CONTENT_TYPE,
    HMAC_HEADERS_VALUE,
    HeaderSet,
    HmacSigner,
    HttpMethod,
    RequestDescriptor,
    calculate_content_sha256,
    canonicalize_call,
    encode_payload,
    format_tresorit_date,
    parse_method,
)
from .transport import HttpResponse, RequestsTransport, Transport

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class CallState(Enum):
    """Lifecycle of one call; transitions are strictly linear"""
    BUILT = "built"
    SIGNED = "signed"
    SENT = "sent"
    SUCCEEDED = "succeeded"
    API_FAILED = "api_failed"
    TRANSPORT_FAILED = "transport_failed"


@dataclass(frozen=True)
class CallResult:
    """
    Outcome of a signed call.

    Attributes:
        state: Final state (SUCCEEDED, API_FAILED or TRANSPORT_FAILED)
        response: Response received from the transport, if any
        error: ApiError or TransportError when the call failed
        history: States the call passed through, ending with ``state``
    """
    state: CallState
    response: Optional[HttpResponse] = None
    error: Optional[ZeroKitSDKError] = None
    history: Tuple[CallState, ...] = ()

    @property
    def ok(self) -> bool:
        return self.state is CallState.SUCCEEDED

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None

    @property
    def body(self) -> Optional[bytes]:
        return self.response.body if self.response is not None else None

    def unwrap(self) -> bytes:
        """Return the response body, or raise the recorded error."""
        if self.error is not None:
            raise self.error
        return self.response.body


@dataclass(frozen=True)
class SignedRequest:
    """A request ready for the transport"""
    method: HttpMethod
    url: str
    headers: HeaderSet
    body: Optional[bytes]
    string_to_sign: str


def _finish(history, state: CallState, **kwargs) -> CallResult:
    return CallResult(state, history=tuple(history) + (state,), **kwargs)


class AdminApiClient:
    """
    ZeroKit administrative API client.

    Performs the call canonicalization and signature creation, and makes
    the calls themselves through a TLS-verifying transport.
    """

    def __init__(
        self,
        service_url: str,
        admin_key: str,
        tenant_id: Optional[str] = None,
        transport: Optional[Transport] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Construct a new admin API client.

        Args:
            service_url: The service URL copied from the management portal
            admin_key: One of the 64 character hexadecimal admin keys
            tenant_id: Only needed when the tenant is hosted on a URL from
                which it cannot be derived
            transport: Transport to send calls with (RequestsTransport if None)
            clock: Source of the current UTC time, used for TresoritDate

        Raises:
            InvalidConfigError: If any of the values or their combination is invalid
        """
        self._config = resolve_client_config(service_url, admin_key, tenant_id)
        self._signer = HmacSigner(self._config.admin_key_bytes)

        if transport is None:
            transport = RequestsTransport()
        if getattr(transport, "verifies_tls", False) is not True:
            raise InvalidConfigError(
                "Transport must enforce TLS certificate and host name verification",
                field="transport"
            )
        self._transport = transport
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        logger.info(
            f"Initialized ZeroKit admin client for tenant {self._config.tenant_id} "
            f"at {self._config.service_url}"
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def service_url(self) -> str:
        return self._config.service_url

    @property
    def tenant_id(self) -> str:
        return self._config.tenant_id

    @property
    def admin_user_id(self) -> str:
        return self._config.admin_user_id

    def canonicalize_call(self, method: Union[str, HttpMethod], url: str, headers) -> str:
        """
        Compute the canonical string-to-sign of a call.

        Args:
            method: HTTP method (GET, HEAD, POST, PUT, DELETE, OPTIONS)
            url: URL of the called endpoint
            headers: Headers included in the signature, in signing order

        Raises:
            InvalidConfigError: If any of the values is invalid
        """
        return canonicalize_call(method, url, headers)

    def sign_string(self, string_to_sign: str) -> str:
        """Sign a canonical string with this client's admin key (base64)."""
        return self._signer.sign_string(string_to_sign)

    def build_url(self, endpoint_path_with_query: str) -> str:
        if not isinstance(endpoint_path_with_query, str):
            raise InvalidConfigError(
                "Given parameter endpointPathWithQuery is invalid!",
                field="endpointPathWithQuery"
            )
        return f"{self._config.service_url}/{endpoint_path_with_query.lstrip('/')}"

    def describe(
        self,
        method: Union[str, HttpMethod],
        endpoint_path_with_query: str,
        payload: Union[str, bytes, None] = None,
        content_type: Optional[str] = DEFAULT_CONTENT_TYPE,
    ) -> RequestDescriptor:
        """Validate call arguments into a RequestDescriptor."""
        return RequestDescriptor(
            method=parse_method(method),
            path_with_query=endpoint_path_with_query,
            payload=encode_payload(payload),
            content_type=content_type,
        )

    def sign_request(self, request: RequestDescriptor) -> SignedRequest:
        """
        Assemble the headers of a call and sign it.

        The signed headers are UserId, TresoritDate, Content-Type,
        Content-SHA256 and HMACHeaders, in that order. Authorization and
        Content-length are appended afterwards and are not signed.
        """
        url = self.build_url(request.path_with_query)

        headers = HeaderSet()
        headers.add("UserId", self._config.admin_user_id)
        headers.add("TresoritDate", format_tresorit_date(self._clock()))
        headers.add("Content-Type", request.content_type)
        headers.add("Content-SHA256", calculate_content_sha256(request.payload))
        headers.add("HMACHeaders", HMAC_HEADERS_VALUE)

        try:
            string_to_sign = canonicalize_call(request.method, url, headers)
        except InvalidConfigError as e:
            if e.field != "url":
                raise
            raise InvalidConfigError(
                "Given parameter endpointPathWithQuery is invalid!",
                field="endpointPathWithQuery"
            ) from e

        signature = self._signer.sign_string(string_to_sign)

        headers.add("Authorization", f"{AUTHORIZATION_SCHEME} {signature}")
        headers.add("Content-length", request.content_length)

        return SignedRequest(
            method=request.method,
            url=url,
            headers=headers,
            body=request.payload,
            string_to_sign=string_to_sign,
        )

    def execute(
        self,
        method: Union[str, HttpMethod],
        endpoint_path_with_query: str,
        payload: Union[str, bytes, None] = None,
        content_type: Optional[str] = DEFAULT_CONTENT_TYPE,
    ) -> CallResult:
        """
        Perform a signed call and report its outcome.

        Transport and API failures are returned in the CallResult rather
        than raised.

        Args:
            method: HTTP method (GET, HEAD, POST, PUT, DELETE, OPTIONS)
            endpoint_path_with_query: Endpoint path with query
                (example: /api/v4/admin/user/init-user-registration)
            payload: Optional raw payload; text is sent as UTF-8
            content_type: Content type of the payload

        Returns:
            CallResult: Final state, response and error of the call

        Raises:
            InvalidConfigError: If any of the values or their combination is invalid
        """
        request = self.describe(method, endpoint_path_with_query, payload, content_type)
        history = [CallState.BUILT]

        signed = self.sign_request(request)
        history.append(CallState.SIGNED)

        logger.debug(f"Making {signed.method.value} request to {signed.url}")
        try:
            response = self._transport.send(
                signed.method.value,
                signed.url,
                tuple(signed.headers.items()),
                signed.body,
            )
        except TransportError as e:
            logger.warning(f"{signed.method.value} {signed.url} failed: {e}")
            return _finish(history, CallState.TRANSPORT_FAILED, error=e)

        if response is None:
            return _finish(
                history,
                CallState.TRANSPORT_FAILED,
                error=TransportError("Failed to do the call", "NO_RESPONSE"),
            )
        history.append(CallState.SENT)

        return self._interpret_response(signed, response, history)

    def _interpret_response(self, signed: SignedRequest, response: HttpResponse, history) -> CallResult:
        logger.debug(f"{signed.method.value} {signed.url} returned HTTP {response.status_code}")

        if response.ok:
            return _finish(history, CallState.SUCCEEDED, response=response)

        envelope = parse_error_envelope(response.body)
        if envelope is not None:
            logger.warning(
                f"Admin API error {envelope['code']} (HTTP {response.status_code}) "
                f"for {signed.method.value} {signed.url}"
            )
            return _finish(
                history,
                CallState.API_FAILED,
                response=response,
                error=ApiError(envelope["code"], envelope["message"], response.status_code),
            )

        logger.warning(f"Unrecognized failure for {signed.method.value} {signed.url}: HTTP {response.status_code}")
        return _finish(
            history,
            CallState.TRANSPORT_FAILED,
            response=response,
            error=TransportError(
                f"Http call failed but no valid api error has been received "
                f"(unrecognized failure, status={response.status_code})",
                "UNRECOGNIZED_FAILURE",
                http_status=response.status_code,
            ),
        )

    def do_http_call(
        self,
        method: Union[str, HttpMethod],
        endpoint_path_with_query: str,
        payload: Union[str, bytes, None] = None,
        content_type: Optional[str] = DEFAULT_CONTENT_TYPE,
    ) -> bytes:
        """
        Perform a signed call and return the raw response body.

        Raises:
            InvalidConfigError: If any of the values or their combination is invalid
            TransportError: If the call fails due to technical / network issues
            ApiError: If the response is an API error
        """
        return self.execute(method, endpoint_path_with_query, payload, content_type).unwrap()

    def do_json_call(
        self,
        method: Union[str, HttpMethod],
        endpoint_path_with_query: str,
        payload: Any = None,
        as_namespace: bool = False,
    ) -> Any:
        """
        Perform a signed call with JSON conversion.

        Args:
            method: HTTP method (GET, HEAD, POST, PUT, DELETE, OPTIONS)
            endpoint_path_with_query: Endpoint path with query
            payload: Optional JSON-serializable payload
            as_namespace: Return SimpleNamespace objects instead of dicts

        Returns:
            The parsed response body, or None when it is empty

        Raises:
            InvalidConfigError: If the payload cannot be serialized or any value is invalid
            TransportError: If the call fails due to technical / network issues
            ApiError: If the response is an API error
        """
        body = self.do_http_call(
            method,
            endpoint_path_with_query,
            encode_json_payload(payload),
            JSON_CONTENT_TYPE,
        )
        return decode_json_body(body, as_namespace=as_namespace)

    def close(self) -> None:
        """Close the underlying transport."""
        close = getattr(self._transport, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "AdminApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"AdminApiClient(service_url={self.service_url!r}, tenant_id={self.tenant_id!r})"


def create_client(
    service_url: str,
    admin_key: str,
    tenant_id: Optional[str] = None,
    transport: Optional[Transport] = None,
    timeout: Optional[float] = 30.0,
) -> AdminApiClient:
    """
    Create an admin API client with default configuration.

    Args:
        service_url: Service URL of the tenant
        admin_key: 64 character hexadecimal admin key
        tenant_id: Optional explicit tenant id
        transport: Optional transport (a RequestsTransport with ``timeout`` if None)
        timeout: Request timeout in seconds for the default transport

    Returns:
        AdminApiClient: Configured client
    """
    if transport is None:
        transport = RequestsTransport(timeout=timeout)
    return AdminApiClient(service_url, admin_key, tenant_id, transport=transport)
