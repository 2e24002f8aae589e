"""
ZeroKit Admin API Python SDK
Request signing client for the tenant-scoped administrative API
"""

from .version import __version__
from .exceptions import (
    ZeroKitSDKError,
    InvalidConfigError,
    TransportError,
    ApiError,
)
from .identity import (
    ClientConfig,
    resolve_client_config,
    derive_tenant_id,
    match_production_tenant,
    match_hosted_tenant,
    is_valid_tenant_id,
)
from .signing import (
    HttpMethod,
    HeaderSet,
    RequestDescriptor,
    EMPTY_CONTENT_SHA256,
    HMAC_HEADERS_VALUE,
    canonicalize_call,
    HmacSigner,
    sign_string,
    calculate_content_sha256,
    format_tresorit_date,
)
from .transport import (
    HttpResponse,
    Transport,
    RequestsTransport,
)
from .json_envelope import (
    encode_json_payload,
    decode_json_body,
)
from .http_client import (
    AdminApiClient,
    CallResult,
    CallState,
    SignedRequest,
    create_client,
)
from .config import (
    load_config_from_env,
    create_client_from_env,
)

# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'ZeroKitSDKError',
    'InvalidConfigError',
    'TransportError',
    'ApiError',
    # Identity
    'ClientConfig',
    'resolve_client_config',
    'derive_tenant_id',
    'match_production_tenant',
    'match_hosted_tenant',
    'is_valid_tenant_id',
    # Request Signing
    'HttpMethod',
    'HeaderSet',
    'RequestDescriptor',
    'EMPTY_CONTENT_SHA256',
    'HMAC_HEADERS_VALUE',
    'canonicalize_call',
    'HmacSigner',
    'sign_string',
    'calculate_content_sha256',
    'format_tresorit_date',
    # Transport
    'HttpResponse',
    'Transport',
    'RequestsTransport',
    # JSON
    'encode_json_payload',
    'decode_json_body',
    # Client
    'AdminApiClient',
    'CallResult',
    'CallState',
    'SignedRequest',
    'create_client',
    # Configuration
    'load_config_from_env',
    'create_client_from_env',
]
