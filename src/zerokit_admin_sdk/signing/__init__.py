"""
ZeroKit Admin API SDK - Request Signing Module

Canonical string construction and HMAC-SHA256 signing for the
administrative API's ``AdminKey`` authorization scheme.
"""

from .types import (
    HttpMethod,
    HeaderSet,
    RequestDescriptor,
    EMPTY_CONTENT_SHA256,
    SIGNED_HEADER_NAMES,
    HMAC_HEADERS_VALUE,
    AUTHORIZATION_SCHEME,
    DEFAULT_CONTENT_TYPE,
)

from .canonical_message import (
    canonicalize_call,
    canonical_path,
)

from .hmac_signer import (
    HmacSigner,
    sign_string,
    ADMIN_KEY_LENGTH,
)

from .utils import (
    parse_method,
    calculate_content_sha256,
    format_tresorit_date,
    encode_payload,
)

# Public API exports
__all__ = [
    # Types
    'HttpMethod',
    'HeaderSet',
    'RequestDescriptor',
    'EMPTY_CONTENT_SHA256',
    'SIGNED_HEADER_NAMES',
    'HMAC_HEADERS_VALUE',
    'AUTHORIZATION_SCHEME',
    'DEFAULT_CONTENT_TYPE',
    # Canonicalization
    'canonicalize_call',
    'canonical_path',
    # Signing
    'HmacSigner',
    'sign_string',
    'ADMIN_KEY_LENGTH',
    # Utilities
    'parse_method',
    'calculate_content_sha256',
    'format_tresorit_date',
    'encode_payload',
]
