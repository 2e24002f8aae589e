"""
Tenant identity resolution for the ZeroKit admin API client

Validates the service URL and admin key copied from the management portal
and works out which tenant (and admin user) the client acts for. The
tenant id is either supplied explicitly or recovered from one of the two
service URL layouts:

    https://{tenantId}.api.tresorit.io              (production)
    https://host-{hostId}.api.tresorit.io/tenant-{tenantId}   (hosted / test)
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit, SplitResult

from .exceptions import InvalidConfigError

logger = logging.getLogger(__name__)

ADMIN_KEY_HEX_LENGTH = 64
HOSTED_TENANT_PREFIX = "tenant-"
ADMIN_USER_ID_TEMPLATE = "admin@{tenant_id}.tresorit.io"

_TENANT_ID_PATTERN = re.compile(r"[a-z][a-z0-9]{7,9}")
_HEX_PATTERN = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable identity of an admin API client.

    Attributes:
        service_url: Service URL without trailing slash
        admin_key_bytes: Raw 32-byte admin key (kept out of repr)
        tenant_id: Tenant identifier
        admin_user_id: Administrative user, ``admin@{tenant_id}.tresorit.io``
    """
    service_url: str
    admin_key_bytes: bytes = field(repr=False)
    tenant_id: str
    admin_user_id: str


def is_valid_tenant_id(tenant_id: object) -> bool:
    """Tenant ids are one lowercase letter followed by 7-9 lowercase alphanumerics."""
    return isinstance(tenant_id, str) and _TENANT_ID_PATTERN.fullmatch(tenant_id) is not None


def admin_user_id_for(tenant_id: str) -> str:
    return ADMIN_USER_ID_TEMPLATE.format(tenant_id=tenant_id)


def parse_admin_key(admin_key: object) -> bytes:
    """
    Decode a 64-hex-digit admin key into its 32 raw bytes.

    Raises:
        InvalidConfigError: If the key is not a 64 character hex string
    """
    if (not isinstance(admin_key, str)
            or len(admin_key) != ADMIN_KEY_HEX_LENGTH
            or _HEX_PATTERN.fullmatch(admin_key) is None):
        raise InvalidConfigError("Given parameter adminKey is invalid!", field="adminKey")

    return bytes.fromhex(admin_key)


def _split_http_url(url: object) -> Optional[SplitResult]:
    if not isinstance(url, str):
        return None
    try:
        parts = urlsplit(url)
        # port is parsed lazily and raises on garbage
        parts.port
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return None
    return parts


def normalize_service_url(service_url: object) -> str:
    """
    Validate a service URL and strip its trailing slashes.

    Raises:
        InvalidConfigError: If the URL is not an absolute http(s) URL
    """
    if _split_http_url(service_url) is None:
        raise InvalidConfigError(
            "Given parameter serviceUrl is invalid!",
            field="serviceUrl",
            details={"service_url": service_url if isinstance(service_url, str) else None}
        )
    return service_url.rstrip("/")


def match_production_tenant(service_url: str) -> Optional[str]:
    """
    Recover the tenant id from a production service URL.

    The first host label must be a tenant id followed by at least one more
    label, and the URL must carry no path beyond ``/``.

    Returns:
        The tenant id, or None when the URL does not have this layout
    """
    parts = _split_http_url(service_url)
    if parts is None or parts.query or parts.fragment or parts.path not in ("", "/"):
        return None

    # Tenant id must open the authority verbatim: no userinfo, no case folding
    if "@" in parts.netloc:
        return None

    labels = parts.netloc.partition(":")[0].split(".")
    if len(labels) < 2 or not all(labels[1:]):
        return None

    return labels[0] if is_valid_tenant_id(labels[0]) else None


def match_hosted_tenant(service_url: str) -> Optional[str]:
    """
    Recover the tenant id from a hosted service URL.

    The final path segment must be ``tenant-{tenantId}``, optionally
    followed by a single slash.

    Returns:
        The tenant id, or None when the URL does not have this layout
    """
    parts = _split_http_url(service_url)
    if parts is None or parts.query or parts.fragment:
        return None

    path = parts.path[:-1] if parts.path.endswith("/") else parts.path
    segment = path.rsplit("/", 1)[-1]
    if not segment.startswith(HOSTED_TENANT_PREFIX):
        return None

    candidate = segment[len(HOSTED_TENANT_PREFIX):]
    return candidate if is_valid_tenant_id(candidate) else None


def derive_tenant_id(service_url: str) -> str:
    """
    Derive the tenant id from the service URL.

    Production layout is tried first, then the hosted layout; the first
    match wins.

    Raises:
        InvalidConfigError: If neither layout matches
    """
    for matcher in (match_production_tenant, match_hosted_tenant):
        tenant_id = matcher(service_url)
        if tenant_id is not None:
            logger.debug(f"Derived tenant id {tenant_id} using {matcher.__name__}")
            return tenant_id

    raise InvalidConfigError(
        "No tenantId is supplied nor can be captured from the given service URL!",
        field="tenantId",
        details={"service_url": service_url}
    )


def resolve_client_config(service_url: str, admin_key: str, tenant_id: Optional[str] = None) -> ClientConfig:
    """
    Validate client inputs and build the immutable client configuration.

    Args:
        service_url: The service URL copied from the management portal
        admin_key: One of the 64 character hexadecimal admin keys
        tenant_id: Only needed when the tenant is hosted on a URL from
            which the id cannot be derived

    Returns:
        ClientConfig: Validated configuration

    Raises:
        InvalidConfigError: If any of the values or their combination is invalid
    """
    normalized_url = normalize_service_url(service_url)
    key_bytes = parse_admin_key(admin_key)

    if tenant_id is not None:
        if not is_valid_tenant_id(tenant_id):
            raise InvalidConfigError("Given parameter tenantId is invalid!", field="tenantId")
    else:
        tenant_id = derive_tenant_id(service_url)

    return ClientConfig(
        service_url=normalized_url,
        admin_key_bytes=key_bytes,
        tenant_id=tenant_id,
        admin_user_id=admin_user_id_for(tenant_id),
    )
