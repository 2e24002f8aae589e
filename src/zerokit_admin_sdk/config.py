"""
Environment-based configuration for the admin API client

Reads the service URL, admin key and optional tenant id from
ZKIT_SERVICE_URL, ZKIT_ADMIN_KEY and ZKIT_TENANT_ID.
"""

import os
from typing import Mapping, Optional

from .exceptions import InvalidConfigError
from .http_client import AdminApiClient, create_client
from .identity import ClientConfig, resolve_client_config
from .transport import Transport

SERVICE_URL_ENV = "ZKIT_SERVICE_URL"
ADMIN_KEY_ENV = "ZKIT_ADMIN_KEY"
TENANT_ID_ENV = "ZKIT_TENANT_ID"


def _read_env(environ: Mapping[str, str], name: str, required: bool) -> Optional[str]:
    value = environ.get(name)
    if value is not None:
        value = value.strip()
    if not value:
        if required:
            raise InvalidConfigError(f"Environment variable {name} is not set", field=name)
        return None
    return value


def load_config_from_env(environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """
    Build a validated client configuration from environment variables.

    Args:
        environ: Mapping to read from (os.environ if None)

    Returns:
        ClientConfig: Validated configuration

    Raises:
        InvalidConfigError: If a required variable is missing or a value is invalid
    """
    if environ is None:
        environ = os.environ

    return resolve_client_config(
        _read_env(environ, SERVICE_URL_ENV, required=True),
        _read_env(environ, ADMIN_KEY_ENV, required=True),
        _read_env(environ, TENANT_ID_ENV, required=False),
    )


def create_client_from_env(
    environ: Optional[Mapping[str, str]] = None,
    transport: Optional[Transport] = None,
    timeout: Optional[float] = 30.0,
) -> AdminApiClient:
    """Create an admin API client configured from environment variables."""
    if environ is None:
        environ = os.environ

    return create_client(
        _read_env(environ, SERVICE_URL_ENV, required=True),
        _read_env(environ, ADMIN_KEY_ENV, required=True),
        _read_env(environ, TENANT_ID_ENV, required=False),
        transport=transport,
        timeout=timeout,
    )
