"""
HMAC-SHA256 request signer

Signs canonical strings with the raw admin key bytes using the
cryptography package and returns the base64-encoded MAC.
"""

import base64

from cryptography.hazmat.primitives import hashes, hmac

from ..exceptions import InvalidConfigError

ADMIN_KEY_LENGTH = 32


class HmacSigner:
    """
    Signer bound to one admin key.

    The key is held as raw bytes, decoded once when the client
    configuration is built.
    """

    def __init__(self, key_bytes: bytes):
        """
        Initialize the signer.

        Args:
            key_bytes: Raw admin key (32 bytes)

        Raises:
            InvalidConfigError: If the key is not 32 bytes
        """
        if not isinstance(key_bytes, bytes) or len(key_bytes) != ADMIN_KEY_LENGTH:
            raise InvalidConfigError(
                f"Admin key must be exactly {ADMIN_KEY_LENGTH} bytes",
                field="adminKey"
            )
        self._key = key_bytes

    def sign_string(self, string_to_sign: str) -> str:
        """
        Sign a canonical string.

        Args:
            string_to_sign: Canonical string produced by canonicalize_call

        Returns:
            str: base64(HMAC-SHA256(key, string_to_sign))

        Raises:
            InvalidConfigError: If the input is not a string
        """
        if not isinstance(string_to_sign, str):
            raise InvalidConfigError("Given parameter is invalid for signing!", field="stringToSign")

        mac = hmac.HMAC(self._key, hashes.SHA256())
        mac.update(string_to_sign.encode("utf-8"))
        return base64.b64encode(mac.finalize()).decode("ascii")

    def __repr__(self) -> str:
        return "HmacSigner(key=<redacted>)"


def sign_string(key_bytes: bytes, string_to_sign: str) -> str:
    """Sign a canonical string with the given raw key."""
    return HmacSigner(key_bytes).sign_string(string_to_sign)
