"""
JSON marshalling for admin API request and response bodies
"""

import json
from types import SimpleNamespace
from typing import Any, Optional

from .exceptions import InvalidConfigError, TransportError

JSON_CONTENT_TYPE = "application/json"


def encode_json_payload(value: Any) -> Optional[bytes]:
    """
    Serialize a request payload to UTF-8 JSON.

    Args:
        value: JSON-serializable object, or None for "no payload"

    Returns:
        bytes: Encoded payload, or None when value is None

    Raises:
        InvalidConfigError: If the value cannot be serialized
    """
    if value is None:
        return None

    try:
        return json.dumps(value, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError, RecursionError) as e:
        raise InvalidConfigError(
            "Given parameter payload is invalid!",
            field="payload",
            details={"original_error": str(e)}
        ) from e


def decode_json_body(body: Optional[bytes], as_namespace: bool = False) -> Any:
    """
    Parse a JSON response body.

    Args:
        body: Raw response body
        as_namespace: Build SimpleNamespace objects instead of dicts

    Returns:
        Parsed value, or None for an empty body

    Raises:
        TransportError: If the body is not valid JSON
    """
    if not body:
        return None

    hook = (lambda obj: SimpleNamespace(**obj)) if as_namespace else None
    try:
        return json.loads(body, object_hook=hook)
    except (ValueError, RecursionError) as e:
        raise TransportError(f"Invalid JSON response: {e}", "INVALID_JSON") from e


def parse_error_envelope(body: Optional[bytes]) -> Optional[dict]:
    """
    Extract ``ErrorCode``/``ErrorMessage`` from an error response body.

    Returns:
        dict with ``code`` and ``message``, or None when the body does not
        carry the error envelope
    """
    if not body:
        return None

    try:
        data = json.loads(body)
    except (ValueError, RecursionError):
        return None

    if not isinstance(data, dict):
        return None

    code = data.get("ErrorCode")
    message = data.get("ErrorMessage")
    if not isinstance(code, str) or not isinstance(message, str):
        return None

    return {"code": code, "message": message}
