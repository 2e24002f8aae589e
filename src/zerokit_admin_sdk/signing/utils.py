"""
Utility functions for request signing

Method validation, content hashing and the TresoritDate timestamp format.
"""

import hashlib
from datetime import datetime, timezone
from typing import Optional, Union

from ..exceptions import InvalidConfigError
from .types import HttpMethod, EMPTY_CONTENT_SHA256, TRESORIT_DATE_FORMAT


def parse_method(method: Union[str, HttpMethod]) -> HttpMethod:
    """
    Validate an HTTP method against the accepted set.

    Args:
        method: Method name or HttpMethod member (case-sensitive)

    Returns:
        HttpMethod: The matching enum member

    Raises:
        InvalidConfigError: If the method is not accepted
    """
    if isinstance(method, HttpMethod):
        return method

    if not isinstance(method, str):
        raise InvalidConfigError("Given parameter method is invalid!", field="method")

    try:
        return HttpMethod(method)
    except ValueError:
        raise InvalidConfigError(
            "Given parameter method is invalid!",
            field="method",
            details={"method": method, "allowed": [m.value for m in HttpMethod]}
        )


def calculate_content_sha256(payload: Optional[bytes]) -> str:
    """
    Lowercase hex SHA-256 digest of the payload.

    An absent payload hashes to the empty-body constant.
    """
    if payload is None:
        return EMPTY_CONTENT_SHA256
    return hashlib.sha256(payload).hexdigest()


def format_tresorit_date(moment: Optional[datetime] = None) -> str:
    """
    Format a timestamp as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC.

    Args:
        moment: Timestamp to format (current time if None). Naive values
            are taken to be UTC already.

    Returns:
        str: Second-precision UTC timestamp with a literal ``Z`` suffix
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)

    return moment.strftime(TRESORIT_DATE_FORMAT)


def encode_payload(payload: Union[str, bytes, None]) -> Optional[bytes]:
    """Encode a text payload as UTF-8; bytes pass through unchanged."""
    if payload is None or isinstance(payload, bytes):
        return payload
    if isinstance(payload, bytearray):
        return bytes(payload)
    if isinstance(payload, str):
        return payload.encode("utf-8")

    raise InvalidConfigError(
        f"Payload must be str, bytes, or None, got {type(payload).__name__}",
        field="payload"
    )
