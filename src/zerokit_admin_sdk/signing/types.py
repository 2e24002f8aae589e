"""
Type definitions for request signing functionality

This module provides the enumerations, constants and data classes shared by
the canonicalizer, the HMAC signer and the call executor.
"""

from typing import Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass
from enum import Enum

from ..exceptions import InvalidConfigError


class HttpMethod(str, Enum):
    """HTTP methods accepted by the admin API"""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


# SHA-256 of the empty byte sequence
EMPTY_CONTENT_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

# Names of the signed headers, in signing order
SIGNED_HEADER_NAMES = ("UserId", "TresoritDate", "Content-Type", "Content-SHA256", "HMACHeaders")
HMAC_HEADERS_VALUE = ",".join(SIGNED_HEADER_NAMES)

AUTHORIZATION_SCHEME = "AdminKey"
DEFAULT_CONTENT_TYPE = "application/json"
TRESORIT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class HeaderSet:
    """
    Ordered collection of ``(name, value)`` header pairs.

    Insertion order is part of the signed material, so the same instance is
    used both to build the canonical string and to assemble the outgoing
    request headers.
    """

    def __init__(self, pairs: Optional[Iterable[Tuple[str, object]]] = None):
        self._pairs: List[Tuple[str, str]] = []
        for name, value in pairs or ():
            self.add(name, value)

    @classmethod
    def from_headers(cls, headers: Union["HeaderSet", Mapping[str, object], Iterable[Tuple[str, object]]]) -> "HeaderSet":
        """
        Build a header set from a HeaderSet, an ordered mapping or a sequence of pairs.

        Raises:
            InvalidConfigError: If headers is missing or has a non-string name
        """
        if isinstance(headers, HeaderSet):
            return cls(headers.items())
        if isinstance(headers, Mapping):
            return cls(headers.items())
        if headers is None or isinstance(headers, (str, bytes)):
            raise InvalidConfigError("Given parameter headers is invalid!", field="headers")
        try:
            return cls(headers)
        except (TypeError, ValueError) as e:
            raise InvalidConfigError(
                "Given parameter headers is invalid!",
                field="headers",
                details={"original_error": str(e)}
            ) from e

    def add(self, name: str, value: object) -> None:
        """Append a header; ``None`` values render as an empty string."""
        if not isinstance(name, str):
            raise InvalidConfigError(
                f"Header names must be strings, got {type(name).__name__}",
                field="headers"
            )
        self._pairs.append((name, "" if value is None else str(value)))

    def get(self, name: str) -> Optional[str]:
        for key, value in self._pairs:
            if key == name:
                return value
        return None

    def names(self) -> List[str]:
        return [name for name, _ in self._pairs]

    def items(self) -> List[Tuple[str, str]]:
        return list(self._pairs)

    def render_lines(self) -> List[str]:
        """Render each header as ``name:value``."""
        return [f"{name}:{value}" for name, value in self._pairs]

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderSet):
            return NotImplemented
        return self._pairs == other._pairs

    def __repr__(self) -> str:
        return f"HeaderSet({self._pairs!r})"


@dataclass(frozen=True)
class RequestDescriptor:
    """
    A single admin API call before signing

    Attributes:
        method: HTTP method
        path_with_query: Endpoint path including the raw query string
        payload: Optional raw request body
        content_type: Content type of the payload
    """
    method: HttpMethod
    path_with_query: str
    payload: Optional[bytes] = None
    content_type: Optional[str] = DEFAULT_CONTENT_TYPE

    def __post_init__(self):
        """Validate the descriptor"""
        if self.payload is not None and not isinstance(self.payload, bytes):
            raise InvalidConfigError("Payload must be bytes", field="payload")

        if self.payload is not None and self.content_type is None:
            raise InvalidConfigError("Given parameter contentType is invalid!", field="contentType")

    @property
    def content_length(self) -> int:
        return len(self.payload) if self.payload is not None else 0
