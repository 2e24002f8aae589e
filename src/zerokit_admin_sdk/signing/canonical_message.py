"""
Canonical string-to-sign construction

The canonical form of a call is the method, the endpoint path (without its
leading slash, with the raw query appended) and the signed headers, one per
line:

    POST
    api/v4/admin/user/init-user-registration
    UserId:admin@tenant01.tresorit.io
    TresoritDate:2017-05-04T10:20:30Z
    ...
"""

from typing import Iterable, Mapping, Tuple, Union
from urllib.parse import urlsplit

from ..exceptions import InvalidConfigError
from .types import HeaderSet, HttpMethod
from .utils import parse_method


HeadersLike = Union[HeaderSet, Mapping[str, object], Iterable[Tuple[str, object]]]


def canonical_path(url: str) -> str:
    """
    Render the path component of a URL for signing.

    Raises:
        InvalidConfigError: If the URL cannot be parsed or has no path
    """
    if not isinstance(url, str):
        raise InvalidConfigError("Given parameter url is invalid!", field="url")

    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidConfigError(
            "Given parameter url is invalid!",
            field="url",
            details={"original_error": str(e)}
        ) from e

    if not parts.path:
        raise InvalidConfigError("Given parameter url is invalid!", field="url", details={"url": url})

    path = parts.path.lstrip("/")
    if parts.query:
        path += "?" + parts.query

    return path


def canonicalize_call(method: Union[str, HttpMethod], url: str, headers: HeadersLike) -> str:
    """
    Build the canonical string-to-sign for a call.

    Args:
        method: HTTP method (GET, HEAD, POST, PUT, DELETE, OPTIONS)
        url: Full URL of the called endpoint
        headers: Signed headers in signing order

    Returns:
        str: The canonical string

    Raises:
        InvalidConfigError: If any argument is invalid
    """
    method = parse_method(method)
    path = canonical_path(url)
    header_set = HeaderSet.from_headers(headers)

    return "\n".join([method.value, path] + header_set.render_lines())
