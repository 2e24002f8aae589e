"""
Exception classes for ZeroKit Admin API Python SDK
"""

from typing import Optional, Dict, Any


class ZeroKitSDKError(Exception):
    """Base exception for all ZeroKit SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class InvalidConfigError(ZeroKitSDKError):
    """
    Exception raised for malformed or contradictory input.

    Raised synchronously by client construction, canonicalization and
    signing, always before any network activity.
    """

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_CONFIG", details)
        self.field = field


class TransportError(ZeroKitSDKError):
    """Exception raised for network failures and unrecognized error responses"""

    def __init__(self, message: str, error_code: str = "REQUEST_FAILED",
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status


class ApiError(ZeroKitSDKError):
    """
    Exception raised when the service answers with its error envelope.

    Attributes:
        code: Server-side error code (e.g. ``UserNotExists``)
        message: Server-side error message
        http_status: HTTP status code of the response
    """

    def __init__(self, code: str, message: str, http_status: int = 0):
        super().__init__(message, "API_ERROR", {"code": code, "http_status": http_status})
        self.code = code
        self.http_status = http_status

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"
