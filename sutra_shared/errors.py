"""
Shared error handling for the Sutra MCP server.
"""

from typing import Dict, Any, Optional


class SutraException(Exception):
    """Base exception for Sutra components."""

    retryable = False

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RequestTimeoutError(SutraException):
    """The request exceeded its configured duration."""

    retryable = True

    def __init__(self, timeout: float, details: Optional[Dict[str, Any]] = None):
        self.timeout = timeout
        super().__init__(
            "TIMEOUT",
            f"Yantra API request timed out after {timeout:g}s",
            details
        )


class NetworkError(SutraException):
    """Connection-level failure that does not look transient."""

    def __init__(self, message: str = "Network error", details: Optional[Dict[str, Any]] = None,
                 code: str = "NETWORK_ERROR"):
        super().__init__(code, message, details)


class TransientNetworkError(NetworkError):
    """Connection reset, refused, unresolvable host and friends."""

    retryable = True

    def __init__(self, message: str = "Transient network error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="TRANSIENT_NETWORK_ERROR")


class ApiError(SutraException):
    """Remote endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str = "", reason: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(
            "API_ERROR",
            f"Yantra API error {status_code}: {body or reason}",
            {"status_code": status_code}
        )


class InvalidResponseError(SutraException):
    """Successful status but a body that is not the expected JSON shape."""

    def __init__(self, message: str = "Invalid response from Yantra API", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_RESPONSE", message, details)


class ValidationError(SutraException):
    """A tool call is missing a required field or carries malformed arguments."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class EntitlementUnavailable(SutraException):
    """Entitlement could not be resolved. Never leaves the resolver."""

    def __init__(self, message: str = "Entitlement unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("ENTITLEMENT_UNAVAILABLE", message, details)
