"""
Tests for the shared error types.
"""

from sutra_shared.errors import (
    ApiError,
    EntitlementUnavailable,
    RequestTimeoutError,
    SutraException,
    TransientNetworkError,
    ValidationError,
)


def test_api_error_prefers_body():
    error = ApiError(404, "release not found", "Not Found")
    assert error.status_code == 404
    assert error.message == "Yantra API error 404: release not found"
    assert error.details == {"status_code": 404}


def test_api_error_falls_back_to_reason():
    assert ApiError(502, "", "Bad Gateway").message == "Yantra API error 502: Bad Gateway"


def test_timeout_message():
    error = RequestTimeoutError(10.0)
    assert error.code == "TIMEOUT"
    assert error.message == "Yantra API request timed out after 10s"


def test_codes():
    assert TransientNetworkError().code == "TRANSIENT_NETWORK_ERROR"
    assert ValidationError().code == "VALIDATION_ERROR"
    assert EntitlementUnavailable().code == "ENTITLEMENT_UNAVAILABLE"


def test_hierarchy():
    assert issubclass(TransientNetworkError, SutraException)
    assert isinstance(RequestTimeoutError(1.0), Exception)
