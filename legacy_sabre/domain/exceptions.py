"""
domain/exceptions.py
──────────────────────────────────────────────────────────────────────────────
Custom exception hierarchy and the static error-code table.

All exceptions are rooted at SabreError so callers can catch broadly
(except SabreError) or narrowly (except FaultError).

Every error carries a ``name`` from SABRE_ERROR_CODES_BY_KEY and exposes the
matching HTTP-like status code:
  ConfigurationError → missing_required_field  422
  ErrorInResponse    → error_in_response       405
    UnexpectedResponse (body missing or malformed)
  FaultError         → fault_error             500
  TransportError     → internal_server_error   500
  UnexpectedError    → application_error       500
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Literal, Mapping, Optional

ErrorCodeKey = Literal[
    "missing_required_field",
    "invalid_access",
    "invalid_parameter",
    "invalid_region",
    "rate_limit_exceeded",
    "missing_api_key",
    "invalid_api_Key",
    "invalid_from_address",
    "validation_error",
    "not_found",
    "method_not_allowed",
    "error_in_response",
    "fault_error",
    "application_error",
    "internal_server_error",
]

SABRE_ERROR_CODES_BY_KEY: Mapping[str, int] = MappingProxyType({
    "missing_required_field": 422,
    "invalid_access":         422,
    "invalid_parameter":      422,
    "invalid_region":         422,
    "rate_limit_exceeded":    429,
    "missing_api_key":        401,
    "invalid_api_Key":        403,
    "invalid_from_address":   403,
    "validation_error":       403,
    "not_found":              404,
    "method_not_allowed":     405,
    "error_in_response":      405,
    "fault_error":            500,
    "application_error":      500,
    "internal_server_error":  500,
})


def status_code_for(key: str) -> Optional[int]:
    """Return the status code for a named error key, or None if unknown."""
    return SABRE_ERROR_CODES_BY_KEY.get(key)


class SabreError(Exception):
    """Base exception for all client errors."""

    name: ErrorCodeKey = "internal_server_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return SABRE_ERROR_CODES_BY_KEY[self.name]

    def to_error_response(self):
        """Convert to the serialisable ErrorResponse record."""
        # models imports ErrorCodeKey from this module
        from legacy_sabre.domain.models import ErrorResponse

        return ErrorResponse(name=self.name, message=self.message)


class ConfigurationError(SabreError):
    """Raised when credentials, session token or call parameters are missing."""

    name = "missing_required_field"


class FaultError(SabreError):
    """Raised on a non-2xx HTTP outcome or a SOAP <faultstring>."""

    name = "fault_error"


class ErrorInResponse(SabreError):
    """Raised when a successful response body carries an application error block."""

    name = "error_in_response"


class UnexpectedResponse(ErrorInResponse):
    """Raised when a successful response body cannot be interpreted.

    Covers an empty or unparseable payload, a missing response root and
    malformed values.  Catch ErrorInResponse to handle both kinds.
    """


class TransportError(SabreError):
    """Raised when the HTTP library fails before a response is received."""

    name = "internal_server_error"


class UnexpectedError(SabreError):
    """Wraps any other failure raised while processing an exchange."""

    name = "application_error"
