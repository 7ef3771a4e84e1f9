"""
tests/unit/test_exceptions.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for the error-code table and the exception hierarchy.
"""
from __future__ import annotations

import pytest

from legacy_sabre.domain.exceptions import (
    SABRE_ERROR_CODES_BY_KEY,
    ConfigurationError,
    ErrorInResponse,
    FaultError,
    SabreError,
    TransportError,
    UnexpectedError,
    UnexpectedResponse,
    status_code_for,
)
from legacy_sabre.domain.models import ErrorResponse


class TestErrorCodeTable:
    def test_validation_error_is_403(self):
        assert status_code_for("validation_error") == 403

    def test_rate_limit_is_429(self):
        assert status_code_for("rate_limit_exceeded") == 429

    def test_unknown_key_has_no_mapping(self):
        assert status_code_for("teapot") is None

    def test_key_lookup_is_case_sensitive(self):
        assert status_code_for("invalid_api_Key") == 403
        assert status_code_for("invalid_api_key") is None

    def test_table_covers_exactly_the_vocabulary(self):
        assert dict(SABRE_ERROR_CODES_BY_KEY) == {
            "missing_required_field": 422,
            "invalid_access": 422,
            "invalid_parameter": 422,
            "invalid_region": 422,
            "rate_limit_exceeded": 429,
            "missing_api_key": 401,
            "invalid_api_Key": 403,
            "invalid_from_address": 403,
            "validation_error": 403,
            "not_found": 404,
            "method_not_allowed": 405,
            "error_in_response": 405,
            "fault_error": 500,
            "application_error": 500,
            "internal_server_error": 500,
        }

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            SABRE_ERROR_CODES_BY_KEY["not_found"] = 410  # type: ignore[index]


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_type, name, status",
        [
            (ConfigurationError, "missing_required_field", 422),
            (FaultError, "fault_error", 500),
            (ErrorInResponse, "error_in_response", 405),
            (TransportError, "internal_server_error", 500),
            (UnexpectedError, "application_error", 500),
            (UnexpectedResponse, "error_in_response", 405),
        ],
    )
    def test_name_and_status(self, exc_type, name, status):
        exc = exc_type("boom")
        assert isinstance(exc, SabreError)
        assert exc.name == name
        assert exc.status_code == status
        assert exc.message == "boom"

    def test_fault_and_application_error_are_distinct(self):
        assert not issubclass(FaultError, ErrorInResponse)
        assert not issubclass(ErrorInResponse, FaultError)

    def test_unexpected_response_is_an_error_in_response(self):
        assert issubclass(UnexpectedResponse, ErrorInResponse)
        assert not issubclass(ErrorInResponse, UnexpectedResponse)

    def test_to_error_response(self):
        resp = FaultError("BAD").to_error_response()
        assert isinstance(resp, ErrorResponse)
        assert resp.name == "fault_error"
        assert resp.message == "BAD"
