"""
tests/unit/test_http_transport.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for RequestsTransport.

All HTTP calls are intercepted with unittest.mock.patch so these tests run
fully offline.
"""
from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from legacy_sabre.adapters.http_transport import RequestsTransport
from legacy_sabre.domain.exceptions import TransportError
from legacy_sabre.domain.models import FetchRequestOptions
from legacy_sabre.ports.transport_port import TransportPort


def _make_response(status_code: int, text: str) -> MagicMock:
    mock_resp = MagicMock()
    mock_resp.status_code = status_code
    mock_resp.text = text
    return mock_resp


@pytest.fixture
def request_options():
    return FetchRequestOptions(
        method="POST",
        headers={"SOAPAction": "QueueCountLLSRQ", "Content-Type": "text/xml"},
        body="<envelope>ü</envelope>",
    )


class TestRequestsTransport:
    def test_implements_port(self, settings):
        assert isinstance(RequestsTransport(settings), TransportPort)

    def test_sends_method_headers_body_and_timeout(self, settings, request_options):
        with patch("legacy_sabre.adapters.http_transport.requests.request") as mock_request:
            mock_request.return_value = _make_response(200, "<ok/>")
            RequestsTransport(settings).send("https://sabre.test/websvc", request_options)

        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://sabre.test/websvc")
        assert kwargs["headers"] == request_options.headers
        assert kwargs["data"] == "<envelope>ü</envelope>".encode("utf-8")
        assert kwargs["timeout"] == 5

    def test_returns_status_and_text(self, settings, request_options):
        with patch(
            "legacy_sabre.adapters.http_transport.requests.request",
            return_value=_make_response(200, "<ok/>"),
        ):
            resp = RequestsTransport(settings).send("https://x", request_options)
        assert resp.ok
        assert resp.status_code == 200
        assert resp.text == "<ok/>"

    def test_non_2xx_is_returned_not_raised(self, settings, request_options):
        with patch(
            "legacy_sabre.adapters.http_transport.requests.request",
            return_value=_make_response(500, "<faultstring>BAD</faultstring>"),
        ):
            resp = RequestsTransport(settings).send("https://x", request_options)
        assert not resp.ok
        assert "BAD" in resp.text

    def test_request_exception_becomes_transport_error(self, settings, request_options):
        cause = requests.ConnectionError("connection refused")
        with patch(
            "legacy_sabre.adapters.http_transport.requests.request",
            side_effect=cause,
        ):
            with pytest.raises(TransportError, match="connection refused") as info:
                RequestsTransport(settings).send("https://x", request_options)
        assert info.value.__cause__ is cause

    def test_single_call_no_retry(self, settings, request_options):
        with patch(
            "legacy_sabre.adapters.http_transport.requests.request",
            side_effect=requests.Timeout("slow"),
        ) as mock_request:
            with pytest.raises(TransportError):
                RequestsTransport(settings).send("https://x", request_options)
        assert mock_request.call_count == 1
