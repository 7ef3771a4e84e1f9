"""
tests/conftest.py
──────────────────────────────────────────────────────────────────────────────
Shared pytest fixtures and mock adapter implementations.

Mock adapters implement the Port Protocols via structural subtyping — they do
NOT inherit from any base class.  pytest uses them to test dispatcher and
service logic without any real network connection.

Fixture hierarchy:
  settings        → Settings with fixed test values (no env lookups)
  transport       → MockTransport (scripted TransportResponse queue)
  dispatcher      → Dispatcher wired with transport + settings
  client          → LegacySabre facade over the same dispatcher
  session_client  → client that already holds bearer token "T123"
"""
from __future__ import annotations

import pytest

from legacy_sabre.config.settings import Settings
from legacy_sabre.domain.models import Credentials, FetchRequestOptions
from legacy_sabre.ports.transport_port import TransportResponse
from legacy_sabre.services.client import LegacySabre
from legacy_sabre.services.dispatcher import Dispatcher


# ── Settings fixture ───────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def settings() -> Settings:
    """Return a Settings instance with sane test defaults."""
    return Settings(
        sabre_base_url="https://sabre.test/websvc",
        sabre_user_agent="legacy-sabre-tests",
        sabre_username="7971",
        sabre_password="WS-SECRET",
        sabre_organization="AB12",
        sabre_domain="DEFAULT",
        sabre_conversation_id="conv-test-1",
        sabre_from_party="tests",
        sabre_to_party="webservices.sabre.com",
        http_timeout=5,
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="7971", password="WS-SECRET", organization="AB12")


# ── Canned SOAP responses ──────────────────────────────────────────────────

TOKEN_OPEN = '<wsse:BinarySecurityToken valueType="String" EncodingType="wsse:Base64Binary">'


def envelope(body: str, token: str = "") -> str:
    """Wrap *body* in a Sabre-style response envelope."""
    security = f"{TOKEN_OPEN}{token}</wsse:BinarySecurityToken>" if token else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<soap-env:Envelope xmlns:soap-env="http://schemas.xmlsoap.org/soap/envelope/">'
        "<soap-env:Header>"
        '<eb:MessageHeader xmlns:eb="http://www.ebxml.org/namespaces/messageHeader">'
        "<eb:ConversationId>conv-test-1</eb:ConversationId>"
        "</eb:MessageHeader>"
        '<wsse:Security xmlns:wsse="http://schemas.xmlsoap.org/ws/2002/12/secext">'
        f"{security}"
        "</wsse:Security>"
        "</soap-env:Header>"
        f"<soap-env:Body>{body}</soap-env:Body>"
        "</soap-env:Envelope>"
    )


def fault_envelope(message: str) -> str:
    return (
        '<soap-env:Envelope xmlns:soap-env="http://schemas.xmlsoap.org/soap/envelope/">'
        "<soap-env:Body><soap-env:Fault>"
        "<faultcode>soap-env:Client.InvalidSecurityToken</faultcode>"
        f"<faultstring>{message}</faultstring>"
        "</soap-env:Fault></soap-env:Body></soap-env:Envelope>"
    )


def error_block(message: str) -> str:
    return (
        '<QueueCountRS xmlns="http://webservices.sabre.com/sabreXML/2011/10" '
        'xmlns:stl="http://services.sabre.com/STL/v01">'
        '<stl:ApplicationResults status="NotProcessed">'
        '<stl:Error type="BusinessLogic" timeStamp="2025-03-14T10:00:00Z">'
        "<stl:SystemSpecificResults>"
        f"<stl:Message>{message}</stl:Message>"
        "</stl:SystemSpecificResults>"
        "</stl:Error>"
        "</stl:ApplicationResults>"
        "</QueueCountRS>"
    )


SESSION_CREATE_RS = (
    '<SessionCreateRS xmlns="http://www.opentravel.org/OTA/2002/11" '
    'version="1" status="Approved"><ConversationId>conv-test-1</ConversationId>'
    "</SessionCreateRS>"
)
SESSION_CLOSE_RS = '<SessionCloseRS xmlns="http://www.opentravel.org/OTA/2002/11" status="Approved"/>'


# ── Mock adapters ──────────────────────────────────────────────────────────

class MockTransport:
    """Scripted transport: returns queued responses, records every request."""

    def __init__(self) -> None:
        self.responses: list[TransportResponse | Exception] = []
        self.sent: list[tuple[str, FetchRequestOptions]] = []

    def queue(self, text: str, status_code: int = 200) -> "MockTransport":
        self.responses.append(TransportResponse(status_code=status_code, text=text))
        return self

    def fail_with(self, exc: Exception) -> "MockTransport":
        self.responses.append(exc)
        return self

    def send(self, url: str, request: FetchRequestOptions) -> TransportResponse:
        self.sent.append((url, request))
        if not self.responses:
            raise AssertionError("MockTransport: no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_body(self) -> str:
        return self.sent[-1][1].body


# ── pytest fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
def dispatcher(transport, credentials, settings):
    return Dispatcher(transport=transport, credentials=credentials, settings=settings)


@pytest.fixture
def client(dispatcher):
    return LegacySabre(dispatcher)


@pytest.fixture
def session_client(client):
    """Client that already holds bearer token T123."""
    client.set_authorization("T123")
    return client


class SoapResponses:
    """Response builders handed to tests through the ``soap`` fixture."""

    envelope = staticmethod(envelope)
    fault = staticmethod(fault_envelope)
    error_block = staticmethod(error_block)
    session_create = SESSION_CREATE_RS
    session_close = SESSION_CLOSE_RS


@pytest.fixture
def soap():
    return SoapResponses
