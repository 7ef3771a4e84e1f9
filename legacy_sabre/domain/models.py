"""
domain/models.py
──────────────────────────────────────────────────────────────────────────────
Pure domain objects — Pydantic models with no imports from adapters or ports.

These models are the lingua franca of the entire system:
  • the dispatcher builds FetchRequestOptions and hands body builders a
    SessionContext / AuthPayload
  • response interpreters (services/parsers.py) produce the typed records
  • interfaces (CLI) serialise them with to_dict()
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from legacy_sabre.domain.exceptions import ErrorCodeKey


# ── Action vocabulary ──────────────────────────────────────────────────────────

class ActionsRQ(str, Enum):
    """Request actions; sent verbatim as the SOAPAction header."""
    SESSION_CREATE = "SessionCreateRQ"
    SESSION_CLOSE  = "SessionCloseRQ"
    TOKEN_CREATE   = "TokenCreateRQ"
    QUEUE_COUNT    = "QueueCountLLSRQ"
    QUEUE_ACCESS   = "QueueAccessLLSRQ"
    QUEUE_PLACE    = "QueuePlaceLLSRQ"
    CURRENCY       = "DisplayCurrencyLLSRQ"
    DAILY_SALES    = "DailySalesReportLLSRQ"


class ActionsRS(str, Enum):
    """Response root elements found inside the SOAP body."""
    SESSION_CREATE = "SessionCreateRS"
    SESSION_CLOSE  = "SessionCloseRS"
    TOKEN_CREATE   = "TokenCreateRS"
    QUEUE_COUNT    = "QueueCountRS"
    QUEUE_ACCESS   = "QueueAccessRS"
    QUEUE_PLACE    = "QueuePlaceRS"
    CURRENCY       = "DisplayCurrencyRS"
    DAILY_SALES    = "DailySalesReportRS"


class NavigationAction(str, Enum):
    """Queue navigation verbs used once a queue has been accessed."""
    IGNORE = "I"
    REMOVE = "QR"
    EXIT   = "QXI"


# ── Session & request records ──────────────────────────────────────────────────

class Credentials(BaseModel):
    """Account credentials; immutable once the client is built."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(repr=False)
    organization: str
    domain: str = "DEFAULT"

    @property
    def complete(self) -> bool:
        return bool(self.username and self.password and self.organization)


class SessionContext(BaseModel):
    """Payload handed to body builders on the protected dispatch path."""

    model_config = ConfigDict(frozen=True)

    authorization: str
    conversation_id: str


class AuthPayload(BaseModel):
    """Payload handed to body builders on the authentication path."""

    model_config = ConfigDict(frozen=True)

    conversation_id: str
    credentials: Credentials


class FetchRequestOptions(BaseModel):
    """The last fully assembled request, kept for diagnostics."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: str = "POST"
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""


class ErrorResponse(BaseModel):
    """Serialisable view of a failed call."""

    name: ErrorCodeKey
    message: str


# ── Authentication ─────────────────────────────────────────────────────────────

class SessionStatus(BaseModel):
    status: str
    conversation_id: str
    authenticated: bool


# ── Queue ──────────────────────────────────────────────────────────────────────

class QueueCount(BaseModel):
    number: str
    count: int


class QueueCountResponse(BaseModel):
    pcc: str
    queues: list[QueueCount] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(q.count for q in self.queues)

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["total"] = self.total
        return data


class Notification(BaseModel):
    """A single warning line attached to a queued booking."""
    queue: str
    message: str


class QueueResponse(BaseModel):
    """Result of accessing or navigating a queue."""

    booking_id: Optional[str] = None
    notifications: list[Notification] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class QueueListResponse(BaseModel):
    queue: str
    booking_ids: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


# ── Currency ───────────────────────────────────────────────────────────────────

class CurrencyConversion(BaseModel):
    source: str
    destination: str
    amount: Decimal
    rate: Decimal
    converted: Decimal

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


# ── Daily sales ────────────────────────────────────────────────────────────────

class SalesItem(BaseModel):
    document_number: str
    record_locator: Optional[str] = None
    amount: Decimal = Decimal("0")
    currency: Optional[str] = None
    type: Optional[str] = None


class DailySalesReport(BaseModel):
    date: date
    pcc: str
    items: list[SalesItem] = Field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((i.amount for i in self.items), Decimal("0"))

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["total"] = str(self.total)
        return data
