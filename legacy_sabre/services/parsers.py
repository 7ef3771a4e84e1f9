"""
services/parsers.py
──────────────────────────────────────────────────────────────────────────────
Response interpreters: extracted <soap-env:Body> fragment → typed records.

The dispatcher has already rejected faults and <stl:Error> blocks; what is
left here is shape checking.  An ApplicationResults status other than
"Complete" raises ErrorInResponse; a body that is empty, unparseable, lacks
the expected ActionsRS root or holds malformed values raises
UnexpectedResponse.

xmltodict keeps namespace prefixes as part of the key ("stl:Error"), so
element lookups match either the bare name or any "<prefix>:<name>".
"""
from __future__ import annotations

import logging
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from xml.parsers.expat import ExpatError

import xmltodict

from legacy_sabre.domain.exceptions import ErrorInResponse, UnexpectedResponse
from legacy_sabre.domain.models import (
    ActionsRS,
    CurrencyConversion,
    DailySalesReport,
    Notification,
    QueueCount,
    QueueCountResponse,
    QueueListResponse,
    QueueResponse,
    SalesItem,
    SessionStatus,
)

logger = logging.getLogger(__name__)

_BOOKING_ID_RE = re.compile(r"\b([A-Z0-9]{6})\s*$")
_TWO_PLACES = Decimal("0.01")
_MISSING = object()


# ── Tree helpers ───────────────────────────────────────────────────────────────

def _matches(key: str, name: str) -> bool:
    return key == name or key.endswith(":" + name)


def _child(node: Any, name: str) -> Any:
    if not isinstance(node, dict):
        return None
    for key, value in node.items():
        if _matches(key, name):
            return value
    return None


def _as_list(value: Any) -> list:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _text(value: Any) -> str:
    if isinstance(value, dict):
        return (value.get("#text") or "").strip()
    return (value or "").strip()


def _find_text(node: Any, name: str) -> str:
    """Depth-first search for the first non-empty <name> text."""
    if isinstance(node, list):
        for item in node:
            found = _find_text(item, name)
            if found:
                return found
        return ""
    if not isinstance(node, dict):
        return ""
    for key, value in node.items():
        if _matches(key, name):
            for item in _as_list(value):
                if _text(item):
                    return _text(item)
        found = _find_text(value, name)
        if found:
            return found
    return ""


def _decimal(value: Any, field: str) -> Decimal:
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise UnexpectedResponse(f"Invalid {field} in response: {value!r}") from exc


def _int(value: Any, field: str) -> int:
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise UnexpectedResponse(f"Invalid {field} in response: {value!r}") from exc


# ── Body → root ────────────────────────────────────────────────────────────────

def parse_body(xml: str, root: ActionsRS) -> dict:
    """Parse a body fragment and return the *root* element as a dict.

    Raises:
        UnexpectedResponse: Empty / malformed payload or missing root.
        ErrorInResponse:    ApplicationResults status other than Complete.
    """
    if not xml or not xml.strip():
        raise UnexpectedResponse(f"Unexpected response: missing {root.value}")
    try:
        tree = xmltodict.parse(xml)
    except ExpatError as exc:
        raise UnexpectedResponse(f"Unparseable {root.value} payload: {exc}") from exc

    node = next((v for k, v in tree.items() if _matches(k, root.value)), _MISSING)
    if node is _MISSING:
        raise UnexpectedResponse(f"Unexpected response: missing {root.value}")
    if not isinstance(node, dict):
        node = {"#text": node} if node else {}

    _check_application_results(node, root)
    return node


def _check_application_results(node: dict, root: ActionsRS) -> None:
    results = _child(node, "ApplicationResults")
    if not isinstance(results, dict):
        return
    status = results.get("@status", "Complete")
    if status == "Complete":
        return
    message = _find_text(_child(results, "Error"), "Message") or _find_text(results, "Message")
    logger.warning("%s ApplicationResults status=%s", root.value, status)
    raise ErrorInResponse(message or f"{root.value} returned status {status}")


# ── Authentication ─────────────────────────────────────────────────────────────

def parse_session_status(
    xml: str,
    root: ActionsRS,
    conversation_id: str,
    authenticated: bool,
) -> SessionStatus:
    node = parse_body(xml, root)
    # <Success/> parses to None, so test for the key rather than its value
    has_success = any(_matches(key, "Success") for key in node)
    status = node.get("@status") or ("Success" if has_success else "Complete")
    return SessionStatus(
        status=status,
        conversation_id=_text(_child(node, "ConversationId")) or conversation_id,
        authenticated=authenticated,
    )


# ── Queue ──────────────────────────────────────────────────────────────────────

def parse_queue_count(xml: str, pcc: str) -> QueueCountResponse:
    node = parse_body(xml, ActionsRS.QUEUE_COUNT)
    queues: list[QueueCount] = []
    for info in _as_list(_child(node, "QueueInfo")):
        for ident in _as_list(_child(info, "QueueIdentifier")):
            if not isinstance(ident, dict):
                continue
            queues.append(
                QueueCount(
                    number=ident.get("@Number", ""),
                    count=_int(ident.get("@Count") or 0, "count"),
                )
            )
    return QueueCountResponse(pcc=pcc, queues=queues)


def parse_queue_access(xml: str) -> tuple[Optional[str], list[str]]:
    """Return (booking id, paragraph text lines) of the current queue item."""
    node = parse_body(xml, ActionsRS.QUEUE_ACCESS)
    lines = _as_list(_child(node, "Line"))
    booking_id = None
    if lines:
        unique_id = _child(lines[0], "UniqueID")
        if isinstance(unique_id, dict):
            booking_id = unique_id.get("@ID") or None
    texts: list[str] = []
    for paragraph in _as_list(_child(node, "Paragraph")):
        texts.extend(_text(t) for t in _as_list(_child(paragraph, "Text")))
    return booking_id, texts


def parse_queue_list(xml: str, queue: str) -> QueueListResponse:
    node = parse_body(xml, ActionsRS.QUEUE_ACCESS)
    booking_ids = []
    for line in _as_list(_child(node, "Line")):
        unique_id = _child(line, "UniqueID")
        if isinstance(unique_id, dict) and unique_id.get("@ID"):
            booking_ids.append(unique_id["@ID"])
    return QueueListResponse(queue=queue, booking_ids=booking_ids)


def parse_queue_place(xml: str) -> list[str]:
    """Return the confirmation text lines of a QueuePlaceRS."""
    node = parse_body(xml, ActionsRS.QUEUE_PLACE)
    texts = [_text(t) for t in _as_list(_child(node, "Text"))]
    if not texts:
        results = _child(node, "ApplicationResults")
        message = _find_text(results, "Message")
        texts = [message] if message else []
    return [t for t in texts if t]


def find_booking_id(text: Optional[str]) -> Optional[str]:
    """Pull a six-character record locator off the end of a response line."""
    if not text:
        return None
    match = _BOOKING_ID_RE.search(text.strip())
    return match.group(1) if match else None


def parse_paragraph_to_warnings(texts: list[str]) -> list[str]:
    """Non-blank paragraph lines, de-duplicated in order."""
    seen: dict[str, None] = {}
    for text in texts:
        line = (text or "").strip()
        if line:
            seen.setdefault(line, None)
    return list(seen)


def parse_warnings_to_notifications(queue: str, warnings: list[str]) -> list[Notification]:
    return [Notification(queue=queue, message=w) for w in warnings]


def format_queue_response(booking_id: Optional[str], texts: list[str], queue: str) -> QueueResponse:
    warnings = parse_paragraph_to_warnings(texts)
    return QueueResponse(
        booking_id=booking_id,
        notifications=parse_warnings_to_notifications(queue, warnings),
    )


# ── Currency ───────────────────────────────────────────────────────────────────

def parse_currency(xml: str, amount: Decimal, source: str, destination: str) -> CurrencyConversion:
    node = parse_body(xml, ActionsRS.CURRENCY)
    rate_node = _child(node, "Rate")
    if isinstance(rate_node, list):
        rate_node = rate_node[0]
    if not isinstance(rate_node, dict) or not rate_node.get("@Amount"):
        raise UnexpectedResponse(f"Unexpected response: no Rate in {ActionsRS.CURRENCY.value}")
    rate = _decimal(rate_node["@Amount"], "rate")
    return CurrencyConversion(
        source=source,
        destination=rate_node.get("@CurrencyCode") or destination,
        amount=amount,
        rate=rate,
        converted=(amount * rate).quantize(_TWO_PLACES),
    )


# ── Daily sales ────────────────────────────────────────────────────────────────

def parse_daily_sales(xml: str, report_date: date, pcc: str) -> DailySalesReport:
    node = parse_body(xml, ActionsRS.DAILY_SALES)
    items: list[SalesItem] = []
    for report in _as_list(_child(node, "SalesReport")):
        for item in _as_list(_child(report, "Item")):
            if not isinstance(item, dict):
                continue
            items.append(
                SalesItem(
                    document_number=item.get("@DocumentNumber", ""),
                    record_locator=item.get("@RecordLocator"),
                    amount=_decimal(item.get("@Amount") or "0", "amount"),
                    currency=item.get("@CurrencyCode"),
                    type=item.get("@Type"),
                )
            )
    return DailySalesReport(date=report_date, pcc=pcc, items=items)
