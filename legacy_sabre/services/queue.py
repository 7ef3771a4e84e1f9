"""
services/queue.py
──────────────────────────────────────────────────────────────────────────────
Queue operations (QueueCountLLSRQ / QueueAccessLLSRQ / QueuePlaceLLSRQ).

A queue is "opened" by access(); ignore(), remove() and exit() then navigate
the queue that is open in the Sabre session.  The last accessed queue number
is remembered so navigation results carry it in their notifications.

All methods use the protected dispatch path and therefore need an open
session (authentication.session_create()).
"""
from __future__ import annotations

import logging
from typing import Optional

from legacy_sabre.config import templates
from legacy_sabre.domain.models import (
    ActionsRQ,
    NavigationAction,
    QueueCountResponse,
    QueueListResponse,
    QueueResponse,
)
from legacy_sabre.services.dispatcher import Dispatcher
from legacy_sabre.services.parsers import (
    find_booking_id,
    format_queue_response,
    parse_queue_access,
    parse_queue_count,
    parse_queue_list,
    parse_queue_place,
)

logger = logging.getLogger(__name__)


class Queue:
    """Queue count / access / navigation / place."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher
        self._queue = ""

    @property
    def current_queue(self) -> str:
        """Number of the last accessed queue ("" if none)."""
        return self._queue

    # ── Public API ─────────────────────────────────────────────────────────

    def count(self, pcc: Optional[str] = None) -> QueueCountResponse:
        """Count the items on every queue of a PCC.

        See https://developer.sabre.com/docs/soap_apis/management/queue/Get_Queue_Count

        Args:
            pcc: Pseudo city code; falsy falls back to SABRE_ORGANIZATION.

        Raises:
            ConfigurationError: No pcc available or no session open.
        """
        pcc = self._dispatcher.resolve_pcc(pcc, "count")
        xml = self._dispatcher.call(ActionsRQ.QUEUE_COUNT, templates.queue_count_body(pcc), pcc)
        result = parse_queue_count(xml, pcc)
        logger.debug("Queue count %s: %d queues, %d items", pcc, len(result.queues), result.total)
        return result

    def access(self, number: str, pcc: Optional[str] = None) -> QueueResponse:
        """Open queue *number* and return its first item.

        See https://developer.sabre.com/docs/soap_apis/management/queue/Access_Queue
        """
        pcc = self._dispatcher.resolve_pcc(pcc, "access")
        xml = self._dispatcher.call(ActionsRQ.QUEUE_ACCESS, templates.queue_access_body(number, pcc), pcc)
        self._queue = number
        booking_id, texts = parse_queue_access(xml)
        return format_queue_response(booking_id, texts, self._queue)

    def access_list(self, number: str, pcc: Optional[str] = None) -> QueueListResponse:
        """List the booking ids on queue *number* without opening an item."""
        pcc = self._dispatcher.resolve_pcc(pcc, "access_list")
        body = templates.queue_access_body(number, pcc, list_only=True)
        xml = self._dispatcher.call(ActionsRQ.QUEUE_ACCESS, body, pcc)
        return parse_queue_list(xml, number)

    def ignore(self) -> QueueResponse:
        """Leave the current item on the queue and move to the next one."""
        return self._navigate(NavigationAction.IGNORE)

    def remove(self) -> QueueResponse:
        """Remove the current item from the queue and move to the next one."""
        return self._navigate(NavigationAction.REMOVE)

    def exit(self) -> None:
        """Leave the queue, ignoring the current item."""
        self._dispatcher.call(ActionsRQ.QUEUE_ACCESS, templates.queue_navigation_body(NavigationAction.EXIT))
        self._queue = ""

    def place(
        self,
        number: str,
        pcc: Optional[str] = None,
        booking_id: Optional[str] = None,
    ) -> QueueResponse:
        """Place a booking on queue *number*.

        Without *booking_id* the booking currently open in the session is
        placed.

        See https://developer.sabre.com/docs/soap_apis/management/queue/Place_Queue_Message
        """
        pcc = self._dispatcher.resolve_pcc(pcc, "place")
        xml = self._dispatcher.call(
            ActionsRQ.QUEUE_PLACE,
            templates.queue_place_body(number, pcc, booking_id),
            pcc,
        )
        texts = parse_queue_place(xml)
        found = find_booking_id(texts[-1]) if texts else None
        return format_queue_response(found or booking_id, texts, number)

    # ── Private helpers ────────────────────────────────────────────────────

    def _navigate(self, action: NavigationAction) -> QueueResponse:
        xml = self._dispatcher.call(ActionsRQ.QUEUE_ACCESS, templates.queue_navigation_body(action))
        booking_id, texts = parse_queue_access(xml)
        return format_queue_response(booking_id, texts, self._queue)
