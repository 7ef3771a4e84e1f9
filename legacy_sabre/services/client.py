"""
services/client.py
──────────────────────────────────────────────────────────────────────────────
LegacySabre facade: one Dispatcher plus the feature services that share it.

Build it via services/container.py (create_client / get_client) — the
facade itself never names a concrete transport.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Union

from legacy_sabre.domain.exceptions import SabreError
from legacy_sabre.domain.models import ActionsRQ, FetchRequestOptions
from legacy_sabre.services.authentication import Authentication
from legacy_sabre.services.currency import Currency
from legacy_sabre.services.daily_sales import DailySales
from legacy_sabre.services.dispatcher import AuthBodyBuilder, BodyBuilder, Dispatcher
from legacy_sabre.services.queue import Queue

logger = logging.getLogger(__name__)


class LegacySabre:
    """Stateful client for the Sabre SOAP API.

    Attributes:
        authentication: Session create / token create / session close.
        queue:          Queue count / access / navigation / place.
        currency:       Currency conversion.
        daily_sales:    Daily sales report.

    One instance holds one session; do not share it between threads.
    """

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher
        self.authentication = Authentication(dispatcher)
        self.queue = Queue(dispatcher)
        self.currency = Currency(dispatcher)
        self.daily_sales = DailySales(dispatcher)

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    def set_action(self, action: Union[ActionsRQ, str]) -> None:
        self._dispatcher.set_action(action)

    def set_authorization(self, token: str) -> None:
        self._dispatcher.set_authorization(token)

    def get_authorization(self) -> str:
        return self._dispatcher.get_authorization()

    def get_last_request(self) -> Optional[FetchRequestOptions]:
        return self._dispatcher.get_last_request()

    def post(self, build_body: BodyBuilder, options: Optional[dict[str, Any]] = None) -> str:
        return self._dispatcher.post(build_body, options)

    def auth(self, build_body: AuthBodyBuilder, options: Optional[dict[str, Any]] = None) -> str:
        return self._dispatcher.auth(build_body, options)

    def __enter__(self) -> "LegacySabre":
        self.authentication.session_create()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._dispatcher.session.authenticated:
            return
        if exc_type is None:
            self.authentication.session_close()
            return
        # The error raised inside the block is the one the caller sees
        try:
            self.authentication.session_close()
        except SabreError as close_exc:
            logger.warning("session_close failed after %s: %s", exc_type.__name__, close_exc)
