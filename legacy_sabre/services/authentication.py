"""
services/authentication.py
──────────────────────────────────────────────────────────────────────────────
Session lifecycle operations.

  session_create → SessionCreateRQ via Dispatcher.auth()  (UsernameToken)
  token_create   → TokenCreateRQ   via Dispatcher.auth()  (UsernameToken)
  session_close  → SessionCloseRQ  via Dispatcher.post()  (BinarySecurityToken)

The bearer token itself is captured by the Dispatcher's session transition;
these methods only report the outcome.
"""
from __future__ import annotations

import logging
from typing import Optional

from legacy_sabre.config import templates
from legacy_sabre.domain.models import ActionsRQ, ActionsRS, SessionStatus
from legacy_sabre.services.dispatcher import Dispatcher
from legacy_sabre.services.parsers import parse_session_status

logger = logging.getLogger(__name__)


class Authentication:
    """Opens and closes Sabre sessions for a Dispatcher."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def session_create(self, pcc: Optional[str] = None) -> SessionStatus:
        """Open a stateful session; the returned token is kept by the dispatcher.

        See https://developer.sabre.com/docs/soap_apis/session_management/create_session

        Args:
            pcc: Pseudo city code; falsy falls back to SABRE_ORGANIZATION.

        Raises:
            ConfigurationError: Credentials incomplete.
            FaultError:         Sabre rejected the credentials.
        """
        pcc = self._dispatcher.resolve_pcc(pcc, "session_create")
        xml = self._dispatcher.call_auth(ActionsRQ.SESSION_CREATE, templates.session_create_body(pcc))
        return self._status(xml, ActionsRS.SESSION_CREATE)

    def token_create(self) -> SessionStatus:
        """Obtain a stateless ATK token.

        See https://developer.sabre.com/docs/soap_apis/session_management/create_access_token
        """
        xml = self._dispatcher.call_auth(ActionsRQ.TOKEN_CREATE, templates.TOKEN_CREATE_BODY)
        return self._status(xml, ActionsRS.TOKEN_CREATE)

    def session_close(self, pcc: Optional[str] = None) -> SessionStatus:
        """Close the current session and drop the bearer token."""
        pcc = self._dispatcher.resolve_pcc(pcc, "session_close")
        xml = self._dispatcher.call(ActionsRQ.SESSION_CLOSE, templates.session_close_body(pcc), pcc)
        return self._status(xml, ActionsRS.SESSION_CLOSE)

    # ── Private helpers ────────────────────────────────────────────────────

    def _status(self, xml: str, root: ActionsRS) -> SessionStatus:
        status = parse_session_status(
            xml,
            root,
            conversation_id=self._dispatcher.conversation_id,
            authenticated=self._dispatcher.session.authenticated,
        )
        logger.info("%s → %s", root.value, status.status)
        return status
