"""
services/dispatcher.py
──────────────────────────────────────────────────────────────────────────────
Session/action dispatch engine.

The Dispatcher is the only writer of the three pieces of shared state:
  • SessionState   (bearer token + conversation id)
  • ActionHeaders  (Content-Type / SOAPAction / Authorization …)
  • last_request   (diagnostic copy of the last assembled request)

Two entry points:
  post(build_body)  protected path; needs a token; builder gets SessionContext
  auth(build_body)  login path; needs credentials; builder gets AuthPayload

Exchange, shared by both:
  1. record the request as last_request
  2. send it through the TransportPort
  3. non-2xx or <faultstring>   → FaultError
     <stl:Error> inside the body → ErrorInResponse (its <stl:Message>)
  4. otherwise apply the session transition for the action just sent and
     return the <soap-env:Body> fragment

At most one call may be in flight per Dispatcher; there is no locking.
"""
from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Any, Callable, Optional, Union

from legacy_sabre.config import templates
from legacy_sabre.config.settings import Settings
from legacy_sabre.domain.exceptions import (
    ConfigurationError,
    ErrorInResponse,
    FaultError,
    SabreError,
    UnexpectedError,
)
from legacy_sabre.domain.fragments import (
    BODY_MARKERS,
    ERROR_ATTR_MARKERS,
    ERROR_MARKERS,
    FAULT_MARKERS,
    MESSAGE_MARKERS,
    extract,
    extract_first,
)
from legacy_sabre.domain.models import (
    ActionsRQ,
    AuthPayload,
    Credentials,
    FetchRequestOptions,
    SessionContext,
)
from legacy_sabre.domain.session import (
    SOAP_ACTION,
    ActionHeaders,
    SessionState,
    authenticate,
    transition,
)
from legacy_sabre.ports.transport_port import TransportPort, TransportResponse

logger = logging.getLogger(__name__)

BodyBuilder = Callable[[SessionContext], str]
AuthBodyBuilder = Callable[[AuthPayload], str]


def new_conversation_id() -> str:
    return f"{uuid.uuid4().hex}@legacy-sabre"


class Dispatcher:
    """Stateful SOAP dispatcher for one client instance.

    Args:
        transport:       TransportPort implementation.
        credentials:     Account credentials for the auth() path.
        settings:        Shared application settings.
        conversation_id: Optional fixed conversation id; defaults to
                         SABRE_CONVERSATION_ID or a freshly generated one.
    """

    def __init__(
        self,
        transport: TransportPort,
        credentials: Credentials,
        settings: Settings,
        conversation_id: Optional[str] = None,
    ) -> None:
        self._transport = transport
        self._credentials = credentials
        self._settings = settings
        self._url = settings.sabre_base_url
        self._state = SessionState(
            conversation_id=conversation_id
            or settings.sabre_conversation_id
            or new_conversation_id()
        )
        self._headers = ActionHeaders.defaults(settings.sabre_user_agent)
        self._last_request: Optional[FetchRequestOptions] = None
        logger.debug(
            "Dispatcher ready | url=%s conversation_id=%s",
            self._url, self._state.conversation_id,
        )

    # ── State accessors ────────────────────────────────────────────────────

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def session(self) -> SessionState:
        return self._state

    @property
    def headers(self) -> ActionHeaders:
        return self._headers

    @property
    def conversation_id(self) -> str:
        return self._state.conversation_id

    def get_last_request(self) -> Optional[FetchRequestOptions]:
        """Most recently assembled request, or None before the first call."""
        return self._last_request

    # ── Header / session mutators ──────────────────────────────────────────

    def set_action(self, action: Union[ActionsRQ, str]) -> None:
        """Overwrite the SOAPAction header for the next dispatch."""
        value = action.value if isinstance(action, Enum) else action
        self._headers = self._headers.with_action(value)

    def set_authorization(self, token: str) -> None:
        """Adopt an externally obtained bearer token."""
        applied = authenticate(self._state, token)
        self._state = applied.state
        self._headers = self._headers.apply(applied.headers)

    def get_authorization(self) -> str:
        return self._state.authorization

    def resolve_pcc(self, pcc: Optional[str], operation: str) -> str:
        """Return *pcc*, or the configured organization when it is falsy.

        Fallback order: SABRE_ORGANIZATION, then the credential organization.

        Raises:
            ConfigurationError: No pcc is available at all.
        """
        resolved = pcc or self._settings.sabre_organization or (
            self._credentials.organization if self._credentials else ""
        )
        if not resolved:
            raise ConfigurationError(f"Missing pcc. Pass it to {operation}(pcc=...)")
        return resolved

    # ── Entry points ───────────────────────────────────────────────────────

    def post(self, build_body: BodyBuilder, options: Optional[dict[str, Any]] = None) -> str:
        """Dispatch on the protected path.

        Args:
            build_body: Called with the current SessionContext; returns the
                        SOAP envelope to send.
            options:    Overrides merged over method / headers / body.

        Returns:
            The extracted <soap-env:Body> fragment.

        Raises:
            ConfigurationError: No bearer token is held, or *options* names an
                                unknown field (nothing is sent).
            FaultError:         HTTP or SOAP fault.
            ErrorInResponse:    Application error block in the body.
            TransportError:     No response could be obtained.
            UnexpectedError:    Anything else.
        """
        if not self._state.authorization:
            raise ConfigurationError(
                "Missing authorization. Call authentication.session_create() "
                "or set_authorization(token) first."
            )
        context = SessionContext(
            authorization=self._state.authorization,
            conversation_id=self._state.conversation_id,
        )
        return self.fetch_request(self._assemble(build_body(context), options))

    def auth(self, build_body: AuthBodyBuilder, options: Optional[dict[str, Any]] = None) -> str:
        """Dispatch on the authentication path (no bearer token required).

        Raises:
            ConfigurationError: Username, password or organization missing.
        """
        if self._credentials is None or not self._credentials.complete:
            raise ConfigurationError(
                "Missing credentials. Set SABRE_USERNAME, SABRE_PASSWORD and "
                "SABRE_ORGANIZATION or pass them to create_client()."
            )
        payload = AuthPayload(
            conversation_id=self._state.conversation_id,
            credentials=self._credentials,
        )
        return self.fetch_request(self._assemble(build_body(payload), options))

    def call(self, action: ActionsRQ, body: str, pcc: str = "") -> str:
        """Set *action* and post *body* wrapped in a token-secured envelope."""
        settings = self._settings

        def build(ctx: SessionContext) -> str:
            return templates.build_request(
                action=action.value,
                body=body,
                conversation_id=ctx.conversation_id,
                authorization=ctx.authorization,
                pcc=pcc,
                from_party=settings.sabre_from_party,
                to_party=settings.sabre_to_party,
            )

        self.set_action(action)
        return self.post(build)

    def call_auth(self, action: ActionsRQ, body: str) -> str:
        """Set *action* and send *body* wrapped in a UsernameToken envelope."""
        settings = self._settings

        def build(payload: AuthPayload) -> str:
            return templates.build_session_request(
                action=action.value,
                body=body,
                conversation_id=payload.conversation_id,
                credentials=payload.credentials,
                from_party=settings.sabre_from_party,
                to_party=settings.sabre_to_party,
            )

        self.set_action(action)
        return self.auth(build)

    # ── Exchange ───────────────────────────────────────────────────────────

    def fetch_request(self, request: FetchRequestOptions) -> str:
        """Send *request*, classify the response and update the session."""
        self._last_request = request
        action = request.headers.get(SOAP_ACTION)
        try:
            response = self._transport.send(self._url, request)
            return self._handle_response(response, action)
        except SabreError:
            raise
        except Exception as exc:
            raise UnexpectedError(f"Unexpected failure during {action}: {exc}") from exc

    # ── Private helpers ────────────────────────────────────────────────────

    def _assemble(self, body: str, options: Optional[dict[str, Any]]) -> FetchRequestOptions:
        unknown = sorted(set(options or {}) - set(FetchRequestOptions.model_fields))
        if unknown:
            raise ConfigurationError(
                f"Unknown request option(s): {', '.join(unknown)}. "
                "Use method, headers or body."
            )
        fields: dict[str, Any] = {
            "method": "POST",
            "headers": self._headers.as_dict(),
            "body": body,
        }
        fields.update(options or {})
        return FetchRequestOptions(**fields)

    def _handle_response(self, response: TransportResponse, action: Optional[str]) -> str:
        xml = response.text
        fault = extract(xml, FAULT_MARKERS)

        if not response.ok:
            logger.warning("%s → HTTP %d fault: %s", action, response.status_code, fault)
            raise FaultError(fault or f"HTTP {response.status_code}")
        if fault:
            logger.warning("%s → SOAP fault: %s", action, fault)
            raise FaultError(fault)

        body = extract(xml, BODY_MARKERS)
        error = extract_first(body, ERROR_ATTR_MARKERS, ERROR_MARKERS)
        if error:
            message = extract(error, MESSAGE_MARKERS)
            logger.warning("%s → error in response: %s", action, message)
            raise ErrorInResponse(message)

        was_authenticated = self._state.authenticated
        applied = transition(self._state, action, xml)
        self._state = applied.state
        self._headers = self._headers.apply(applied.headers)
        if self._state.authenticated != was_authenticated:
            logger.info(
                "Session %s after %s",
                "authenticated" if self._state.authenticated else "closed",
                action,
            )
        logger.debug("%s → HTTP %d, %d chars of body", action, response.status_code, len(body))
        return body
