"""
domain/session.py
──────────────────────────────────────────────────────────────────────────────
Session state machine and action header set.

Two observable variables drive the client:
  • SessionState.authorization   ("" = unauthenticated)
  • the SOAPAction header         (overwritten before every dispatch)

transition() is the whole state machine:

  completed action                      new state        header delta
  ─────────────────────────────────────────────────────────────────────────
  SessionCreateRQ / TokenCreateRQ   →   token from XML   set Authorization
  SessionCloseRQ                    →   ""               remove Authorization
  anything else                     →   unchanged        none

All objects here are frozen; every mutation returns a new instance so the
dispatcher stays the single writer.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional

from legacy_sabre.domain.fragments import TOKEN_MARKERS, extract
from legacy_sabre.domain.models import ActionsRQ

AUTHORIZATION = "Authorization"
SOAP_ACTION = "SOAPAction"

_AUTHENTICATING_ACTIONS = frozenset({ActionsRQ.SESSION_CREATE.value, ActionsRQ.TOKEN_CREATE.value})
_DEAUTHENTICATING_ACTIONS = frozenset({ActionsRQ.SESSION_CLOSE.value})


def bearer(token: str) -> str:
    return f"Bearer {token}"


@dataclass(frozen=True)
class SessionState:
    """Bearer token and conversation id for one client instance."""

    conversation_id: str
    authorization: str = ""

    @property
    def authenticated(self) -> bool:
        return bool(self.authorization)


@dataclass(frozen=True)
class HeaderDelta:
    """Headers to set and header names to drop."""

    set: Mapping[str, str] = field(default_factory=dict)
    remove: frozenset[str] = frozenset()

    @property
    def empty(self) -> bool:
        return not self.set and not self.remove


@dataclass(frozen=True)
class ActionHeaders:
    """Immutable header collection; transformations return new instances."""

    values: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @classmethod
    def defaults(cls, user_agent: str) -> "ActionHeaders":
        return cls({
            "User-Agent": user_agent,
            "Content-Type": 'text/xml; charset="utf-8"',
            "Content-Encoding": "deflate",
        })

    def get(self, name: str) -> Optional[str]:
        return self.values.get(name)

    @property
    def action(self) -> Optional[str]:
        return self.values.get(SOAP_ACTION)

    def with_action(self, action: str) -> "ActionHeaders":
        return self.apply(HeaderDelta(set={SOAP_ACTION: action}))

    def apply(self, delta: HeaderDelta) -> "ActionHeaders":
        if delta.empty:
            return self
        merged = {k: v for k, v in self.values.items() if k not in delta.remove}
        merged.update(delta.set)
        return ActionHeaders(merged)

    def as_dict(self) -> dict[str, str]:
        return dict(self.values)


@dataclass(frozen=True)
class SessionTransition:
    state: SessionState
    headers: HeaderDelta


def authenticate(state: SessionState, token: str) -> SessionTransition:
    """Adopt *token* as the bearer credential."""
    return SessionTransition(
        state=replace(state, authorization=token),
        headers=HeaderDelta(set={AUTHORIZATION: bearer(token)}),
    )


def deauthenticate(state: SessionState) -> SessionTransition:
    return SessionTransition(
        state=replace(state, authorization=""),
        headers=HeaderDelta(remove=frozenset({AUTHORIZATION})),
    )


def transition(state: SessionState, action: Optional[str], response_text: str) -> SessionTransition:
    """Compute the session change caused by a successfully completed action.

    Args:
        state:         Session state before the call.
        action:        SOAPAction value that was just sent.
        response_text: Raw response text (full envelope, not just the body).

    Returns:
        SessionTransition with the new state and the header delta to apply.
    """
    if action in _AUTHENTICATING_ACTIONS:
        token = extract(response_text, TOKEN_MARKERS)
        # No token in the envelope: never send an empty "Bearer " header
        if not token:
            return deauthenticate(state)
        return authenticate(state, token)
    if action in _DEAUTHENTICATING_ACTIONS:
        return deauthenticate(state)
    return SessionTransition(state=state, headers=HeaderDelta())
