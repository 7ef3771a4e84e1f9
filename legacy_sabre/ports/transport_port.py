"""
ports/transport_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the HTTP exchange.

One call, one request, one response: the dispatcher never retries, pools or
queues.  Whatever timeout exists belongs to the concrete transport.

Current implementation: RequestsTransport (requests)
To swap: write a new adapter implementing this Protocol and change
services/container.py.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from legacy_sabre.domain.models import FetchRequestOptions


@dataclass(frozen=True)
class TransportResponse:
    """Status and full text of an HTTP response."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class TransportPort(Protocol):
    """Contract for a synchronous request/response transport."""

    def send(self, url: str, request: FetchRequestOptions) -> TransportResponse:
        """Perform the exchange and read the whole response body.

        Args:
            url:     Absolute endpoint URL.
            request: Method, headers and body to send.

        Returns:
            TransportResponse, whatever the HTTP status.

        Raises:
            TransportError: When no response could be obtained.
        """
        ...
