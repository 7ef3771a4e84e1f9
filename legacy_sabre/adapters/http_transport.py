"""
adapters/http_transport.py
──────────────────────────────────────────────────────────────────────────────
Implements TransportPort using requests.

Key behaviour:
  - Exactly one requests.request() call per exchange (no Session, no pooling)
  - Non-2xx responses are returned, not raised; the dispatcher classifies them
  - requests exceptions are translated to TransportError (cause chained)
  - Timeout comes from SABRE_HTTP_TIMEOUT
"""
from __future__ import annotations

import logging

import requests

from legacy_sabre.config.settings import Settings
from legacy_sabre.domain.exceptions import TransportError
from legacy_sabre.domain.models import FetchRequestOptions
from legacy_sabre.ports.transport_port import TransportResponse

logger = logging.getLogger(__name__)


class RequestsTransport:
    """Blocking HTTP transport backed by ``requests``.

    Injected into the Dispatcher via services/container.py.
    """

    def __init__(self, settings: Settings) -> None:
        self._timeout = settings.http_timeout
        logger.debug("RequestsTransport ready | timeout=%ss", self._timeout)

    def send(self, url: str, request: FetchRequestOptions) -> TransportResponse:
        try:
            resp = requests.request(
                request.method,
                url,
                headers=request.headers,
                data=request.body.encode("utf-8"),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"HTTP request to {url} failed: {exc}") from exc

        logger.debug("HTTP %s %s → %d", request.method, url, resp.status_code)
        return TransportResponse(status_code=resp.status_code, text=resp.text)
