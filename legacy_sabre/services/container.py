"""
services/container.py
──────────────────────────────────────────────────────────────────────────────
Dependency Injection container.

THIS IS THE ONLY FILE THAT NAMES CONCRETE ADAPTER CLASSES.

  TransportPort → RequestsTransport (requests)

Credentials are resolved here, once, at construction:
  explicit argument → SABRE_* setting → ConfigurationError
Any falsy argument (None or "") triggers the settings fallback.

Thread safety:
  get_client() returns one cached LegacySabre per process.  A client holds
  a single Sabre session and must not run two calls at once; create one
  client per worker with create_client() when calls may overlap.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from legacy_sabre.config.settings import Settings, get_settings
from legacy_sabre.domain.exceptions import ConfigurationError
from legacy_sabre.domain.models import Credentials
from legacy_sabre.ports.transport_port import TransportPort
from legacy_sabre.services.client import LegacySabre
from legacy_sabre.services.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def resolve_credentials(
    settings: Settings,
    username: Optional[str] = None,
    password: Optional[str] = None,
    organization: Optional[str] = None,
) -> Credentials:
    """Merge explicit credentials with the SABRE_* settings.

    Raises:
        ConfigurationError: Any of username / password / organization missing.
    """
    resolved = {
        "username": username or settings.sabre_username,
        "password": password or settings.sabre_password,
        "organization": organization or settings.sabre_organization,
    }
    missing = [k for k, v in resolved.items() if not v]
    if missing:
        raise ConfigurationError(
            f"Missing Sabre authorization ({', '.join(missing)}). Pass it to "
            "create_client(username, password, organization) or set "
            "SABRE_USERNAME / SABRE_PASSWORD / SABRE_ORGANIZATION."
        )
    return Credentials(domain=settings.sabre_domain, **resolved)


def _build_transport(settings: Settings) -> TransportPort:
    from legacy_sabre.adapters.http_transport import RequestsTransport
    return RequestsTransport(settings)


def create_client(
    username: Optional[str] = None,
    password: Optional[str] = None,
    organization: Optional[str] = None,
    settings: Optional[Settings] = None,
    transport: Optional[TransportPort] = None,
) -> LegacySabre:
    """Build a fully wired LegacySabre client.

    Args:
        username:     Sabre EPR; falls back to SABRE_USERNAME.
        password:     Password; falls back to SABRE_PASSWORD.
        organization: PCC; falls back to SABRE_ORGANIZATION.
        settings:     Settings override (default: get_settings()).
        transport:    TransportPort override (default: RequestsTransport).

    Raises:
        ConfigurationError: Credentials incomplete.
    """
    settings = settings or get_settings()
    credentials = resolve_credentials(settings, username, password, organization)
    transport = transport or _build_transport(settings)
    dispatcher = Dispatcher(transport=transport, credentials=credentials, settings=settings)
    logger.info(
        "LegacySabre ready | url=%s pcc=%s",
        settings.sabre_base_url, credentials.organization,
    )
    return LegacySabre(dispatcher)


@lru_cache(maxsize=1)
def get_client() -> LegacySabre:
    """Return the process-wide client built from environment settings."""
    return create_client()
