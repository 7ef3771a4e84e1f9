"""
config/settings.py
──────────────────────────────────────────────────────────────────────────────
Single source of truth for all tuneable parameters.

All values can be overridden via environment variables or a .env file placed
at the project root.  The frozen dataclass ensures settings are never mutated
at runtime.

Credentials passed explicitly to ``create_client()`` take precedence; any
falsy value falls back to the matching field here:
  SABRE_USERNAME       → EPR / user id
  SABRE_PASSWORD       → password
  SABRE_ORGANIZATION   → PCC (pseudo city code)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (two levels up from this file)
load_dotenv(Path(__file__).parent.parent.parent / ".env")


def _env(key: str, default: str) -> str:
    return os.getenv(key, default)


def _env_int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


@dataclass(frozen=True)
class Settings:
    """Immutable application settings loaded from environment variables."""

    # ── Endpoint ───────────────────────────────────────────────────────────
    # Certification environment: https://webservices.cert.platform.sabre.com
    sabre_base_url: str = field(
        default_factory=lambda: _env(
            "SABRE_BASE_URL", "https://webservices.platform.sabre.com"
        )
    )
    sabre_user_agent: str = field(
        default_factory=lambda: _env("SABRE_USER_AGENT", "legacy-sabre-python/1.0.0")
    )

    # ── Credentials ────────────────────────────────────────────────────────
    sabre_username: str = field(
        default_factory=lambda: _env("SABRE_USERNAME", "")
    )
    sabre_password: str = field(
        default_factory=lambda: _env("SABRE_PASSWORD", "")
    )
    sabre_organization: str = field(
        default_factory=lambda: _env("SABRE_ORGANIZATION", "")
    )
    sabre_domain: str = field(
        default_factory=lambda: _env("SABRE_DOMAIN", "DEFAULT")
    )

    # ── ebXML message header ───────────────────────────────────────────────
    # Empty conversation id → a fresh one is generated per client instance.
    sabre_conversation_id: str = field(
        default_factory=lambda: _env("SABRE_CONVERSATION_ID", "")
    )
    sabre_from_party: str = field(
        default_factory=lambda: _env("SABRE_FROM_PARTY", "legacy-sabre")
    )
    sabre_to_party: str = field(
        default_factory=lambda: _env("SABRE_TO_PARTY", "webservices.sabre.com")
    )

    # ── HTTP transport (seconds) ───────────────────────────────────────────
    http_timeout: int = field(default_factory=lambda: _env_int("SABRE_HTTP_TIMEOUT", 60))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Returns a cached singleton Settings instance.

    Use this everywhere instead of instantiating Settings() directly —
    it guarantees a single object is shared across the entire process.
    """
    return Settings()
