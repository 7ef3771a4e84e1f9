"""
Legacy Sabre SOAP Client — Production Package
=============================================
Hexagonal (Ports & Adapters) architecture around a stateful SOAP dispatcher.

Layer map
─────────────────────────────────────────────────────
  config/       Settings (env / .env) and SOAP envelope templates
  domain/       Pure objects: models, exceptions, fragment extraction,
                session state machine — no I/O
  ports/        Abstract interfaces (Python Protocols)
  adapters/     Concrete implementations of each Port (requests transport)
  services/     Dispatcher + per-feature operations; depend only on Ports
  interfaces/   Delivery layer: CLI
  tests/        Full test suite: unit / integration / e2e

Typical usage:
    from legacy_sabre.services.container import create_client

    client = create_client()                 # credentials from env / .env
    client.authentication.session_create()
    counts = client.queue.count()
    client.authentication.session_close()
"""
__version__ = "1.0.0"
