"""
services/currency.py
──────────────────────────────────────────────────────────────────────────────
Currency conversion via DisplayCurrencyLLSRQ.
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Union

from legacy_sabre.config import templates
from legacy_sabre.domain.exceptions import ConfigurationError
from legacy_sabre.domain.models import ActionsRQ, CurrencyConversion
from legacy_sabre.services.dispatcher import Dispatcher
from legacy_sabre.services.parsers import parse_currency

logger = logging.getLogger(__name__)


class Currency:
    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def convert(
        self,
        amount: Union[Decimal, int, str],
        source: str,
        destination: str,
    ) -> CurrencyConversion:
        """Convert *amount* from *source* to *destination* currency.

        See https://developer.sabre.com/docs/soap_apis/utility/currency/Display_Currency

        Args:
            amount:      Positive amount in the source currency.
            source:      ISO 4217 code, e.g. "USD".
            destination: ISO 4217 code, e.g. "EUR".

        Raises:
            ConfigurationError: Amount or currency codes missing / invalid.
        """
        try:
            value = Decimal(str(amount))
        except InvalidOperation as exc:
            raise ConfigurationError(f"Invalid amount: {amount!r}") from exc
        if not value.is_finite() or value <= 0:
            raise ConfigurationError(f"Amount must be positive, got {value}")
        if not source or not destination:
            raise ConfigurationError("Missing currency. Set it in convert(amount, source, destination)")

        source, destination = source.upper(), destination.upper()
        body = templates.currency_body(str(value), source, destination)
        xml = self._dispatcher.call(ActionsRQ.CURRENCY, body)
        result = parse_currency(xml, value, source, destination)
        logger.debug("Currency %s %s → %s at %s", value, source, destination, result.rate)
        return result
