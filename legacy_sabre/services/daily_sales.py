"""
services/daily_sales.py
──────────────────────────────────────────────────────────────────────────────
Daily sales report via DailySalesReportLLSRQ.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from legacy_sabre.config import templates
from legacy_sabre.domain.models import ActionsRQ, DailySalesReport
from legacy_sabre.services.dispatcher import Dispatcher
from legacy_sabre.services.parsers import parse_daily_sales


class DailySales:
    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def report(self, report_date: Optional[date] = None, pcc: Optional[str] = None) -> DailySalesReport:
        """Fetch the sales report of *report_date* (default: today) for a PCC.

        See https://developer.sabre.com/docs/soap_apis/management/accounting/Get_Daily_Sales_Report
        """
        pcc = self._dispatcher.resolve_pcc(pcc, "report")
        report_date = report_date or date.today()
        body = templates.daily_sales_body(pcc, report_date.isoformat())
        xml = self._dispatcher.call(ActionsRQ.DAILY_SALES, body, pcc)
        return parse_daily_sales(xml, report_date, pcc)
