"""
tests/unit/test_parsers.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for the response interpreters in services/parsers.py.

Inputs are body fragments exactly as the Dispatcher returns them.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from legacy_sabre.domain.exceptions import ErrorInResponse, UnexpectedResponse
from legacy_sabre.domain.models import ActionsRS
from legacy_sabre.services.parsers import (
    find_booking_id,
    format_queue_response,
    parse_body,
    parse_currency,
    parse_daily_sales,
    parse_paragraph_to_warnings,
    parse_queue_access,
    parse_queue_count,
    parse_queue_list,
    parse_queue_place,
    parse_session_status,
)

NS = 'xmlns="http://webservices.sabre.com/sabreXML/2011/10" xmlns:stl="http://services.sabre.com/STL/v01"'
COMPLETE = '<stl:ApplicationResults status="Complete"><stl:Success timeStamp="2025-03-14T10:00:00"/></stl:ApplicationResults>'


class TestParseBody:
    def test_empty_body_raises(self):
        with pytest.raises(UnexpectedResponse, match="missing QueueCountRS"):
            parse_body("   ", ActionsRS.QUEUE_COUNT)

    def test_wrong_root_raises(self):
        with pytest.raises(UnexpectedResponse, match="missing QueueCountRS"):
            parse_body("<OtherRS/>", ActionsRS.QUEUE_COUNT)

    def test_malformed_xml_raises(self):
        with pytest.raises(UnexpectedResponse, match="Unparseable"):
            parse_body("<QueueCountRS>", ActionsRS.QUEUE_COUNT)

    def test_prefixed_root_is_found(self):
        node = parse_body('<ns1:QueueCountRS xmlns:ns1="urn:x" a="1"/>', ActionsRS.QUEUE_COUNT)
        assert node["@a"] == "1"

    def test_incomplete_application_results_raise(self):
        xml = (
            f"<QueueCountRS {NS}>"
            '<stl:ApplicationResults status="NotProcessed">'
            "<stl:Warning><stl:SystemSpecificResults><stl:Message>QUEUE EMPTY</stl:Message>"
            "</stl:SystemSpecificResults></stl:Warning>"
            "</stl:ApplicationResults></QueueCountRS>"
        )
        with pytest.raises(ErrorInResponse, match="QUEUE EMPTY") as info:
            parse_body(xml, ActionsRS.QUEUE_COUNT)
        assert not isinstance(info.value, UnexpectedResponse)

    def test_shape_failures_are_still_error_in_response(self):
        with pytest.raises(ErrorInResponse) as info:
            parse_body("<OtherRS/>", ActionsRS.QUEUE_COUNT)
        assert info.value.name == "error_in_response"


class TestSessionStatus:
    def test_session_create(self):
        xml = '<SessionCreateRS status="Approved"><ConversationId>c-9</ConversationId></SessionCreateRS>'
        status = parse_session_status(xml, ActionsRS.SESSION_CREATE, "c-1", True)
        assert status.status == "Approved"
        assert status.conversation_id == "c-9"
        assert status.authenticated is True

    def test_token_create_success_child(self):
        status = parse_session_status(
            "<TokenCreateRS><Success/></TokenCreateRS>", ActionsRS.TOKEN_CREATE, "c-1", True
        )
        assert status.status == "Success"
        assert status.conversation_id == "c-1"


class TestQueueCount:
    def test_parses_each_queue(self):
        xml = (
            f"<QueueCountRS {NS}>{COMPLETE}"
            "<QueueInfo>"
            '<QueueIdentifier Number="0" Count="3" PseudoCityCode="AB12"/>'
            '<QueueIdentifier Number="50" Count="12" PseudoCityCode="AB12"/>'
            "</QueueInfo></QueueCountRS>"
        )
        result = parse_queue_count(xml, "AB12")
        assert [(q.number, q.count) for q in result.queues] == [("0", 3), ("50", 12)]
        assert result.total == 15
        assert result.to_dict()["total"] == 15

    def test_single_queue_is_a_list(self):
        xml = f'<QueueCountRS {NS}><QueueInfo><QueueIdentifier Number="7" Count="1"/></QueueInfo></QueueCountRS>'
        assert len(parse_queue_count(xml, "AB12").queues) == 1

    def test_no_queues(self):
        assert parse_queue_count(f"<QueueCountRS {NS}>{COMPLETE}</QueueCountRS>", "AB12").total == 0

    def test_non_numeric_count_raises(self):
        xml = f'<QueueCountRS {NS}><QueueInfo><QueueIdentifier Number="50" Count="n/a"/></QueueInfo></QueueCountRS>'
        with pytest.raises(UnexpectedResponse, match="Invalid count"):
            parse_queue_count(xml, "AB12")

    def test_missing_count_is_zero(self):
        xml = f'<QueueCountRS {NS}><QueueInfo><QueueIdentifier Number="50"/></QueueInfo></QueueCountRS>'
        assert parse_queue_count(xml, "AB12").queues[0].count == 0


class TestQueueAccess:
    XML = (
        f"<QueueAccessRS {NS}>{COMPLETE}"
        '<Line Number="1"><UniqueID ID="ABCDEF"/></Line>'
        "<Paragraph>"
        "<Text>SCHEDULE CHANGE SEG 1</Text>"
        "<Text>  </Text>"
        "<Text>TICKETING TIME LIMIT</Text>"
        "<Text>SCHEDULE CHANGE SEG 1</Text>"
        "</Paragraph></QueueAccessRS>"
    )

    def test_booking_id_and_texts(self):
        booking_id, texts = parse_queue_access(self.XML)
        assert booking_id == "ABCDEF"
        assert texts[0] == "SCHEDULE CHANGE SEG 1"

    def test_format_queue_response(self):
        booking_id, texts = parse_queue_access(self.XML)
        resp = format_queue_response(booking_id, texts, "50")
        assert resp.booking_id == "ABCDEF"
        assert [n.message for n in resp.notifications] == [
            "SCHEDULE CHANGE SEG 1",
            "TICKETING TIME LIMIT",
        ]
        assert all(n.queue == "50" for n in resp.notifications)

    def test_empty_queue_item(self):
        booking_id, texts = parse_queue_access(f"<QueueAccessRS {NS}>{COMPLETE}</QueueAccessRS>")
        assert booking_id is None
        assert texts == []

    def test_list(self):
        xml = (
            f"<QueueAccessRS {NS}>"
            '<Line Number="1"><UniqueID ID="AAAAAA"/></Line>'
            '<Line Number="2"><UniqueID ID="BBBBBB"/></Line>'
            "</QueueAccessRS>"
        )
        assert parse_queue_list(xml, "50").booking_ids == ["AAAAAA", "BBBBBB"]


class TestQueuePlace:
    def test_texts(self):
        xml = f"<QueuePlaceRS {NS}>{COMPLETE}<Text>OK 0845 PLACED ON QUEUE QWERTY</Text></QueuePlaceRS>"
        assert parse_queue_place(xml) == ["OK 0845 PLACED ON QUEUE QWERTY"]

    def test_falls_back_to_application_message(self):
        xml = (
            f"<QueuePlaceRS {NS}>"
            '<stl:ApplicationResults status="Complete"><stl:Success>'
            "<stl:SystemSpecificResults><stl:Message>OK ZXCVBN</stl:Message>"
            "</stl:SystemSpecificResults></stl:Success></stl:ApplicationResults>"
            "</QueuePlaceRS>"
        )
        assert parse_queue_place(xml) == ["OK ZXCVBN"]

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("OK 0845 PLACED ON QUEUE QWERTY", "QWERTY"),
            ("QWERTY ", "QWERTY"),
            ("NO LOCATOR", None),
            ("", None),
            (None, None),
        ],
    )
    def test_find_booking_id(self, text, expected):
        assert find_booking_id(text) == expected

    def test_warnings_drop_blanks_and_duplicates(self):
        assert parse_paragraph_to_warnings(["a", " ", "b", "a", ""]) == ["a", "b"]


class TestCurrency:
    def test_rate_and_conversion(self):
        xml = f'<DisplayCurrencyRS {NS}>{COMPLETE}<Rate Amount="0.9215" CurrencyCode="EUR"/></DisplayCurrencyRS>'
        result = parse_currency(xml, Decimal("100"), "USD", "EUR")
        assert result.rate == Decimal("0.9215")
        assert result.converted == Decimal("92.15")
        assert result.destination == "EUR"

    def test_missing_rate_raises(self):
        with pytest.raises(UnexpectedResponse, match="no Rate"):
            parse_currency(f"<DisplayCurrencyRS {NS}/>", Decimal("1"), "USD", "EUR")

    def test_invalid_rate_raises(self):
        xml = f'<DisplayCurrencyRS {NS}><Rate Amount="n/a"/></DisplayCurrencyRS>'
        with pytest.raises(UnexpectedResponse, match="Invalid rate"):
            parse_currency(xml, Decimal("1"), "USD", "EUR")


class TestDailySales:
    def test_items(self):
        xml = (
            f"<DailySalesReportRS {NS}>{COMPLETE}<SalesReport>"
            '<Item DocumentNumber="0012345678901" RecordLocator="ABCDEF" Amount="250.00" CurrencyCode="USD" Type="TKT"/>'
            '<Item DocumentNumber="0012345678902" Amount="-20.50" CurrencyCode="USD" Type="RFND"/>'
            "</SalesReport></DailySalesReportRS>"
        )
        report = parse_daily_sales(xml, date(2025, 3, 14), "AB12")
        assert len(report.items) == 2
        assert report.items[0].record_locator == "ABCDEF"
        assert report.items[1].record_locator is None
        assert report.total == Decimal("229.50")
        assert report.to_dict()["date"] == "2025-03-14"

    def test_empty_report(self):
        report = parse_daily_sales(f"<DailySalesReportRS {NS}/>", date(2025, 3, 14), "AB12")
        assert report.items == []
        assert report.total == Decimal("0")
