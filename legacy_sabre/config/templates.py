"""
config/templates.py
──────────────────────────────────────────────────────────────────────────────
All SOAP/XML template strings in one place.

Why centralise templates?
  • Easy to diff and review wire-format changes in version control
  • Bump a message version without touching service logic

Every request is ENVELOPE_TEMPLATE wrapped around one payload template.
The security block is either a UsernameToken (SessionCreateRQ /
TokenCreateRQ) or the BinarySecurityToken obtained from them.

All interpolated values are XML-escaped by the build_* helpers.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from xml.sax.saxutils import escape, quoteattr

from legacy_sabre.domain.models import Credentials, NavigationAction

# ── Envelope ───────────────────────────────────────────────────────────────────
ENVELOPE_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<soap-env:Envelope xmlns:soap-env="http://schemas.xmlsoap.org/soap/envelope/">
<soap-env:Header>
<eb:MessageHeader soap-env:mustUnderstand="1" eb:version="1.0" \
xmlns:eb="http://www.ebxml.org/namespaces/messageHeader">
<eb:From><eb:PartyId type="urn:x12.org:IO5:01">{from_party}</eb:PartyId></eb:From>
<eb:To><eb:PartyId type="urn:x12.org:IO5:01">{to_party}</eb:PartyId></eb:To>
<eb:CPAId>{pcc}</eb:CPAId>
<eb:ConversationId>{conversation_id}</eb:ConversationId>
<eb:Service eb:type="OTA">{action}</eb:Service>
<eb:Action>{action}</eb:Action>
<eb:MessageData>
<eb:MessageId>mid:{message_id}</eb:MessageId>
<eb:Timestamp>{timestamp}</eb:Timestamp>
</eb:MessageData>
</eb:MessageHeader>
<wsse:Security xmlns:wsse="http://schemas.xmlsoap.org/ws/2002/12/secext" \
xmlns:wsu="http://schemas.xmlsoap.org/ws/2002/12/utility">
{security}
</wsse:Security>
</soap-env:Header>
<soap-env:Body>
{body}
</soap-env:Body>
</soap-env:Envelope>"""

BINARY_TOKEN_TEMPLATE = (
    '<wsse:BinarySecurityToken valueType="String" '
    'EncodingType="wsse:Base64Binary">{token}</wsse:BinarySecurityToken>'
)

USERNAME_TOKEN_TEMPLATE = """\
<wsse:UsernameToken>
<wsse:Username>{username}</wsse:Username>
<wsse:Password>{password}</wsse:Password>
<Organization>{organization}</Organization>
<Domain>{domain}</Domain>
</wsse:UsernameToken>"""

# ── Payloads ───────────────────────────────────────────────────────────────────
_SABRE_XML_NS = "http://webservices.sabre.com/sabreXML/2011/10"

SESSION_CREATE_BODY = """\
<SessionCreateRQ returnContextID="true">
<POS><Source PseudoCityCode={pcc}/></POS>
</SessionCreateRQ>"""

SESSION_CLOSE_BODY = """\
<SessionCloseRQ>
<POS><Source PseudoCityCode={pcc}/></POS>
</SessionCloseRQ>"""

TOKEN_CREATE_BODY = '<TokenCreateRQ Version="1.0.0"/>'

QUEUE_COUNT_BODY = f"""\
<QueueCountRQ Version="2.2.1" xmlns="{_SABRE_XML_NS}">
<QueueInfo><QueueIdentifier PseudoCityCode={{pcc}}/></QueueInfo>
</QueueCountRQ>"""

QUEUE_ACCESS_BODY = f"""\
<QueueAccessRQ Version="2.1.1" xmlns="{_SABRE_XML_NS}">
{{identifier}}
</QueueAccessRQ>"""

QUEUE_IDENTIFIER = "<QueueIdentifier Number={number} PseudoCityCode={pcc}>{list}</QueueIdentifier>"
QUEUE_LIST_IND = '<List Ind="true"/>'

QUEUE_NAVIGATION_BODY = f"""\
<QueueAccessRQ Version="2.1.1" xmlns="{_SABRE_XML_NS}">
<Navigation Action={{action}}/>
</QueueAccessRQ>"""

QUEUE_PLACE_BODY = f"""\
<QueuePlaceRQ Version="2.0.4" xmlns="{_SABRE_XML_NS}">
<QueueInfo><QueueIdentifier Number={{number}} PseudoCityCode={{pcc}}/>{{unique_id}}</QueueInfo>
</QueuePlaceRQ>"""

QUEUE_PLACE_UNIQUE_ID = "<UniqueID ID={booking_id}/>"

CURRENCY_BODY = f"""\
<DisplayCurrencyRQ Version="2.1.1" xmlns="{_SABRE_XML_NS}">
<Source CurrencyCode={{source}}/>
<Destination CurrencyCode={{destination}}/>
<Amount>{{amount}}</Amount>
</DisplayCurrencyRQ>"""

DAILY_SALES_BODY = f"""\
<DailySalesReportRQ Version="2.0.0" xmlns="{_SABRE_XML_NS}">
<SalesReport PseudoCityCode={{pcc}} StartDate={{start_date}}/>
</DailySalesReportRQ>"""


# ── Builders ───────────────────────────────────────────────────────────────────

def _envelope(
    *,
    action: str,
    body: str,
    conversation_id: str,
    security: str,
    pcc: str,
    from_party: str,
    to_party: str,
) -> str:
    return ENVELOPE_TEMPLATE.format(
        from_party=escape(from_party),
        to_party=escape(to_party),
        pcc=escape(pcc),
        conversation_id=escape(conversation_id),
        action=escape(action),
        message_id=uuid.uuid4(),
        timestamp=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        security=security,
        body=body,
    )


def build_request(
    *,
    action: str,
    body: str,
    conversation_id: str,
    authorization: str,
    pcc: str = "",
    from_party: str = "legacy-sabre",
    to_party: str = "webservices.sabre.com",
) -> str:
    """Wrap *body* in an envelope authenticated by a BinarySecurityToken.

    Args:
        action:          ActionsRQ value for the ebXML Service / Action.
        body:            Already-rendered payload XML.
        conversation_id: Conversation id of the current session.
        authorization:   Bearer token from SessionCreateRQ / TokenCreateRQ.
        pcc:             Optional CPAId.

    Returns:
        Complete SOAP envelope string.
    """
    return _envelope(
        action=action,
        body=body,
        conversation_id=conversation_id,
        security=BINARY_TOKEN_TEMPLATE.format(token=escape(authorization)),
        pcc=pcc,
        from_party=from_party,
        to_party=to_party,
    )


def build_session_request(
    *,
    action: str,
    body: str,
    conversation_id: str,
    credentials: Credentials,
    from_party: str = "legacy-sabre",
    to_party: str = "webservices.sabre.com",
) -> str:
    """Wrap *body* in an envelope authenticated by a UsernameToken."""
    security = USERNAME_TOKEN_TEMPLATE.format(
        username=escape(credentials.username),
        password=escape(credentials.password),
        organization=escape(credentials.organization),
        domain=escape(credentials.domain),
    )
    return _envelope(
        action=action,
        body=body,
        conversation_id=conversation_id,
        security=security,
        pcc=credentials.organization,
        from_party=from_party,
        to_party=to_party,
    )


def session_create_body(pcc: str) -> str:
    return SESSION_CREATE_BODY.format(pcc=quoteattr(pcc))


def session_close_body(pcc: str) -> str:
    return SESSION_CLOSE_BODY.format(pcc=quoteattr(pcc))


def queue_count_body(pcc: str) -> str:
    return QUEUE_COUNT_BODY.format(pcc=quoteattr(pcc))


def queue_access_body(number: str, pcc: str, list_only: bool = False) -> str:
    identifier = QUEUE_IDENTIFIER.format(
        number=quoteattr(number),
        pcc=quoteattr(pcc),
        list=QUEUE_LIST_IND if list_only else "",
    )
    return QUEUE_ACCESS_BODY.format(identifier=identifier)


def queue_navigation_body(action: NavigationAction) -> str:
    return QUEUE_NAVIGATION_BODY.format(action=quoteattr(action.value))


def queue_place_body(number: str, pcc: str, booking_id: str | None = None) -> str:
    unique_id = QUEUE_PLACE_UNIQUE_ID.format(booking_id=quoteattr(booking_id)) if booking_id else ""
    return QUEUE_PLACE_BODY.format(
        number=quoteattr(number), pcc=quoteattr(pcc), unique_id=unique_id
    )


def currency_body(amount: str, source: str, destination: str) -> str:
    return CURRENCY_BODY.format(
        amount=escape(amount), source=quoteattr(source), destination=quoteattr(destination)
    )


def daily_sales_body(pcc: str, start_date: str) -> str:
    return DAILY_SALES_BODY.format(pcc=quoteattr(pcc), start_date=quoteattr(start_date))
