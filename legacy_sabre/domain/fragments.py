"""
domain/fragments.py
──────────────────────────────────────────────────────────────────────────────
Marker-delimited substring extraction.

Every structural lookup in the client (SOAP body, fault string, error block,
error message, security token) is a literal open/close marker pair applied to
progressively narrower text.  No XML parsing, no regex: markers are matched
case-sensitively on their exact text.

An empty result means "fragment not present" and is never an error.
"""
from __future__ import annotations

# ── Marker pairs ──────────────────────────────────────────────────────────────

BODY_MARKERS = ("<soap-env:Body>", "</soap-env:Body>")
FAULT_MARKERS = ("<faultstring>", "</faultstring>")
ERROR_MARKERS = ("<stl:Error>", "</stl:Error>")
# Sabre usually emits attributes: <stl:Error type="..." timeStamp="...">
ERROR_ATTR_MARKERS = ("<stl:Error ", "</stl:Error>")
MESSAGE_MARKERS = ("<stl:Message>", "</stl:Message>")
TOKEN_MARKERS = (
    '<wsse:BinarySecurityToken valueType="String" EncodingType="wsse:Base64Binary">',
    "</wsse:BinarySecurityToken>",
)


def get_sub_string(
    source: str,
    open_marker: str,
    close_marker: str,
    include_markers: bool = False,
) -> str:
    """Return the text between the first *open_marker* and the next *close_marker*.

    Args:
        source:          Text to scan.
        open_marker:     Literal opening marker.
        close_marker:    Literal closing marker, searched after the opening one.
        include_markers: Keep both markers in the returned fragment.

    Returns:
        The fragment, or ``""`` if either marker is missing.
    """
    if not source or not open_marker or not close_marker:
        return ""
    start = source.find(open_marker)
    if start == -1:
        return ""
    content_start = start + len(open_marker)
    end = source.find(close_marker, content_start)
    if end == -1:
        return ""
    if include_markers:
        return source[start : end + len(close_marker)]
    return source[content_start:end]


def extract(source: str, markers: tuple[str, str], include_markers: bool = False) -> str:
    """Shorthand for ``get_sub_string`` with a marker pair."""
    return get_sub_string(source, markers[0], markers[1], include_markers)


def extract_first(source: str, *marker_pairs: tuple[str, str]) -> str:
    """Return the first non-empty fragment found with any of *marker_pairs*."""
    for markers in marker_pairs:
        fragment = extract(source, markers)
        if fragment:
            return fragment
    return ""
