# modules/held/codec.py
#
# Minimal HELD (RFC 5985) XML codec.
#
# Request:  locationRequest [locationType exact=..] device/uri
# Response: locationResponse -> FOUND
#           error            -> NOT_FOUND (locationUnknown, notLocatable) | ERROR
#           anything else    -> status = root element local name

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Iterable, List, Optional

from heldcli.model.schema import (
    ERROR,
    FOUND,
    NOT_FOUND,
    HeldErrorRecord,
    Location,
    LocationReference,
    LookupOutcome,
    LookupRequest,
)

NS_HELD = "urn:ietf:params:xml:ns:geopriv:held"
NS_HELD_ID = "urn:ietf:params:xml:ns:geopriv:held:id"

CONTENT_TYPE = "application/held+xml;charset=utf-8"
ACCEPT = "application/held+xml"

NOT_FOUND_CODES = ("locationUnknown", "notLocatable")

# PIDF-LO shapes carrying a gml:pos
_SHAPES = ("Point", "Circle")

_FRACTION = re.compile(r"^(.*T\d{2}:\d{2}:\d{2})\.(\d+)(.*)$")


class HeldDecodeError(ValueError):
    pass


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag


def _children(el, name: str) -> Iterable:
    return (c for c in el if _local(c.tag) == name)


def _first(el, name: str):
    return next(iter(_children(el, name)), None)


def encode_request(request: LookupRequest) -> str:
    root = ET.Element("locationRequest", {"xmlns": NS_HELD})
    if request.location_types or request.exact:
        types = " ".join(t.value for t in request.location_types) or "any"
        lt = ET.SubElement(root, "locationType", {"exact": "true" if request.exact else "false"})
        lt.text = types
    device = ET.SubElement(root, "device", {"xmlns": NS_HELD_ID})
    uri = ET.SubElement(device, "uri")
    uri.text = request.identifier
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding="unicode")


def parse_expires(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    s = raw.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    # fromisoformat wants 3 or 6 fraction digits on older interpreters
    m = _FRACTION.match(s)
    if m:
        s = f"{m.group(1)}.{(m.group(2) + '000000')[:6]}{m.group(3)}"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def _parse_pos(text: Optional[str]) -> tuple:
    parts = (text or "").split()
    if len(parts) < 2:
        raise HeldDecodeError(f"Invalid gml:pos: {text!r}")
    try:
        return float(parts[0]), float(parts[1])
    except ValueError:
        raise HeldDecodeError(f"Invalid gml:pos: {text!r}") from None


def _decode_locations(root) -> List[Location]:
    out: List[Location] = []
    for el in root.iter():
        if _local(el.tag) not in _SHAPES:
            continue
        pos = _first(el, "pos")
        if pos is None:
            continue
        lat, lon = _parse_pos(pos.text)
        radius = 0.0
        r = _first(el, "radius")
        if r is not None and (r.text or "").strip():
            try:
                radius = float(r.text)
            except ValueError:
                raise HeldDecodeError(f"Invalid radius: {r.text!r}") from None
        out.append(Location(latitude=lat, longitude=lon, radius=radius))
    return out


def _decode_references(root) -> List[LocationReference]:
    out: List[LocationReference] = []
    for uri_set in _children(root, "locationUriSet"):
        expires = parse_expires(uri_set.get("expires"))
        for u in _children(uri_set, "locationURI"):
            text = (u.text or "").strip()
            if text:
                out.append(LocationReference(uri=text, expires=expires))
    return out


def decode_response(body: str) -> LookupOutcome:
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise HeldDecodeError(f"Malformed HELD response: {e}") from e

    name = _local(root.tag)

    if name == "locationResponse":
        return LookupOutcome(
            status=FOUND,
            locations=_decode_locations(root),
            references=_decode_references(root),
        )

    if name == "error":
        code = root.get("code") or "unknown"
        msg_el = _first(root, "message")
        message = (msg_el.text or "").strip() if msg_el is not None else ""
        status = NOT_FOUND if code in NOT_FOUND_CODES else ERROR
        return LookupOutcome(status=status, error=HeldErrorRecord(code=code, message=message))

    return LookupOutcome(status=name)
