# heldcli/model/schema.py
#
# HELD client value types.
#
# This file provides:
# - location types and the operator tokens that select them
# - outcome status names
# - request / outcome records passed between core, client and renderer
#
# NOTE:
# Outcome status is a plain string on purpose. A status outside
# KNOWN_STATUSES is still a valid outcome and renders on the unknown path.

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


class LocationType(str, Enum):
    GEODETIC = "geodetic"
    CIVIC = "civic"
    LOCATION_URI = "locationURI"


# operator token -> location type
TYPE_TOKENS = {
    "geo": LocationType.GEODETIC,
    "civ": LocationType.CIVIC,
    "ref": LocationType.LOCATION_URI,
}


# -----------------------------
# outcome status
# -----------------------------

FOUND = "FOUND"
NOT_FOUND = "NOT_FOUND"
ERROR = "ERROR"

KNOWN_STATUSES = (FOUND, NOT_FOUND, ERROR)


_request_seq = itertools.count(1)


@dataclass(eq=False)
class LookupRequest:
    """One submitted lookup.

    Compared and hashed by instance: two requests with the same fields are
    tracked independently. ``seq`` is only for display and logging.
    """

    identifier: str
    location_types: Tuple[LocationType, ...] = ()
    exact: bool = False
    seq: int = field(default_factory=lambda: next(_request_seq))


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    radius: float = 0.0


@dataclass(frozen=True)
class LocationReference:
    uri: str
    expires: Optional[datetime] = None


@dataclass(frozen=True)
class HeldErrorRecord:
    code: str
    message: str = ""


@dataclass
class LookupOutcome:
    status: str
    locations: List[Location] = field(default_factory=list)
    references: List[LocationReference] = field(default_factory=list)
    error: Optional[HeldErrorRecord] = None
    raw_request: Optional[str] = None
    raw_response: Optional[str] = None

    @property
    def is_known(self) -> bool:
        return self.status in KNOWN_STATUSES
