# heldcli/topics/lookup.py
#
# held <identifier>   fire-and-forget lookup; result is rendered by the callback
# last                replay the last command line (never stored itself)

from __future__ import annotations

import logging

from heldcli.core import UsageError
from heldcli.model.schema import LookupRequest

logger = logging.getLogger(__name__)


def held_find(core, identifier=None, *_ignored):
    """sys.held.find <identifier>"""
    if not identifier:
        raise UsageError("held <identifier>")

    state = core.state
    request = LookupRequest(
        identifier=identifier,
        location_types=tuple(state.location_types),
        exact=state.exact,
    )

    # record before submit: the callback may fire before find_location returns
    core.tracker.record(request)
    try:
        core.client.find_location(request, core.renderer)
    except Exception:
        core.tracker.consume(request)
        raise

    logger.debug("submitted #%s for %s", request.seq, identifier)
    return None


def last(core, *_ignored):
    """sys.last -> re-execute state.last_command"""
    core.execute(core.state.last_command)
    return None


COMMANDS = {
    "sys.held.find": (held_find, "Execute HELD request for the given identifier", "held <identifier>"),
    "sys.last":      (last,      "Repeat the last command",                       "last"),
}
