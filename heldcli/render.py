# heldcli/render.py
#
# Lookup callback -> console.
#
# Runs on the lookup client's worker thread. Tracker, session.last_reference
# and console writes are serialized through core.exec_lock; verbose
# dereference fetches run between the two locked sections.
#
# Layout:
#   <blank> <blank>
#   =====  Result for <id> (<ms> ms)
#   [verbose] Request / Response raw text, inline dereference (FOUND)
#   -----  body by status
#   =====  prompt

from __future__ import annotations

from heldcli.model.schema import FOUND, NOT_FOUND, Location, LookupOutcome

BANNER = "=" * 33
SEPARATOR = "-" * 33

MAPS_URI = "https://www.google.com/maps/?q={lat},{lon}"


def maps_uri(location: Location) -> str:
    return MAPS_URI.format(lat=location.latitude, lon=location.longitude)


def format_location(location: Location) -> str:
    line = f"lat: {location.latitude}\tlon: {location.longitude}"
    if location.radius != 0.0:
        line += f"\tradius: {location.radius}"
    return line + "\t" + maps_uri(location)


class ResultRenderer:
    def __init__(self, core):
        self.core = core

    # ---- callback contract ----

    def on_completed(self, request, outcome: LookupOutcome) -> None:
        core = self.core
        with core.exec_lock:
            if core.closed:
                return
            elapsed_ms = core.tracker.consume(request) * 1000.0
            verbose = core.state.verbose

        # fetch without exec_lock held
        fetched = []
        if verbose and outcome.status == FOUND:
            fetched = [core.deref.fetch(ref.uri) for ref in outcome.references]

        with core.exec_lock:
            if core.closed:
                return
            self._header(request, elapsed_ms, outcome if verbose else None, fetched)

            if not outcome.is_known:
                core.emit(f"Unknown result status: {outcome.status}")
            elif outcome.status == FOUND:
                self._found(outcome)
            elif outcome.status == NOT_FOUND:
                self._error_record("Not found", outcome)
            else:
                self._error_record("Failure", outcome)

            self._footer()

    def on_failed(self, request, error: BaseException) -> None:
        core = self.core
        with core.exec_lock:
            if core.closed:
                return
            elapsed_ms = core.tracker.consume(request) * 1000.0
            self._header(request, elapsed_ms, None, ())
            core.emit(f"Error occurred: {error}")
            self._footer()

    # ---- parts ----

    def _header(self, request, elapsed_ms, raw, fetched) -> None:
        core = self.core
        core.emit("", "", BANNER)
        core.emit(f"Result for {request.identifier} ({elapsed_ms:.0f} ms)")

        if raw is not None:
            if raw.raw_request:
                core.emit("Request:", raw.raw_request)
            if raw.raw_response:
                core.emit("Response:", raw.raw_response)
        for result in fetched:
            core.deref.report(result)

        core.emit(SEPARATOR)

    def _found(self, outcome: LookupOutcome) -> None:
        core = self.core
        if outcome.references:
            core.emit("Location references:")
            for ref in outcome.references:
                expires = ref.expires.isoformat() if ref.expires else "-"
                core.emit(f"\t{ref.uri} (expires: {expires})")
            core.state.last_reference = outcome.references[-1].uri

        if outcome.locations:
            core.emit("Locations:")
            for loc in outcome.locations:
                core.emit("\t" + format_location(loc))
        elif not outcome.references:
            core.emit("No locations returned")

    def _error_record(self, label: str, outcome: LookupOutcome) -> None:
        err = outcome.error
        self.core.emit(label)
        if err is not None:
            self.core.emit(f"\t{err.code}: {err.message}")

    def _footer(self) -> None:
        self.core.emit(BANNER)
        self.core.prompt()
