# heldcli/lib/tracker.py
# Store-based primitive (no Core dependency).
# store shape: entries[request] = monotonic start time
#
# Keys are request instances (LookupRequest hashes by identity), so repeated
# lookups of the same identifier never share an entry.

from __future__ import annotations

import threading
import time


class TrackerError(KeyError):
    pass


class RequestTracker:
    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    def record(self, request) -> None:
        with self._lock:
            self._entries[request] = self._clock()

    def consume(self, request) -> float:
        """Remove the entry for ``request`` and return elapsed seconds.

        Every record() must be paired with exactly one consume(); anything
        else is a programming error and raises TrackerError.
        """
        with self._lock:
            try:
                started = self._entries.pop(request)
            except KeyError:
                raise TrackerError(f"request not tracked: {request!r}") from None
            return max(0.0, self._clock() - started)

    def pending(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, request) -> bool:
        with self._lock:
            return request in self._entries
