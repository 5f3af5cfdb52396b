# modules/held/client.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from heldcli.model.schema import LookupOutcome, LookupRequest
from heldcli.modules.held.codec import ACCEPT, CONTENT_TYPE, HeldDecodeError, decode_response, encode_request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeldEndpoint:
    uri: str
    headers: Dict[str, str] = field(default_factory=dict)
    timeout_s: Optional[float] = 10.0


class HeldClientError(RuntimeError):
    pass


class HeldTransportError(HeldClientError):
    pass


class HeldResponseError(HeldClientError):
    pass


class HeldLookupClient:
    """
    HELD lookup over HTTP.

    find_location() returns at once; the POST runs on a daemon thread and the
    callback gets exactly one of on_completed(request, outcome) or
    on_failed(request, error).

    Usage:
        client = HeldLookupClient(HeldEndpoint("https://lis.example/held"))
        client.find_location(LookupRequest("tel:+4312345"), renderer)
    """

    def __init__(self, endpoint: HeldEndpoint, *, http: httpx.Client | None = None):
        if not endpoint.uri:
            raise ValueError("HELD endpoint uri missing/empty")
        self.endpoint = endpoint
        self._http = http or httpx.Client(timeout=endpoint.timeout_s)
        self._closed = threading.Event()

    def find_location(self, request: LookupRequest, callback) -> threading.Thread:
        if self._closed.is_set():
            raise HeldClientError("client closed")
        logger.debug("submit #%s identifier=%s", request.seq, request.identifier)

        t = threading.Thread(
            target=self._worker,
            args=(request, callback),
            name=f"held:{request.seq}",
            daemon=True,
        )
        t.start()
        return t

    def lookup(self, request: LookupRequest) -> LookupOutcome:
        """Blocking lookup; raises HeldClientError on transport/response faults."""
        body = encode_request(request)
        headers = {"Content-Type": CONTENT_TYPE, "Accept": ACCEPT}
        headers.update(self.endpoint.headers)

        try:
            r = self._http.post(self.endpoint.uri, content=body.encode("utf-8"), headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise HeldTransportError(f"request failed: {e}") from e

        text = r.text
        try:
            outcome = decode_response(text)
        except HeldDecodeError as e:
            if not r.is_success:
                raise HeldTransportError(f"HTTP {r.status_code} :: {text}") from e
            raise HeldResponseError(str(e)) from e

        outcome.raw_request = body
        outcome.raw_response = text
        return outcome

    def _worker(self, request: LookupRequest, callback) -> None:
        try:
            outcome = self.lookup(request)
        except Exception as e:
            if not self._closed.is_set():
                logger.info("lookup #%s failed: %s", request.seq, e)
            self._deliver(callback.on_failed, request, e)
            return
        self._deliver(callback.on_completed, request, outcome)

    @staticmethod
    def _deliver(fn, request, payload) -> None:
        # callback faults must not turn into a second callback
        try:
            fn(request, payload)
        except Exception:
            logger.exception("callback for #%s raised", request.seq)

    def close(self) -> None:
        self._closed.set()
        self._http.close()
