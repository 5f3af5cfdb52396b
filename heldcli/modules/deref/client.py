# modules/deref/client.py
#
# Location reference dereference: plain GET, body printed verbatim.
# The PIDF-LO document is never parsed here.
#
# fetch() does the network part and never raises; report() only prints.
# Callers holding the console lock call fetch() first, report() under the lock.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

ACCEPT = "application/pidf+xml"
SEPARATOR = "-" * 33


@dataclass(frozen=True)
class DerefResult:
    uri: str
    status_code: Optional[int] = None
    body: str = ""
    error: Optional[str] = None


class Dereferencer:
    def __init__(
        self,
        *,
        headers: Optional[Dict[str, str]] = None,
        timeout_s: Optional[float] = 30.0,
        http: httpx.Client | None = None,
        write: Callable[[str], None] = print,
    ):
        self.headers = dict(headers or {})
        self._http = http or httpx.Client(timeout=timeout_s, follow_redirects=True)
        self._write = write

    def fetch(self, uri: str) -> DerefResult:
        headers = dict(self.headers)
        headers["Accept"] = ACCEPT

        try:
            r = self._http.get(uri, headers=headers)
            return DerefResult(uri=uri, status_code=r.status_code, body=r.text)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.info("dereference of %s failed: %s", uri, e)
            return DerefResult(uri=uri, error=str(e))
        except Exception as e:
            logger.exception("dereference of %s raised", uri)
            return DerefResult(uri=uri, error=f"{e.__class__.__name__}: {e}")

    def report(self, result: DerefResult) -> None:
        if result.error is not None:
            self._write(f"Dereference failed for {result.uri}: {result.error}")
            return
        self._write(SEPARATOR)
        self._write(f"Dereference {result.uri}")
        self._write(f"Status: {result.status_code}")
        self._write(result.body)
        self._write(SEPARATOR)

    def dereference(self, uri: str) -> None:
        """GET ``uri`` and print status and body. Never raises."""
        self.report(self.fetch(uri))

    def close(self) -> None:
        self._http.close()
