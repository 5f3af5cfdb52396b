import os
import sys

import pytest


# Ensure the repository root is on sys.path so tests can import local entrypoints
# like HeldClient without requiring an editable install.
_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from heldcli.core import init_core  # noqa: E402


class FakeLookupClient:
    """Records submissions; the test decides when (and whether) to call back."""

    def __init__(self):
        self.submitted = []
        self.closed = False

    def find_location(self, request, callback):
        self.submitted.append((request, callback))

    def close(self):
        self.closed = True


class FakeDereferencer:
    def __init__(self):
        self.uris = []

    def fetch(self, uri):
        self.uris.append(uri)
        return uri

    def report(self, result):
        print(f"DEREF {result}")

    def dereference(self, uri):
        self.report(self.fetch(uri))

    def close(self):
        pass


@pytest.fixture
def lookup():
    return FakeLookupClient()


@pytest.fixture
def deref():
    return FakeDereferencer()


@pytest.fixture
def core(lookup, deref):
    return init_core(client=lookup, deref=deref)
