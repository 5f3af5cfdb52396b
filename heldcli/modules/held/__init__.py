from heldcli.modules.held.client import (
    HeldClientError,
    HeldEndpoint,
    HeldLookupClient,
    HeldResponseError,
    HeldTransportError,
)

__all__ = [
    "HeldClientError",
    "HeldEndpoint",
    "HeldLookupClient",
    "HeldResponseError",
    "HeldTransportError",
]
