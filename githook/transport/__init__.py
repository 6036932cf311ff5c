"""Githook transports — thin adapters delivering request bytes to the core.

Both the HTTP listener and the relay connector hand the raw request body to
a ``RequestHandler`` and send back whatever bytes it returns.  Neither knows
anything about webhooks or jobs.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RequestHandler(Protocol):
    """Anything that turns one request body into one response body.

    ``githook.core.coordinator.DispatchCoordinator`` is the implementation
    used by the daemon.
    """

    def handle(self, request: bytes) -> bytes:
        """Process *request* synchronously and return the response."""
        ...
