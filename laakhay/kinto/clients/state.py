"""Per-client server state."""

from __future__ import annotations

import time
from dataclasses import dataclass

from ..models import ServerInfo


@dataclass
class ServerState:
    """Cached server info and backoff release time.

    Owned by a single client instance, so independent clients (and tests)
    never share it. The server info cache is dropped whenever the client
    headers change, since the "hello" payload depends on who is asking.

    Attributes:
        server_info: Last fetched root endpoint payload
        backoff_release_time: Epoch seconds until which the server asked
            clients to slow down (advisory)
    """

    server_info: ServerInfo | None = None
    backoff_release_time: float | None = None

    def invalidate(self) -> None:
        self.server_info = None

    def set_backoff(self, release_time: float) -> None:
        # A zero Backoff header ends the throttle window.
        self.backoff_release_time = release_time or None

    @property
    def backoff(self) -> float:
        """Remaining backoff in seconds, 0 when released."""
        if self.backoff_release_time is None:
            return 0
        return max(self.backoff_release_time - time.time(), 0)
