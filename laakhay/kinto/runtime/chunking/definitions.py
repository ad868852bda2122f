"""Chunking metadata definitions and policy structures.

This module defines the data structures used to describe how a list of
recorded requests is split into outer batch calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...models import ServerSettings, SubResponse, WireRequest


@dataclass(frozen=True)
class ChunkPolicy:
    """Chunking policy for the batch endpoint.

    Attributes:
        max_requests: Maximum number of sub-requests per outer call
            (None = no limit, everything goes in a single call)
    """

    max_requests: int | None = None

    def __post_init__(self) -> None:
        """Validate chunk policy configuration."""
        if self.max_requests is not None and self.max_requests <= 0:
            raise ValueError("ChunkPolicy max_requests must be positive")

    @classmethod
    def from_settings(cls, settings: ServerSettings | dict[str, Any] | None) -> ChunkPolicy:
        """Build the policy from the server's advertised settings.

        An absent or non-positive ``batch_max_requests`` means "no limit".
        """
        if settings is None:
            return cls()
        if isinstance(settings, ServerSettings):
            limit = settings.batch_max_requests
        else:
            limit = settings.get("batch_max_requests")
        if not limit or limit <= 0:
            return cls()
        return cls(max_requests=limit)


@dataclass(frozen=True)
class ChunkPlan:
    """Plan for a single chunk.

    Attributes:
        requests: Contiguous slice of the recorded requests
        chunk_index: Zero-based index of this chunk in the overall plan
        offset: Position of the first request in the original list
    """

    requests: tuple[WireRequest, ...]
    chunk_index: int = 0
    offset: int = 0

    @property
    def size(self) -> int:
        return len(self.requests)


@dataclass
class ChunkResult:
    """Result of chunked execution.

    Attributes:
        responses: Flattened sub-responses, in original request order
        chunks_used: Number of outer calls issued
        total_requests: Number of sub-requests sent
    """

    responses: list[SubResponse] = field(default_factory=list)
    chunks_used: int = 0
    total_requests: int = 0
