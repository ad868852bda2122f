"""Chunk planning logic for batch requests.

This module provides the ChunkPlanner class that splits a recorded request
list into contiguous, order-preserving chunks bounded by the server limit.
"""

from __future__ import annotations

from collections.abc import Sequence

from ...core.utils import partition
from ...models import WireRequest
from .definitions import ChunkPlan, ChunkPolicy
from .telemetry import log_chunk_plan


class ChunkPlanner:
    """Plans outer batch calls for a list of sub-requests."""

    def __init__(self, policy: ChunkPolicy) -> None:
        """Initialize chunk planner.

        Args:
            policy: Chunking policy derived from server settings
        """
        self._policy = policy

    def plan(self, requests: Sequence[WireRequest]) -> list[ChunkPlan]:
        """Plan chunks for a request list.

        Args:
            requests: Recorded requests, in the order they were issued

        Returns:
            List of chunk plans; empty when there is nothing to send
        """
        plans: list[ChunkPlan] = []
        offset = 0
        for index, chunk in enumerate(partition(list(requests), self._policy.max_requests)):
            plans.append(ChunkPlan(requests=tuple(chunk), chunk_index=index, offset=offset))
            offset += len(chunk)

        log_chunk_plan(
            total_chunks=len(plans),
            total_requests=len(requests),
            max_requests=self._policy.max_requests,
        )
        return plans
