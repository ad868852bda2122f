"""Chunk execution logic for sending and flattening batch chunks.

This module provides the ChunkExecutor class that sends chunk plans one at
a time and concatenates their sub-responses in chunk order.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from time import perf_counter

from ...core.exceptions import BatchError
from ...models import SubResponse
from .definitions import ChunkPlan, ChunkResult
from .telemetry import log_chunk_completed, log_chunk_error, log_chunk_execution_complete


class ChunkExecutor:
    """Executes chunk plans strictly sequentially.

    Chunk N+1 is only sent once chunk N has completed, so at most one outer
    batch call is in flight and the flattened order matches the plan order.
    """

    async def execute(
        self,
        *,
        plans: list[ChunkPlan],
        fetch_chunk: Callable[[ChunkPlan], Awaitable[list[SubResponse]]],
    ) -> ChunkResult:
        """Execute chunk plans and flatten their responses.

        Args:
            plans: List of chunk plans to execute
            fetch_chunk: Async function sending one chunk and returning its
                sub-responses

        Returns:
            ChunkResult with responses aligned 1:1 with the planned requests

        Raises:
            BatchError: If a chunk reply does not match its request count
        """
        result = ChunkResult()
        started = perf_counter()

        for plan in plans:
            chunk_start = perf_counter()
            try:
                responses = await fetch_chunk(plan)
            except Exception as e:
                log_chunk_error(
                    chunk_index=plan.chunk_index,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise

            if len(responses) != plan.size:
                raise BatchError(
                    f"Batch chunk {plan.chunk_index} returned {len(responses)} responses "
                    f"for {plan.size} requests."
                )

            result.responses.extend(responses)
            result.chunks_used += 1
            result.total_requests += plan.size

            log_chunk_completed(
                chunk_index=plan.chunk_index,
                requests=plan.size,
                latency_ms=(perf_counter() - chunk_start) * 1000.0,
            )

        log_chunk_execution_complete(
            result=result,
            total_latency_ms=(perf_counter() - started) * 1000.0,
        )
        return result
