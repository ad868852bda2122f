"""Batch orchestration.

Architecture:
    A batch is built in two phases. First, the caller's operations run
    against a ``RecordingClient`` which appends every produced
    ``WireRequest`` to an ordered list instead of sending it. Then the
    orchestrator sends the list through the live client:

    1. resolve the chunk limit from the cached ``batch_max_requests`` setting
    2. plan contiguous chunks no larger than the limit
    3. send one ``POST /batch`` per chunk, strictly sequentially
    4. flatten the sub-responses back into the original request order
    5. optionally classify them with the AggregateClassifier

Design Decisions:
    - No partial-commit recovery: a failing outer call aborts the operation
    - Sub-request failures (404, 412, 5xx...) are data, not exceptions
    - Zero recorded requests means zero network calls

See Also:
    - ChunkPlanner, ChunkExecutor: Chunking primitives
    - AggregateClassifier: Outcome classification
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from ..core import endpoints
from ..core.enums import HttpMethod
from ..models import (
    AggregateResult,
    BatchDefaults,
    BatchEnvelope,
    SubResponse,
    WireRequest,
)
from .aggregate import AggregateClassifier
from .chunking import ChunkExecutor, ChunkPlan, ChunkPlanner, ChunkPolicy

if TYPE_CHECKING:
    from ..clients.client import KintoClient


class BatchOrchestrator:
    """Sends recorded requests as chunked batch calls."""

    def __init__(self, client: KintoClient) -> None:
        self._client = client
        self._executor = ChunkExecutor()

    async def run(
        self,
        requests: Sequence[WireRequest],
        *,
        headers: Mapping[str, str] | None = None,
        retry: int = 0,
        aggregate: bool = False,
    ) -> list[SubResponse] | AggregateResult:
        """Send ``requests`` and return their sub-responses in order.

        Args:
            requests: Recorded requests
            headers: Headers used for the outer calls and as batch defaults
            retry: Retry budget for each outer call
            aggregate: Return an AggregateResult instead of the raw list

        Raises:
            ServerResponseError: If an outer batch call fails
        """
        requests = list(requests)
        headers = dict(headers or {})
        responses = await self._send(requests, headers=headers, retry=retry)
        if aggregate:
            return AggregateClassifier.aggregate(responses, requests)
        return responses

    async def _send(
        self,
        requests: list[WireRequest],
        *,
        headers: dict[str, str],
        retry: int,
    ) -> list[SubResponse]:
        if not requests:
            return []

        settings = await self._client.fetch_server_settings(retry=retry)
        plans = ChunkPlanner(ChunkPolicy.from_settings(settings)).plan(requests)

        async def fetch_chunk(plan: ChunkPlan) -> list[SubResponse]:
            envelope = BatchEnvelope(
                defaults=BatchDefaults(headers=headers),
                requests=list(plan.requests),
            )
            body = await self._client.execute(
                WireRequest(
                    method=HttpMethod.POST,
                    path=endpoints.batch(),
                    headers=headers,
                    body=envelope.to_body(),
                ),
                retry=retry,
            )
            raw = body.get("responses", []) if isinstance(body, dict) else []
            return [SubResponse.model_validate(item) for item in raw]

        result = await self._executor.execute(plans=plans, fetch_chunk=fetch_chunk)
        return result.responses
