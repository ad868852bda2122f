"""Batch recording client."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ..core.exceptions import BatchError
from ..models import AggregateResult, SubResponse, WireRequest, WireResponse
from .base import BaseClient

# Returned to operations run inside a batch; nothing was sent yet.
BATCH_PLACEHOLDER = (
    "This result is generated from within a batch operation and should not be consumed."
)


class RecordingClient(BaseClient):
    """Client that appends requests to ``requests`` instead of sending them.

    Buckets and collections obtained from it record into the same list, in
    call order. It is single use and not reentrant: ``batch()`` and every
    operation that needs a server answer raise ``BatchError``.
    """

    is_batch = True

    def __init__(
        self,
        remote: str,
        *,
        safe: bool = False,
        retry: int = 0,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(remote, safe=safe, retry=retry, headers=headers)
        self.requests: list[WireRequest] = []

    async def execute(
        self,
        request: WireRequest,
        *,
        raw: bool = False,
        retry: int | None = None,
    ) -> Any:
        self.requests.append(request)
        if raw:
            return WireResponse(status=0, body=BATCH_PLACEHOLDER)
        return BATCH_PLACEHOLDER

    async def fetch_url(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int = 0,
    ) -> WireResponse:
        raise BatchError(f"Can't follow {url} within a batch operation.")

    async def batch(
        self,
        fn: Callable[[Any], Any],
        *,
        bucket: str | None = None,
        collection: str | None = None,
        headers: Mapping[str, str] | None = None,
        safe: bool | None = None,
        retry: int | None = None,
        aggregate: bool = False,
    ) -> list[SubResponse] | AggregateResult:
        raise BatchError("Can't use batch within a batch!")
