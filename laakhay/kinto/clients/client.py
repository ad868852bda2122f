"""Live HTTP client.

Example:
    >>> async def publish(batch):
    ...     for n in range(3):
    ...         await batch.create_record({"n": n})
    >>> async with KintoClient("https://kinto.example.com/v1", retry=2) as client:
    ...     coll = client.bucket("blog").collection("articles")
    ...     await coll.create_record({"title": "First article"})
    ...     result = await client.batch(
    ...         publish,
    ...         bucket="blog",
    ...         collection="articles",
    ...         aggregate=True,
    ...     )
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from ..core.exceptions import BatchError, ValidationError
from ..models import AggregateResult, SubResponse, WireRequest, WireResponse
from ..runtime.batch import BatchOrchestrator
from ..runtime.rest import HTTPClient
from .base import BaseClient
from .recording import RecordingClient

logger = logging.getLogger(__name__)


def _is_coroutine_function(fn: Any) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    )


class KintoClient(BaseClient):
    """Async client for a Kinto protocol v1 server.

    Args:
        remote: Server URL ending with the protocol version (``.../v1``)
        safe: Send concurrency control headers on writes by default
        retry: Default Retry-After retry budget per call
        headers: Headers sent with every request
        timeout: Transport timeout in seconds
        http: Transport to use instead of a fresh ``HTTPClient``
    """

    def __init__(
        self,
        remote: str,
        *,
        safe: bool = False,
        retry: int = 0,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        http: HTTPClient | None = None,
    ) -> None:
        super().__init__(remote, safe=safe, retry=retry, headers=headers, timeout=timeout)
        self.http = http or HTTPClient(timeout=self.options.timeout)
        self.http.on("backoff", self.state.set_backoff)

    @property
    def backoff(self) -> float:
        """Remaining server backoff in seconds (advisory, 0 when released)."""
        return self.state.backoff

    def set_headers(self, headers: Mapping[str, str]) -> None:
        """Merge ``headers`` into the client headers and drop cached server info."""
        self.options = self.options.with_headers(headers)
        self.state.invalidate()

    def on(self, event: str, listener: Callable[[Any], None]) -> None:
        """Listen to ``deprecated``, ``backoff`` or ``retry-after`` events."""
        self.http.on(event, listener)

    async def execute(
        self,
        request: WireRequest,
        *,
        raw: bool = False,
        retry: int | None = None,
    ) -> Any:
        response = await self.http.request(
            self.remote + request.path,
            method=request.method,
            headers=request.headers,
            body=request.body,
            retry=self._get_retry(retry),
        )
        return response if raw else response.body

    async def fetch_url(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int = 0,
    ) -> WireResponse:
        return await self.http.request(url, headers=headers, retry=retry)

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
        """Record the operations ``fn`` performs and send them in batch calls.

        ``fn`` is a coroutine function receiving a recording client, or one
        of its buckets or collections when ``bucket`` (and ``collection``)
        are given. Operations are recorded when ``fn`` awaits them.

        Returns:
            Sub-responses in request order, or an ``AggregateResult`` when
            ``aggregate`` is set

        Raises:
            BatchError: If ``fn`` is not a coroutine function, or if it
                lists resources or fetches server info
            ValidationError: If ``collection`` is given without ``bucket``
            ServerResponseError: If an outer batch call fails
        """
        if not _is_coroutine_function(fn):
            raise BatchError("Batch operations must be recorded by a coroutine function.")
        if collection and not bucket:
            raise ValidationError("A bucket is required to batch collection operations.")

        recorder = RecordingClient(
            self.remote,
            safe=self._get_safe(safe),
            retry=self._get_retry(retry),
            headers=self._get_headers(headers),
        )
        target: Any = recorder
        if bucket:
            target = recorder.bucket(bucket)
            if collection:
                target = target.collection(collection)

        await fn(target)

        logger.debug("batch_recorded", extra={"requests": len(recorder.requests)})
        return await BatchOrchestrator(self).run(
            recorder.requests,
            headers=self._get_headers(headers),
            retry=self._get_retry(retry),
            aggregate=aggregate,
        )

    async def close(self) -> None:
        """Close the underlying transport."""
        await self.http.close()

    async def __aenter__(self) -> KintoClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


__all__ = ["KintoClient"]
