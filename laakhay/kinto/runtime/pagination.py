"""Cursor-based pagination over list endpoints.

Architecture:
    The server paginates list responses and signals the next page through
    an opaque ``Next-Page`` URL. The walker issues the first request with the
    query built from the caller's parameters, then either:

    - returns a single page with a cursor whose ``next()`` fetches the
      literal ``Next-Page`` URL (``pages`` unset), or
    - follows ``Next-Page`` links sequentially, concatenating ``data``, until
      ``pages`` pages were read or no next page remains (``pages`` set,
      ``math.inf`` meaning "until exhausted").

Design Decisions:
    - Next-Page URLs are opaque and never rebuilt from filters
    - ETag values are stored unquoted for comparison convenience
    - Exhausted cursors raise instead of returning empty data
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..config import DEFAULT_SORT
from ..core.enums import HttpMethod
from ..core.exceptions import PaginationExhaustedError, ValidationError
from ..core.utils import qsify
from ..models import WireRequest, WireResponse

if TYPE_CHECKING:
    from ..clients.base import BaseClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PaginationCursor(Generic[T]):
    """One (possibly aggregated) page of results.

    Attributes:
        last_modified: Unquoted ETag of the listed collection, if any
        data: Items of this page (or of all followed pages)
        has_next_page: Whether ``next()`` may be called
        total_records: Value of ``Total-Records`` when the server sent it
    """

    last_modified: str | None
    data: list[T]
    has_next_page: bool = False
    total_records: int | None = None
    _fetch_next: Callable[[], Awaitable[PaginationCursor[T]]] | None = field(
        default=None, repr=False, compare=False
    )
    _exhausted_message: str = field(default="Pagination exhausted.", repr=False, compare=False)

    async def next(self) -> PaginationCursor[T]:
        """Fetch the following page.

        Raises:
            PaginationExhaustedError: If there is no next page
        """
        if not self.has_next_page or self._fetch_next is None:
            raise PaginationExhaustedError(self._exhausted_message)
        return await self._fetch_next()


@dataclass(frozen=True)
class ListParams:
    """Query parameters of a paginated list call."""

    sort: str = DEFAULT_SORT
    filters: Mapping[str, Any] = field(default_factory=dict)
    limit: int | None = None
    pages: int | float | None = None
    since: str | None = None
    fields: list[str] | None = None

    def __post_init__(self) -> None:
        if self.since is not None and not isinstance(self.since, str):
            raise ValidationError(
                f"Invalid value for since ({self.since!r}), should be ETag value."
            )
        if self.pages is not None and self.pages <= 0:
            raise ValidationError(f"Invalid value for pages ({self.pages!r}).")

    def querystring(self) -> str:
        query: dict[str, Any] = {
            **dict(self.filters),
            "_sort": self.sort,
            "_limit": self.limit,
            "_since": self.since,
        }
        if self.fields:
            query["_fields"] = list(self.fields)
        return qsify(query)


class PaginationWalker:
    """Walks ``Next-Page`` links for one list call."""

    def __init__(
        self,
        client: BaseClient,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int = 0,
    ) -> None:
        self._client = client
        self._headers = dict(headers or {})
        self._retry = retry

    async def list(self, path: str, params: ListParams | None = None) -> PaginationCursor[Any]:
        """List ``path`` according to ``params``.

        Raises:
            ValidationError: If ``since`` is not a string (before any request)
        """
        params = params or ListParams()
        request = WireRequest(
            method=HttpMethod.GET,
            path=f"{path}?{params.querystring()}",
            headers=self._headers,
        )
        response = await self._client.execute(request, raw=True, retry=self._retry)
        return await self._handle(response, params, [], 0)

    async def _fetch_page(self, url: str) -> WireResponse:
        return await self._client.fetch_url(url, headers=self._headers, retry=self._retry)

    async def _handle(
        self,
        response: WireResponse,
        params: ListParams,
        results: list[Any],
        current: int,
    ) -> PaginationCursor[Any]:
        # Pages are followed iteratively; each one is awaited before the next.
        while True:
            next_page = response.headers.get("Next-Page")
            etag = response.headers.get("ETag")
            total = response.headers.get("Total-Records")
            data = _page_data(response)

            if not params.pages:
                return self._page(data, next_page, etag, total, params)

            results = results + data
            current += 1
            if current >= params.pages or not next_page:
                logger.debug(
                    "pagination_complete",
                    extra={"pages": current, "items": len(results)},
                )
                return self._page(results, next_page, etag, total, params)
            response = await self._fetch_page(next_page)

    def _page(
        self,
        data: list[Any],
        next_page: str | None,
        etag: str | None,
        total: str | None,
        params: ListParams,
    ) -> PaginationCursor[Any]:
        async def fetch_next() -> PaginationCursor[Any]:
            response = await self._fetch_page(next_page)
            return await self._handle(response, params, [], 0)

        return PaginationCursor(
            last_modified=etag.replace('"', "") if etag else None,
            data=data,
            has_next_page=bool(next_page),
            total_records=int(total) if total else None,
            _fetch_next=fetch_next if next_page else None,
        )


def _page_data(response: WireResponse) -> list[Any]:
    body = response.body
    if isinstance(body, dict):
        return list(body.get("data") or [])
    return []
