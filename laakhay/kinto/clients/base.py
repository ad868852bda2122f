"""Base client shared by the live and the recording clients.

Architecture:
    ``BaseClient`` holds the whole client-level API surface: server info,
    paginated lists and bucket level operations. Everything is expressed in
    terms of two abstract primitives:

    - ``execute(request)``: send (or record) one ``WireRequest``
    - ``fetch_url(url)``: follow an absolute ``Next-Page`` URL

    ``KintoClient`` implements them over HTTP; ``RecordingClient`` appends
    requests to a list so that ``batch()`` can send them later. Operations
    that need a real answer from the server (server info, listing,
    capability checks) refuse to run in a recording client.

Design Decisions:
    - Option resolution: per-call value wins, ``None`` means "inherit"
    - Headers are merged, never replaced
    - Capability checks are explicit guards at the top of gated methods

See Also:
    - KintoClient: Live HTTP client
    - RecordingClient: Batch recording client
    - Bucket, Collection: Resource clients sharing the option resolution
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from ..api import RequestBuilder
from ..config import DEFAULT_SORT, ClientOptions, normalize_remote
from ..core import endpoints
from ..core.capabilities import BULK_DELETE_VERSION, ensure_api_version, ensure_capabilities
from ..core.enums import HttpMethod
from ..core.exceptions import BatchError
from ..core.utils import require_id, to_data_body
from ..models import AggregateResult, ServerInfo, ServerSettings, SubResponse, WireRequest, WireResponse
from ..runtime.pagination import ListParams, PaginationCursor, PaginationWalker
from .state import ServerState

if TYPE_CHECKING:
    from .bucket import Bucket

logger = logging.getLogger(__name__)

NOBATCH_MESSAGE = "This operation is not supported within a batch operation."


def build_list_params(
    *,
    sort: str | None = None,
    filters: Mapping[str, Any] | None = None,
    limit: int | None = None,
    pages: int | float | None = None,
    since: str | None = None,
    fields: list[str] | None = None,
    default_sort: str = DEFAULT_SORT,
) -> ListParams:
    """Collect list keyword arguments into ``ListParams``."""
    return ListParams(
        sort=sort or default_sort,
        filters=dict(filters or {}),
        limit=limit,
        pages=pages,
        since=since,
        fields=fields,
    )


def response_field(body: Any, key: str) -> Any:
    """Read ``key`` from a response body, tolerating batch placeholders."""
    if isinstance(body, Mapping):
        return body.get(key)
    return body


class OptionsMixin:
    """Resolution of ``headers``/``safe``/``retry`` against local defaults."""

    options: ClientOptions
    is_batch: bool = False

    @property
    def headers(self) -> dict[str, str]:
        return dict(self.options.headers)

    @property
    def safe(self) -> bool:
        return self.options.safe

    @property
    def retry(self) -> int:
        return self.options.retry

    def _get_headers(self, headers: Mapping[str, str] | None = None) -> dict[str, str]:
        return {**self.options.headers, **(headers or {})}

    def _get_safe(self, safe: bool | None = None) -> bool:
        return self.options.safe if safe is None else safe

    def _get_retry(self, retry: int | None = None) -> int:
        return self.options.retry if retry is None else retry


class BaseClient(OptionsMixin, ABC):
    """Client-level API shared by live and recording clients."""

    def __init__(
        self,
        remote: str,
        *,
        safe: bool = False,
        retry: int = 0,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> None:
        self._remote, self._version = normalize_remote(remote)
        self.options = ClientOptions(safe=safe, retry=retry, headers=headers, timeout=timeout)
        self.state = ServerState()

    @property
    def remote(self) -> str:
        """Remote server URL, including the protocol version."""
        return self._remote

    @property
    def version(self) -> str:
        """Protocol version extracted from the remote URL, e.g. ``v1``."""
        return self._version

    def _nobatch(self, message: str = NOBATCH_MESSAGE) -> None:
        if self.is_batch:
            raise BatchError(message)

    def bucket(
        self,
        name: str,
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool | None = None,
        retry: int | None = None,
    ) -> Bucket:
        """Return a ``Bucket`` resource bound to this client."""
        from .bucket import Bucket

        return Bucket(
            self,
            name,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            retry=self._get_retry(retry),
        )

    @abstractmethod
    async def execute(
        self,
        request: WireRequest,
        *,
        raw: bool = False,
        retry: int | None = None,
    ) -> Any:
        """Send ``request``; return its body, or the full response when ``raw``."""
        pass

    @abstractmethod
    async def fetch_url(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int = 0,
    ) -> WireResponse:
        """GET an absolute URL (used to follow ``Next-Page`` links)."""
        pass

    @abstractmethod
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
        pass

    # Server information

    async def _get_hello(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> ServerInfo:
        request = WireRequest(path=endpoints.root(), headers=self._get_headers(headers))
        body = await self.execute(request, retry=self._get_retry(retry))
        return ServerInfo.model_validate(body or {})

    async def fetch_server_info(self, *, retry: int | None = None) -> ServerInfo:
        """Return the root endpoint payload, cached until headers change."""
        self._nobatch()
        if self.state.server_info is None:
            self.state.server_info = await self._get_hello(retry=retry)
            logger.debug(
                "server_info_fetched",
                extra={
                    "remote": self.remote,
                    "http_api_version": self.state.server_info.http_api_version,
                },
            )
        return self.state.server_info

    async def fetch_server_settings(self, *, retry: int | None = None) -> ServerSettings:
        self._nobatch()
        info = await self.fetch_server_info(retry=retry)
        return info.settings

    async def fetch_server_capabilities(
        self, *, retry: int | None = None
    ) -> dict[str, dict[str, Any]]:
        self._nobatch()
        info = await self.fetch_server_info(retry=retry)
        return info.capabilities

    async def fetch_user(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> dict[str, Any] | None:
        """Return the authenticated user as seen by the server (never cached)."""
        self._nobatch()
        info = await self._get_hello(headers=headers, retry=retry)
        return info.user

    async def fetch_http_api_version(self, *, retry: int | None = None) -> str:
        self._nobatch()
        info = await self.fetch_server_info(retry=retry)
        return info.http_api_version

    # Listing

    async def paginated_list(
        self,
        path: str,
        params: ListParams | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int = 0,
    ) -> PaginationCursor[Any]:
        """List ``path``, following ``Next-Page`` links as ``params.pages`` asks.

        ``headers`` and ``retry`` are used as given: callers resolve them
        against their own defaults first.
        """
        self._nobatch()
        walker = PaginationWalker(self, headers=headers, retry=retry)
        return await walker.list(path, params)

    async def list_permissions(
        self,
        *,
        sort: str | None = None,
        filters: Mapping[str, Any] | None = None,
        limit: int | None = None,
        pages: int | float | None = None,
        since: str | None = None,
        fields: list[str] | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> PaginationCursor[dict[str, Any]]:
        """List every permission granted to the current user."""
        await ensure_capabilities(self, ["permissions_endpoint"])
        # Permission entries have no last_modified field.
        params = build_list_params(
            sort=sort,
            filters=filters,
            limit=limit,
            pages=pages,
            since=since,
            fields=fields,
            default_sort="id",
        )
        return await self.paginated_list(
            endpoints.permissions(),
            params,
            headers=self._get_headers(headers),
            retry=self._get_retry(retry),
        )

    async def list_buckets(
        self,
        *,
        sort: str | None = None,
        filters: Mapping[str, Any] | None = None,
        limit: int | None = None,
        pages: int | float | None = None,
        since: str | None = None,
        fields: list[str] | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> PaginationCursor[dict[str, Any]]:
        params = build_list_params(
            sort=sort, filters=filters, limit=limit, pages=pages, since=since, fields=fields
        )
        return await self.paginated_list(
            endpoints.bucket(),
            params,
            headers=self._get_headers(headers),
            retry=self._get_retry(retry),
        )

    # Buckets

    async def create_bucket(
        self,
        id: str | None = None,
        *,
        data: Mapping[str, Any] | None = None,
        permissions: Mapping[str, list[str]] | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        """Create a bucket; the server assigns an id when none is given."""
        data = dict(data or {})
        if id is not None:
            data["id"] = id
        request = RequestBuilder.create(
            endpoints.bucket(data.get("id")),
            data,
            permissions,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
        )
        return await self.execute(request, retry=self._get_retry(retry))

    async def delete_bucket(
        self,
        bucket: str | Mapping[str, Any],
        *,
        last_modified: int | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        """Delete a bucket given its id or its data.

        Raises:
            ValidationError: If no bucket id can be found
            PreconditionError: If safe and no ``last_modified`` is known
        """
        bucket_obj = to_data_body(bucket)
        bucket_id = require_id(bucket_obj, "bucket")
        if last_modified is None:
            last_modified = bucket_obj.get("last_modified")
        request = RequestBuilder.delete(
            endpoints.bucket(bucket_id),
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
        )
        return await self.execute(request, retry=self._get_retry(retry))

    async def delete_buckets(
        self,
        *,
        last_modified: int | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        """Delete every bucket readable by the current user."""
        await ensure_api_version(self, *BULK_DELETE_VERSION)
        request = RequestBuilder.delete(
            endpoints.bucket(),
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
        )
        return await self.execute(request, retry=self._get_retry(retry))

    async def create_account(self, username: str, password: str) -> Any:
        """Create a user account (requires the ``accounts`` plugin)."""
        await ensure_capabilities(self, ["accounts"])
        request = WireRequest(
            method=HttpMethod.PUT,
            path=endpoints.account(username),
            headers=self.headers,
            body={"data": {"password": password}},
        )
        return await self.execute(request)
