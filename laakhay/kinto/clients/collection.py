"""Collection resource client: records, permissions and snapshots."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from ..api import RequestBuilder
from ..config import ClientOptions
from ..core import endpoints
from ..core.capabilities import ensure_capabilities
from ..core.enums import HttpMethod, PatchOperation
from ..core.utils import add_endpoint_options, require_id, require_mapping, to_data_body
from ..models import AggregateResult, HistoryEntry, SubResponse, WireRequest
from ..runtime.pagination import PaginationCursor
from ..runtime.snapshot import SnapshotReconstructor, validate_timestamp
from .base import OptionsMixin, build_list_params, response_field

if TYPE_CHECKING:
    from .base import BaseClient
    from .bucket import Bucket


class Collection(OptionsMixin):
    """Operations on one collection of a bucket.

    Default headers are the bucket headers with the collection ones merged
    over them.
    """

    def __init__(
        self,
        client: BaseClient,
        bucket: Bucket,
        name: str,
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool = False,
        retry: int = 0,
    ) -> None:
        self.client = client
        self.bucket = bucket
        self.name = name
        self.options = ClientOptions(
            headers={**bucket.headers, **(headers or {})},
            safe=safe,
            retry=retry,
        )

    def __repr__(self) -> str:
        return f"Collection(bucket={self.bucket.name!r}, name={self.name!r})"

    def _path(self) -> str:
        return endpoints.collection(self.bucket.name, self.name)

    def _records_path(self, record_id: str | None = None) -> str:
        return endpoints.record(self.bucket.name, self.name, record_id)

    async def _head(self, headers: Mapping[str, str] | None, retry: int | None) -> Any:
        # A recorded HEAD has no headers to read back.
        self.client._nobatch()
        request = WireRequest(
            method=HttpMethod.HEAD,
            path=self._records_path(),
            headers=self._get_headers(headers),
        )
        response = await self.client.execute(request, raw=True, retry=self._get_retry(retry))
        return response.headers

    async def get_total_records(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> int | None:
        """Return the ``Total-Records`` count of the records list."""
        total = (await self._head(headers, retry)).get("Total-Records")
        return int(total) if total else None

    async def get_records_timestamp(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> str | None:
        """Return the ETag of the records list."""
        return (await self._head(headers, retry)).get("ETag")

    async def get_data(
        self,
        *,
        query: Mapping[str, Any] | None = None,
        fields: list[str] | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        path = add_endpoint_options(self._path(), query=query, fields=fields)
        request = WireRequest(path=path, headers=self._get_headers(headers))
        body = await self.client.execute(request, retry=self._get_retry(retry))
        return response_field(body, "data")

    async def set_data(
        self,
        data: Mapping[str, Any],
        *,
        permissions: Mapping[str, list[str]] | None = None,
        last_modified: int | None = None,
        patch: bool = False,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        require_mapping(data, "collection")
        if last_modified is None:
            last_modified = data.get("last_modified")
        request = RequestBuilder.update(
            self._path(),
            data,
            permissions,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
            patch=patch,
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    # Permissions

    async def get_permissions(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        request = WireRequest(path=self._path(), headers=self._get_headers(headers))
        body = await self.client.execute(request, retry=self._get_retry(retry))
        return response_field(body, "permissions")

    async def set_permissions(
        self,
        permissions: Mapping[str, list[str]],
        *,
        last_modified: int | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        require_mapping(permissions, "permissions")
        request = RequestBuilder.update(
            self._path(),
            {"last_modified": last_modified},
            permissions,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def add_permissions(
        self,
        permissions: Mapping[str, list[str]],
        *,
        last_modified: int | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        return await self._patch_permissions(
            permissions, PatchOperation.ADD, last_modified, safe, headers, retry
        )

    async def remove_permissions(
        self,
        permissions: Mapping[str, list[str]],
        *,
        last_modified: int | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        return await self._patch_permissions(
            permissions, PatchOperation.REMOVE, last_modified, safe, headers, retry
        )

    async def _patch_permissions(
        self,
        permissions: Mapping[str, list[str]],
        operation: PatchOperation,
        last_modified: int | None,
        safe: bool | None,
        headers: Mapping[str, str] | None,
        retry: int | None,
    ) -> Any:
        require_mapping(permissions, "permissions")
        request = RequestBuilder.patch_permissions(
            self._path(),
            permissions,
            operation,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    # Records

    async def create_record(
        self,
        record: Mapping[str, Any],
        *,
        permissions: Mapping[str, list[str]] | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        """Create a record; an ``id`` in ``record`` selects the record URL."""
        require_mapping(record, "record")
        request = RequestBuilder.create(
            self._records_path(record.get("id")),
            record,
            permissions,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def update_record(
        self,
        record: Mapping[str, Any],
        *,
        permissions: Mapping[str, list[str]] | None = None,
        last_modified: int | None = None,
        patch: bool = False,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        """Update a record.

        In safe mode the record ``last_modified`` (or the explicit one) is
        sent as ``If-Match``, so concurrent changes end in a 412.

        Raises:
            ValidationError: If ``record`` is not a mapping or has no id
        """
        require_mapping(record, "record")
        record_id = require_id(record, "record")
        if last_modified is None:
            last_modified = record.get("last_modified")
        request = RequestBuilder.update(
            self._records_path(record_id),
            record,
            permissions,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
            patch=patch,
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def delete_record(
        self,
        record: str | Mapping[str, Any],
        *,
        last_modified: int | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        """Delete a record given its id or its data.

        Raises:
            ValidationError: If no record id can be found
            PreconditionError: If safe and no ``last_modified`` is known
        """
        record_obj = to_data_body(record)
        record_id = require_id(record_obj, "record")
        if last_modified is None:
            last_modified = record_obj.get("last_modified")
        request = RequestBuilder.delete(
            self._records_path(record_id),
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def get_record(
        self,
        id: str,
        *,
        query: Mapping[str, Any] | None = None,
        fields: list[str] | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        path = add_endpoint_options(self._records_path(id), query=query, fields=fields)
        request = WireRequest(path=path, headers=self._get_headers(headers))
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def list_records(
        self,
        *,
        at: int | None = None,
        sort: str | None = None,
        filters: Mapping[str, Any] | None = None,
        limit: int | None = None,
        pages: int | float | None = None,
        since: str | None = None,
        fields: list[str] | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> PaginationCursor[dict[str, Any]]:
        """List records, or the snapshot of the records at ``at``."""
        if at is not None:
            return await self.get_snapshot(at)
        params = build_list_params(
            sort=sort, filters=filters, limit=limit, pages=pages, since=since, fields=fields
        )
        return await self.client.paginated_list(
            self._records_path(),
            params,
            headers=self._get_headers(headers),
            retry=self._get_retry(retry),
        )

    # History

    async def is_history_complete(self) -> bool:
        return await SnapshotReconstructor.is_history_complete(self)

    async def list_changes_back_to(self, at: int) -> list[HistoryEntry]:
        return await SnapshotReconstructor.list_changes_back_to(self, validate_timestamp(at))

    async def get_snapshot(self, at: int) -> PaginationCursor[dict[str, Any]]:
        """Return the records of this collection as they were at ``at``.

        Raises:
            ValidationError: If ``at`` is not a positive integer
            CapabilityError: If the server has no history plugin
            IncompleteHistoryError: If history does not cover the collection creation
        """
        validate_timestamp(at)
        await ensure_capabilities(self.client, ["history"])
        return await SnapshotReconstructor.snapshot(self, at)

    async def batch(
        self,
        fn: Callable[[Any], Any],
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool | None = None,
        retry: int | None = None,
        aggregate: bool = False,
    ) -> list[SubResponse] | AggregateResult:
        """Run ``fn`` against this collection in a batch."""
        return await self.client.batch(
            fn,
            bucket=self.bucket.name,
            collection=self.name,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            retry=self._get_retry(retry),
            aggregate=aggregate,
        )
