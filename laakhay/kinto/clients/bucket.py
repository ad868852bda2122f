"""Bucket resource client.

Architecture:
    A ``Bucket`` is a lightweight handle: a client, a bucket name and
    default options (headers, safe, retry) inherited from the client and
    overridable per call. It builds requests with the ``RequestBuilder`` and
    hands them to ``client.execute``, so the same code runs against a live
    client or records into a batch.

See Also:
    - Collection: Records level operations
    - RequestBuilder: Request construction and concurrency headers
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from ..api import RequestBuilder
from ..config import ClientOptions
from ..core import endpoints
from ..core.capabilities import BULK_DELETE_VERSION, ensure_api_version, ensure_capabilities
from ..core.enums import HttpMethod, PatchOperation
from ..core.utils import add_endpoint_options, require_id, require_mapping, to_data_body
from ..models import AggregateResult, SubResponse, WireRequest
from ..runtime.pagination import PaginationCursor
from .base import OptionsMixin, build_list_params, response_field
from .collection import Collection

if TYPE_CHECKING:
    from .base import BaseClient

# The personal bucket alias; its id must not be sent in the payload.
DEFAULT_BUCKET = "default"


class Bucket(OptionsMixin):
    """Operations on one bucket and its collections, groups and history."""

    def __init__(
        self,
        client: BaseClient,
        name: str,
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool = False,
        retry: int = 0,
    ) -> None:
        self.client = client
        self.name = name
        self.options = ClientOptions(headers=headers, safe=safe, retry=retry)

    def __repr__(self) -> str:
        return f"Bucket(name={self.name!r})"

    def collection(
        self,
        name: str,
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool | None = None,
        retry: int | None = None,
    ) -> Collection:
        return Collection(
            self.client,
            self,
            name,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            retry=self._get_retry(retry),
        )

    async def _timestamp(
        self,
        path: str,
        headers: Mapping[str, str] | None,
        retry: int | None,
    ) -> str | None:
        request = WireRequest(method=HttpMethod.HEAD, path=path, headers=self._get_headers(headers))
        response = await self.client.execute(request, raw=True, retry=self._get_retry(retry))
        return response.headers.get("ETag")

    async def get_collections_timestamp(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> str | None:
        """Return the ETag of the collections list."""
        return await self._timestamp(endpoints.collection(self.name), headers, retry)

    async def get_groups_timestamp(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> str | None:
        """Return the ETag of the groups list."""
        return await self._timestamp(endpoints.group(self.name), headers, retry)

    async def get_data(
        self,
        *,
        query: Mapping[str, Any] | None = None,
        fields: list[str] | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        path = add_endpoint_options(endpoints.bucket(self.name), query=query, fields=fields)
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
        """Replace (or patch) the bucket data.

        Raises:
            ValidationError: If ``data`` is not a mapping
        """
        require_mapping(data, "bucket")
        bucket = {**data, "id": self.name}
        if self.name == DEFAULT_BUCKET:
            del bucket["id"]
        if last_modified is None:
            last_modified = data.get("last_modified")
        request = RequestBuilder.update(
            endpoints.bucket(self.name),
            bucket,
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
        request = WireRequest(path=endpoints.bucket(self.name), headers=self._get_headers(headers))
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
        """Replace the bucket permissions, keeping its data."""
        require_mapping(permissions, "permissions")
        request = RequestBuilder.update(
            endpoints.bucket(self.name),
            {"last_modified": last_modified},
            permissions,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

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
            endpoints.bucket(self.name),
            permissions,
            operation,
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
        """Grant principals, e.g. ``{"read": ["system.Everyone"]}``."""
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

    # History

    async def list_history(
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
        """List the bucket history (requires the ``history`` plugin)."""
        await ensure_capabilities(self.client, ["history"])
        params = build_list_params(
            sort=sort, filters=filters, limit=limit, pages=pages, since=since, fields=fields
        )
        return await self.client.paginated_list(
            endpoints.history(self.name),
            params,
            headers=self._get_headers(headers),
            retry=self._get_retry(retry),
        )

    # Collections

    async def list_collections(
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
        return await self.client.paginated_list(
            endpoints.collection(self.name),
            params,
            headers=self._get_headers(headers),
            retry=self._get_retry(retry),
        )

    async def create_collection(
        self,
        id: str | None = None,
        *,
        data: Mapping[str, Any] | None = None,
        permissions: Mapping[str, list[str]] | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        data = dict(data or {})
        if id is not None:
            data["id"] = id
        request = RequestBuilder.create(
            endpoints.collection(self.name, id),
            data,
            permissions,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def delete_collection(
        self,
        collection: str | Mapping[str, Any],
        *,
        last_modified: int | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        """Delete a collection given its id or its data.

        Raises:
            ValidationError: If no collection id can be found
            PreconditionError: If safe and no ``last_modified`` is known
        """
        collection_obj = to_data_body(collection)
        collection_id = require_id(collection_obj, "collection")
        if last_modified is None:
            last_modified = collection_obj.get("last_modified")
        request = RequestBuilder.delete(
            endpoints.collection(self.name, collection_id),
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def delete_collections(
        self,
        *,
        last_modified: int | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        """Delete every collection of the bucket."""
        await ensure_api_version(self.client, *BULK_DELETE_VERSION)
        request = RequestBuilder.delete(
            endpoints.collection(self.name),
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    # Groups

    async def list_groups(
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
        return await self.client.paginated_list(
            endpoints.group(self.name),
            params,
            headers=self._get_headers(headers),
            retry=self._get_retry(retry),
        )

    async def get_group(
        self,
        id: str,
        *,
        query: Mapping[str, Any] | None = None,
        fields: list[str] | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        path = add_endpoint_options(endpoints.group(self.name, id), query=query, fields=fields)
        request = WireRequest(path=path, headers=self._get_headers(headers))
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def create_group(
        self,
        id: str | None = None,
        members: list[str] | None = None,
        *,
        data: Mapping[str, Any] | None = None,
        permissions: Mapping[str, list[str]] | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        group = {**(data or {}), "members": list(members or [])}
        if id is not None:
            group["id"] = id
        request = RequestBuilder.create(
            endpoints.group(self.name, id),
            group,
            permissions,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def update_group(
        self,
        group: Mapping[str, Any],
        *,
        data: Mapping[str, Any] | None = None,
        permissions: Mapping[str, list[str]] | None = None,
        last_modified: int | None = None,
        patch: bool = False,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        """Update a group; ``group`` must carry its ``id``.

        Raises:
            ValidationError: If ``group`` is not a mapping or has no id
        """
        require_mapping(group, "group")
        group_id = require_id(group, "group")
        payload = {**(data or {}), **group}
        if last_modified is None:
            last_modified = payload.get("last_modified")
        request = RequestBuilder.update(
            endpoints.group(self.name, group_id),
            payload,
            permissions,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
            patch=patch,
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def delete_group(
        self,
        group: str | Mapping[str, Any],
        *,
        last_modified: int | None = None,
        safe: bool | None = None,
        headers: Mapping[str, str] | None = None,
        retry: int | None = None,
    ) -> Any:
        group_obj = to_data_body(group)
        group_id = require_id(group_obj, "group")
        if last_modified is None:
            last_modified = group_obj.get("last_modified")
        request = RequestBuilder.delete(
            endpoints.group(self.name, group_id),
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            last_modified=last_modified,
        )
        return await self.client.execute(request, retry=self._get_retry(retry))

    async def batch(
        self,
        fn: Callable[[Any], Any],
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool | None = None,
        retry: int | None = None,
        aggregate: bool = False,
    ) -> list[SubResponse] | AggregateResult:
        """Run ``fn`` against this bucket in a batch (see ``KintoClient.batch``)."""
        return await self.client.batch(
            fn,
            bucket=self.name,
            headers=self._get_headers(headers),
            safe=self._get_safe(safe),
            retry=self._get_retry(retry),
            aggregate=aggregate,
        )
