"""Request builder turning logical operations into wire requests.

Architecture:
    The builder is the single place where a logical operation (create,
    update, delete, permission patch) becomes a ``WireRequest``. It decides
    the HTTP verb, shapes the body and applies the concurrency policy. It
    never sends anything: the resulting request is either executed directly
    by a live client or recorded by a batch client.

Design Decisions:
    - Pure functions of their inputs: easy to test, safe to call in a batch
    - Header precedence: resource defaults < per-call headers < concurrency
    - Fail fast: a safe delete without a version token raises before a
      request object even exists

See Also:
    - ConcurrencyHeaderPolicy: Conditional header derivation
    - Bucket, Collection: Resource clients that call the builder
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config import JSON_PATCH_CONTENT_TYPE
from ..core.enums import HttpMethod, OperationKind, PatchOperation
from ..models import WireRequest
from .concurrency import ConcurrencyHeaderPolicy

__all__ = ["RequestBuilder"]

# Fields that never count as payload when deciding whether an update has data.
_VERSION_FIELDS = ("id", "last_modified")


def _body(data: Any, permissions: Mapping[str, list[str]] | None) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if data is not None:
        body["data"] = data
    if permissions is not None:
        body["permissions"] = dict(permissions)
    return body


class RequestBuilder:
    """Builds ``WireRequest`` objects for mutations.

    Example:
        >>> RequestBuilder.create("/buckets/b/collections/c/records", {"title": "a"})
        WireRequest(method=<HttpMethod.POST: 'POST'>, ...)
    """

    policy = ConcurrencyHeaderPolicy

    @classmethod
    def build(
        cls,
        kind: OperationKind,
        path: str,
        data: Mapping[str, Any] | None = None,
        permissions: Mapping[str, list[str]] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool = False,
        last_modified: int | None = None,
        patch: bool = False,
    ) -> WireRequest:
        """Build the request for an operation kind.

        Args:
            kind: Logical operation
            path: Resource path (already containing the id when known)
            data: Resource data
            permissions: Resource permissions
            headers: Merged resource and per-call headers
            safe: Enable concurrency control
            last_modified: Known version token
            patch: Use PATCH instead of PUT for updates

        Returns:
            Immutable wire request
        """
        kind = OperationKind(kind)
        if kind is OperationKind.CREATE:
            return cls.create(path, data, permissions, headers=headers, safe=safe)
        if kind is OperationKind.UPDATE:
            return cls.update(
                path,
                data,
                permissions,
                headers=headers,
                safe=safe,
                last_modified=last_modified,
                patch=patch,
            )
        known = last_modified
        if known is None and data is not None:
            known = data.get("last_modified")
        return cls.delete(path, headers=headers, safe=safe, last_modified=known)

    @classmethod
    def create(
        cls,
        path: str,
        data: Mapping[str, Any] | None = None,
        permissions: Mapping[str, list[str]] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool = False,
    ) -> WireRequest:
        data = dict(data) if data is not None else {}
        # An explicit id means the client chose the resource URL.
        method = HttpMethod.PUT if data.get("id") else HttpMethod.POST
        return WireRequest(
            method=method,
            path=path,
            headers={**(headers or {}), **cls.policy.headers_for(safe)},
            body=_body(data, permissions),
        )

    @classmethod
    def update(
        cls,
        path: str,
        data: Mapping[str, Any] | None = None,
        permissions: Mapping[str, list[str]] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool = False,
        last_modified: int | None = None,
        patch: bool = False,
    ) -> WireRequest:
        if last_modified is None and data is not None:
            last_modified = data.get("last_modified")
        payload: dict[str, Any] | None = dict(data) if data is not None else None
        if payload is not None and not any(k not in _VERSION_FIELDS for k in payload):
            payload = None
        return WireRequest(
            method=HttpMethod.PATCH if patch else HttpMethod.PUT,
            path=path,
            headers={**(headers or {}), **cls.policy.headers_for(safe, last_modified)},
            body=_body(payload, permissions),
        )

    @classmethod
    def delete(
        cls,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool = False,
        last_modified: int | None = None,
    ) -> WireRequest:
        cls.policy.require_version(safe, last_modified)
        return WireRequest(
            method=HttpMethod.DELETE,
            path=path,
            headers={**(headers or {}), **cls.policy.headers_for(safe, last_modified)},
        )

    @classmethod
    def patch_permissions(
        cls,
        path: str,
        permissions: Mapping[str, list[str]],
        operation: PatchOperation,
        *,
        headers: Mapping[str, str] | None = None,
        safe: bool = False,
        last_modified: int | None = None,
    ) -> WireRequest:
        """Build a JSON-patch request adding or removing principals."""
        operation = PatchOperation(operation)
        ops = [
            {"op": operation.value, "path": f"/permissions/{perm}/{principal}"}
            for perm, principals in permissions.items()
            for principal in principals
        ]
        return WireRequest(
            method=HttpMethod.PATCH,
            path=path,
            headers={
                **(headers or {}),
                **cls.policy.headers_for(safe, last_modified),
                "Content-Type": JSON_PATCH_CONTENT_TYPE,
            },
            body=ops,
        )
