"""Small helpers shared by the request builders and resource clients."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote as _urlquote

from .exceptions import ValidationError

# Characters left untouched by the query string encoder.
_QS_SAFE = "!~*'()"


def quote(value: Any) -> str:
    """Wrap a value in double quotes, as used by ``If-Match`` headers."""
    return f'"{value}"'


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return _urlquote(str(value), safe=_QS_SAFE)


def qsify(params: Mapping[str, Any]) -> str:
    """Build a query string, dropping ``None`` values.

    List values are comma-joined (``_fields=a,b``), booleans are rendered as
    ``true``/``false``.
    """
    parts: list[str] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            encoded = ",".join(_encode(v) for v in value)
        else:
            encoded = _encode(value)
        parts.append(f"{_encode(key)}={encoded}")
    return "&".join(parts)


def add_endpoint_options(
    path: str,
    *,
    query: Mapping[str, Any] | None = None,
    fields: list[str] | None = None,
) -> str:
    """Append optional query parameters and a ``_fields`` projection to a path."""
    params: dict[str, Any] = dict(query or {})
    if fields:
        params["_fields"] = fields
    querystring = qsify(params)
    if querystring:
        return f"{path}?{querystring}"
    return path


def to_data_body(resource: str | Mapping[str, Any]) -> dict[str, Any]:
    """Normalize an id or a resource mapping to a data dict."""
    if isinstance(resource, Mapping):
        return dict(resource)
    if isinstance(resource, str):
        return {"id": resource}
    raise ValidationError(f"Invalid argument: {resource!r}")


def require_id(resource: Mapping[str, Any], kind: str) -> str:
    resource_id = resource.get("id")
    if not resource_id:
        raise ValidationError(f"A {kind} id is required.")
    return resource_id


def require_mapping(value: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValidationError(f"A {kind} object is required.")
    return value


def partition(items: list[Any], size: int | None) -> list[list[Any]]:
    """Split ``items`` into contiguous chunks of at most ``size`` elements.

    A missing or non-positive size yields a single chunk.
    """
    if not items:
        return []
    if not size or size <= 0:
        return [list(items)]
    return [list(items[i : i + size]) for i in range(0, len(items), size)]
