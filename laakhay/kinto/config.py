"""Client configuration and protocol constants.

This module centralizes the protocol version, default headers and the
per-client option model so the clients and the transport stay small.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .core.exceptions import ValidationError

# Only protocol v1 servers are supported.
SUPPORTED_PROTOCOL_VERSION = "v1"

# Applied to every outgoing request; caller headers take precedence.
DEFAULT_REQUEST_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"

# Default list ordering, newest first.
DEFAULT_SORT = "-last_modified"

_VERSION_RE = re.compile(r"/(v\d+)/?$")


class ClientOptions(BaseModel):
    """Per-client defaults, overridable per bucket, collection or call.

    Attributes:
        safe: Send concurrency control headers on writes
        retry: Retry budget per call when the server sends ``Retry-After``
        headers: Headers merged into every request
        timeout: Transport timeout in seconds (None disables it)
    """

    safe: bool = False
    retry: int = Field(default=0, ge=0)
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float | None = Field(default=None, gt=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("headers", mode="before")
    @classmethod
    def validate_headers(cls, v: Any) -> dict[str, str]:
        if v is None:
            return {}
        return {str(key): str(value) for key, value in dict(v).items()}

    def with_headers(self, headers: Mapping[str, str]) -> ClientOptions:
        """Return a copy with ``headers`` merged over the current ones."""
        return ClientOptions.model_validate(
            {**self.model_dump(), "headers": {**self.headers, **dict(headers)}}
        )


def normalize_remote(remote: str) -> tuple[str, str]:
    """Validate a remote URL and return ``(remote, version)``.

    Raises:
        ValidationError: If the URL is empty, has no version suffix or targets
            an unsupported protocol version
    """
    if not isinstance(remote, str) or not remote:
        raise ValidationError(f"Invalid remote URL: {remote!r}")
    if remote.endswith("/"):
        remote = remote[:-1]
    match = _VERSION_RE.search(remote)
    if match is None:
        raise ValidationError(f"The remote URL must contain the version: {remote}")
    version = match.group(1)
    if version != SUPPORTED_PROTOCOL_VERSION:
        raise ValidationError(f"Unsupported protocol version: {version}")
    return remote, version
