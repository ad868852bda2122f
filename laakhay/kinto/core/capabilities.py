"""Server capability and API version checks.

Architecture:
    Some endpoints only exist when a server plugin is enabled (history,
    accounts, permissions endpoint) or when the HTTP API is recent enough
    (bulk deletes). Operations depending on them call one of the guards
    below before building any request, so an unsupported call fails fast
    with a structured ``CapabilityError`` instead of a confusing 404.

Design Decisions:
    - Stateless guards: the server info cache lives on the client
    - Version ranges are half-open: ``min <= version < max``
    - Non-raising variants exist for callers that want to branch

See Also:
    - BaseClient.fetch_server_capabilities: Source of the capability map
    - CapabilityError: Exception raised for unsupported servers
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .exceptions import CapabilityError

if TYPE_CHECKING:
    from ..clients.base import BaseClient

# Minimum HTTP API version required by bulk bucket/collection deletion.
BULK_DELETE_VERSION = ("1.4", "2.0")


def parse_version(version: str) -> tuple[int, ...]:
    """Parse ``"1.4"`` into ``(1, 4)``; missing parts count as zero."""
    parts = []
    for chunk in str(version).split("."):
        try:
            parts.append(int(chunk))
        except ValueError:
            parts.append(0)
    while len(parts) < 2:
        parts.append(0)
    return tuple(parts)


def missing_capabilities(capabilities: dict[str, Any], required: Iterable[str]) -> list[str]:
    """Return the required capability names absent from ``capabilities``."""
    return [name for name in required if name not in capabilities]


def version_in_range(version: str, min_version: str, max_version: str) -> bool:
    return parse_version(min_version) <= parse_version(version) < parse_version(max_version)


async def ensure_capabilities(client: BaseClient, required: Iterable[str]) -> None:
    """Raise unless the server exposes every capability in ``required``.

    Raises:
        CapabilityError: Listing the missing capabilities
    """
    required = list(required)
    capabilities = await client.fetch_server_capabilities()
    missing = missing_capabilities(capabilities, required)
    if missing:
        raise CapabilityError(
            f"Required capabilities {', '.join(missing)} not present on server",
            missing=missing,
        )


async def ensure_api_version(
    client: BaseClient,
    min_version: str,
    max_version: str,
) -> None:
    """Raise unless ``min_version <= http_api_version < max_version``.

    Raises:
        CapabilityError: If the server version is outside the range
    """
    version = await client.fetch_http_api_version()
    if not version_in_range(version, min_version, max_version):
        raise CapabilityError(
            f"Version {version} doesn't satisfy {min_version} <= x < {max_version}"
        )


__all__ = [
    "BULK_DELETE_VERSION",
    "ensure_api_version",
    "ensure_capabilities",
    "missing_capabilities",
    "parse_version",
    "version_in_range",
]
