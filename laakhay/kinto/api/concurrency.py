"""Optimistic concurrency headers.

Architecture:
    Writes in safe mode are conditional HTTP requests. The policy derives the
    condition from a safe flag and the last known version of the resource:

    - unsafe: no condition
    - safe, no version: ``If-None-Match: *`` (the resource must not exist)
    - safe, version: ``If-Match: "<version>"`` (the resource must be unchanged)

    Destructive operations cannot fall back to ``If-None-Match`` (deleting
    a resource that must not exist is meaningless), so ``require_version``
    lets them fail fast before anything is sent.
"""

from __future__ import annotations

from typing import Any

from ..core.exceptions import PreconditionError
from ..core.utils import quote


class ConcurrencyHeaderPolicy:
    """Stateless mapping from (safe, version) to conditional headers."""

    @staticmethod
    def headers_for(safe: bool, known_version: Any = None) -> dict[str, str]:
        if not safe:
            return {}
        if known_version is not None:
            return {"If-Match": quote(known_version)}
        return {"If-None-Match": "*"}

    @staticmethod
    def require_version(safe: bool, known_version: Any = None) -> None:
        """Raise if a safe destructive operation has no version to match.

        Raises:
            PreconditionError: If ``safe`` is set and ``known_version`` is None
        """
        if safe and known_version is None:
            raise PreconditionError("Safe concurrency check requires a last_modified value.")
