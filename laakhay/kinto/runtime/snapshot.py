"""Point-in-time collection snapshots rebuilt from the history feed.

Architecture:
    The history plugin records every record change as an append-only entry.
    A snapshot at timestamp ``at`` is obtained by replaying, newest first,
    the record changes whose ``target.data.last_modified`` is <= ``at`` (the
    server applies that filter) and keeping the first state seen per id:

    - ``delete``: the id is marked seen and removed from the result
    - ``create``/``update`` for an unseen id: marked seen, state kept
    - anything for an already seen id: ignored

    The replay is a pure fold, kept apart from the network calls so it can
    be checked against literal history fixtures.

Design Decisions:
    - Completeness heuristic: the history must contain the ``create`` event
      of the collection itself, otherwise some record changes may predate
      the history plugin. Retention pruning can defeat this check; it is an
      approximation, not a proof.
    - Snapshots are not paginable: the returned cursor never has a next page
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ..core.enums import HistoryAction
from ..core.exceptions import IncompleteHistoryError, ValidationError
from ..models import HistoryEntry
from .pagination import PaginationCursor

if TYPE_CHECKING:
    from ..clients.collection import Collection

logger = logging.getLogger(__name__)


def validate_timestamp(at: Any) -> int:
    """Ensure ``at`` is a positive integer (booleans rejected).

    Raises:
        ValidationError: If ``at`` is not a positive integer
    """
    if isinstance(at, bool) or not isinstance(at, int) or at <= 0:
        raise ValidationError("Invalid argument, expected a positive integer.")
    return at


class SnapshotReconstructor:
    """Rebuilds the record list of a collection as of a timestamp."""

    @staticmethod
    def replay(entries: Iterable[HistoryEntry | Mapping[str, Any]]) -> list[dict[str, Any]]:
        """Fold a newest-first history feed into the list of live records.

        Args:
            entries: History entries ordered by descending modification time

        Returns:
            Records sorted by descending ``last_modified``
        """
        seen: set[Any] = set()
        snapshot: dict[Any, dict[str, Any]] = {}
        for raw in entries:
            entry = raw if isinstance(raw, HistoryEntry) else HistoryEntry.model_validate(raw)
            record = entry.target.data
            record_id = record.get("id")
            if entry.action is HistoryAction.DELETE:
                seen.add(record_id)
                snapshot.pop(record_id, None)
            elif record_id not in seen:
                seen.add(record_id)
                snapshot[record_id] = dict(record)
        return sorted(
            snapshot.values(), key=lambda r: r.get("last_modified") or 0, reverse=True
        )

    @staticmethod
    async def is_history_complete(collection: Collection) -> bool:
        # The collection creation event being present means every record
        # change since then has been tracked.
        cursor = await collection.bucket.list_history(
            limit=1,
            filters={
                "action": HistoryAction.CREATE.value,
                "resource_name": "collection",
                "collection_id": collection.name,
            },
        )
        return bool(cursor.data)

    @classmethod
    async def list_changes_back_to(cls, collection: Collection, at: int) -> list[HistoryEntry]:
        """Fetch every record change of ``collection`` up to ``at`` included.

        Raises:
            IncompleteHistoryError: If history does not cover the collection creation
        """
        if not await cls.is_history_complete(collection):
            raise IncompleteHistoryError(
                "Computing a snapshot is only possible when the full history for a "
                "collection is available. Here, the history plugin seems to have "
                "been enabled after the creation of the collection."
            )
        cursor = await collection.bucket.list_history(
            pages=math.inf,
            sort="-target.data.last_modified",
            filters={
                "resource_name": "record",
                "collection_id": collection.name,
                "max_target.data.last_modified": str(at),
            },
        )
        return [HistoryEntry.model_validate(entry) for entry in cursor.data]

    @classmethod
    async def snapshot(cls, collection: Collection, at: int) -> PaginationCursor[dict[str, Any]]:
        """Compute the records list of ``collection`` as it was at ``at``.

        Raises:
            ValidationError: If ``at`` is not a positive integer
            IncompleteHistoryError: If history does not cover the collection creation
        """
        at = validate_timestamp(at)
        changes = await cls.list_changes_back_to(collection, at)
        records = cls.replay(changes)
        logger.debug(
            "snapshot_computed",
            extra={"collection": collection.name, "at": at, "changes": len(changes)},
        )
        return PaginationCursor(
            last_modified=str(at),
            data=records,
            has_next_page=False,
            total_records=len(records),
            _exhausted_message="Snapshots don't support pagination",
        )


__all__ = ["SnapshotReconstructor", "validate_timestamp"]
