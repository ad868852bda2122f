"""History feed entry model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import HistoryAction


class HistoryTarget(BaseModel):
    """Resource state carried by a history entry."""

    data: dict[str, Any] = Field(default_factory=dict)
    permissions: dict[str, list[str]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="allow")


class HistoryEntry(BaseModel):
    """A single server-produced change event.

    Entries are append-only; the client never mutates them. Only ``action``
    and ``target`` are needed for snapshot replay, the remaining fields are
    kept for callers that inspect the feed.
    """

    action: HistoryAction
    target: HistoryTarget
    id: str | None = None
    resource_name: str | None = None
    collection_id: str | None = None
    record_id: str | None = None
    uri: str | None = None
    user_id: str | None = None
    date: str | None = None
    last_modified: int | None = None
    timestamp: int | None = None

    model_config = ConfigDict(frozen=True, extra="allow")
