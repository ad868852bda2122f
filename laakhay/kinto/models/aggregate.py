"""Aggregated outcome of a batch operation."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .request import WireRequest


class Conflict(BaseModel):
    """A 412 outcome: what we sent versus what the server holds."""

    type: Literal["outgoing"] = "outgoing"
    local: Any = None
    remote: Any = None

    model_config = ConfigDict(frozen=True)


class ErrorEntry(BaseModel):
    """A server fault (>= 500) on one sub-request."""

    path: str
    sent: WireRequest
    error: Any = None

    model_config = ConfigDict(frozen=True)


class AggregateResult(BaseModel):
    """Four-way classification of a batch's sub-responses."""

    published: list[Any] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
    skipped: list[Any] = Field(default_factory=list)
    errors: list[ErrorEntry] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.published) + len(self.conflicts) + len(self.skipped) + len(self.errors)
