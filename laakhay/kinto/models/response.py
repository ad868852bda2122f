"""Transport and batch response models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from multidict import CIMultiDict, CIMultiDictProxy
from pydantic import BaseModel, ConfigDict, Field


def _empty_headers() -> CIMultiDictProxy[str]:
    return CIMultiDictProxy(CIMultiDict())


@dataclass(frozen=True)
class WireResponse:
    """Normalized result of one HTTP round trip.

    Header lookups are case-insensitive. ``body`` is ``None`` when the server
    sent an empty payload.
    """

    status: int
    headers: CIMultiDictProxy[str] = field(default_factory=_empty_headers)
    body: Any = None


class SubResponse(BaseModel):
    """One element of a batch reply, correlated to its request by position."""

    status: int
    path: str = ""
    body: Any = None
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)
