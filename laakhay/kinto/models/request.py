"""Wire request and batch envelope models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import HttpMethod


class WireRequest(BaseModel):
    """One logical read or mutation, ready to be sent or batched."""

    method: HttpMethod = HttpMethod.GET
    path: str = Field(..., min_length=1)
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any | None = None

    model_config = ConfigDict(frozen=True)

    def as_batch_entry(self) -> dict[str, Any]:
        """Serialize for a batch envelope (an absent body is omitted)."""
        entry: dict[str, Any] = {
            "method": self.method.value,
            "path": self.path,
            "headers": dict(self.headers),
        }
        if self.body is not None:
            entry["body"] = self.body
        return entry


class BatchDefaults(BaseModel):
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class BatchEnvelope(BaseModel):
    """Body of one outer ``POST /batch`` call."""

    defaults: BatchDefaults = Field(default_factory=BatchDefaults)
    requests: list[WireRequest] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def to_body(self) -> dict[str, Any]:
        return {
            "defaults": {"headers": dict(self.defaults.headers)},
            "requests": [request.as_batch_entry() for request in self.requests],
        }
