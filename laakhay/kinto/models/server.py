"""Server root endpoint ("hello") payload."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ServerSettings(BaseModel):
    """Public server settings; only a few keys matter to the client."""

    readonly: bool = False
    batch_max_requests: int | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class ServerInfo(BaseModel):
    project_name: str = ""
    project_version: str = ""
    http_api_version: str = ""
    project_docs: str = ""
    url: str = ""
    settings: ServerSettings = Field(default_factory=ServerSettings)
    capabilities: dict[str, dict[str, Any]] = Field(default_factory=dict)
    user: dict[str, Any] | None = None

    model_config = ConfigDict(frozen=True, extra="allow")
