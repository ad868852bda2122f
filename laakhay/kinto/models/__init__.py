"""Data models exchanged with the server.

Architecture:
    This module exports the Pydantic v2 models and frozen dataclasses used by
    the transport, the batch orchestrator and the resource clients. Models
    built by the client (requests, envelopes) are immutable once built.

Model Categories:
    - Wire: WireRequest, WireResponse, BatchEnvelope, SubResponse
    - Batch outcome: AggregateResult, Conflict, ErrorEntry
    - History: HistoryEntry, HistoryTarget
    - Server: ServerInfo, ServerSettings
"""

from .aggregate import AggregateResult, Conflict, ErrorEntry
from .history import HistoryEntry, HistoryTarget
from .request import BatchDefaults, BatchEnvelope, WireRequest
from .response import SubResponse, WireResponse
from .server import ServerInfo, ServerSettings

__all__ = [
    "AggregateResult",
    "BatchDefaults",
    "BatchEnvelope",
    "Conflict",
    "ErrorEntry",
    "HistoryEntry",
    "HistoryTarget",
    "ServerInfo",
    "ServerSettings",
    "SubResponse",
    "WireRequest",
    "WireResponse",
]
