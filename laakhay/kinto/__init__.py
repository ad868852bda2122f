"""Laakhay Kinto - Async client for Kinto protocol v1 servers."""

from .api import ConcurrencyHeaderPolicy, RequestBuilder
from .clients import (
    BaseClient,
    Bucket,
    Collection,
    KintoClient,
    RecordingClient,
    ServerState,
)
from .config import ClientOptions
from .core import (
    BatchError,
    CapabilityError,
    HistoryAction,
    HttpMethod,
    IncompleteHistoryError,
    KintoError,
    NetworkTimeoutError,
    OperationKind,
    PaginationExhaustedError,
    PatchOperation,
    PreconditionError,
    ServerResponseError,
    UnparseableResponseError,
    ValidationError,
)
from .models import (
    AggregateResult,
    Conflict,
    ErrorEntry,
    HistoryEntry,
    ServerInfo,
    ServerSettings,
    SubResponse,
    WireRequest,
    WireResponse,
)
from .runtime import (
    AggregateClassifier,
    BatchOrchestrator,
    HTTPClient,
    ListParams,
    PaginationCursor,
    PaginationWalker,
    SnapshotReconstructor,
)

__all__ = [
    # Clients
    "BaseClient",
    "Bucket",
    "ClientOptions",
    "Collection",
    "KintoClient",
    "RecordingClient",
    "ServerState",
    # Orchestration
    "AggregateClassifier",
    "BatchOrchestrator",
    "ConcurrencyHeaderPolicy",
    "HTTPClient",
    "ListParams",
    "PaginationCursor",
    "PaginationWalker",
    "RequestBuilder",
    "SnapshotReconstructor",
    # Models
    "AggregateResult",
    "Conflict",
    "ErrorEntry",
    "HistoryEntry",
    "ServerInfo",
    "ServerSettings",
    "SubResponse",
    "WireRequest",
    "WireResponse",
    # Enums
    "HistoryAction",
    "HttpMethod",
    "OperationKind",
    "PatchOperation",
    # Errors
    "BatchError",
    "CapabilityError",
    "IncompleteHistoryError",
    "KintoError",
    "NetworkTimeoutError",
    "PaginationExhaustedError",
    "PreconditionError",
    "ServerResponseError",
    "UnparseableResponseError",
    "ValidationError",
]
