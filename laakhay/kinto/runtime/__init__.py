"""Runtime layer: transport, batching, pagination and snapshots."""

from .aggregate import AggregateClassifier
from .batch import BatchOrchestrator
from .pagination import ListParams, PaginationCursor, PaginationWalker
from .rest import HTTPClient
from .snapshot import SnapshotReconstructor

__all__ = [
    "AggregateClassifier",
    "BatchOrchestrator",
    "HTTPClient",
    "ListParams",
    "PaginationCursor",
    "PaginationWalker",
    "SnapshotReconstructor",
]
