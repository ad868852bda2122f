"""Core components."""

from . import endpoints
from .capabilities import ensure_api_version, ensure_capabilities
from .enums import HistoryAction, HttpMethod, OperationKind, PatchOperation
from .exceptions import (
    ERROR_CODES,
    BatchError,
    CapabilityError,
    IncompleteHistoryError,
    KintoError,
    NetworkTimeoutError,
    PaginationExhaustedError,
    PreconditionError,
    ServerResponseError,
    UnparseableResponseError,
    ValidationError,
)

__all__ = [
    "endpoints",
    "ensure_api_version",
    "ensure_capabilities",
    # Enums
    "HistoryAction",
    "HttpMethod",
    "OperationKind",
    "PatchOperation",
    # Errors
    "ERROR_CODES",
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
