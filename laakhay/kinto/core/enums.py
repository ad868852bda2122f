"""Core enumerations shared by the request builders and clients.

Architecture:
    This module defines the small set of string enums used across the
    library. String enums serialize directly into wire requests and batch
    envelopes without conversion.

Key Types:
    - HttpMethod: Verbs accepted by the server and the batch endpoint
    - OperationKind: Logical mutation kinds handled by the RequestBuilder
    - HistoryAction: Actions recorded in a bucket history feed
    - PatchOperation: JSON-patch operations used for permission edits
"""

from enum import Enum


class HttpMethod(str, Enum):
    """HTTP verbs understood by the protocol (and allowed in a batch)."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"


class OperationKind(str, Enum):
    """Logical mutation kinds.

    The verb is derived from the kind and the request data: a create with an
    explicit id becomes a PUT, an update with ``patch=True`` becomes a PATCH.
    """

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class HistoryAction(str, Enum):
    """Actions recorded by the history plugin."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class PatchOperation(str, Enum):
    """JSON-patch operations supported on permissions."""

    ADD = "add"
    REMOVE = "remove"
