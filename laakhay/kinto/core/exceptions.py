"""Custom exception hierarchy."""

from __future__ import annotations

from typing import Any

# Server error codes ("errno") and their descriptions.
ERROR_CODES: dict[int, str] = {
    104: "Missing Authorization Token",
    105: "Invalid Authorization Token",
    106: "Request body was not valid JSON",
    107: "Invalid request parameter",
    108: "Missing request parameter",
    109: "Invalid posted data",
    110: "Invalid Token / id",
    111: "Missing Token / id",
    112: "Content-Length header was not provided",
    113: "Request body too large",
    114: "Resource was created, updated or deleted meanwhile",
    115: "Method not allowed on this end point (hint: server may be readonly)",
    116: "Requested version not available on this server",
    117: "Client has sent too many requests",
    121: "Resource access is forbidden for this user",
    122: "Another resource violates constraint",
    201: "Service Temporary unavailable due to high load",
    202: "Service deprecated",
    999: "Internal Server Error",
}


class KintoError(Exception):
    """Base exception for all library errors."""

    pass


class NetworkTimeoutError(KintoError):
    """The transport deadline was exceeded.

    The request is kept for diagnostics, with its ``Authorization`` header
    value obscured.
    """

    def __init__(self, url: str, request: dict[str, Any] | None = None) -> None:
        super().__init__(f"Timeout while trying to access {url}")
        self.url = url
        self.request = request or {}


class UnparseableResponseError(KintoError):
    """Response body could not be decoded as JSON."""

    def __init__(self, status: int, body: str, error: Exception) -> None:
        super().__init__(
            f"Response from server unparseable (HTTP {status or 0}; {error}): {body}"
        )
        self.status = status
        self.body = body
        self.error = error


class ServerResponseError(KintoError):
    """The server answered with a status >= 400.

    ``data`` holds the parsed JSON body, which may be ``None`` when the
    server sent an empty payload.
    """

    def __init__(self, status: int, data: Any = None, reason: str | None = None) -> None:
        message = f"HTTP {status} {_error_name(data)}: "
        errno = data.get("errno") if isinstance(data, dict) else None
        if errno in ERROR_CODES:
            errno_message = ERROR_CODES[errno]
            message += errno_message
            if data.get("message") and data["message"] != errno_message:
                message += f" ({data['message']})"
        else:
            message += reason or ""
        super().__init__(message.strip())
        self.status = status
        self.data = data


class ValidationError(KintoError):
    """Caller passed a malformed argument; raised before any network call."""

    pass


class PreconditionError(KintoError):
    """A safe operation cannot resolve the version token it needs."""

    pass


class PaginationExhaustedError(KintoError):
    """``next()`` was called on a cursor without a next page."""

    pass


class IncompleteHistoryError(KintoError):
    """History does not reach back to the collection creation."""

    pass


class CapabilityError(KintoError):
    """Server lacks a capability or runs an unsupported API version."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = missing or []


class BatchError(KintoError):
    """Operation is not usable in (or inconsistent with) a batch."""

    pass


def _error_name(data: Any) -> str:
    if isinstance(data, dict):
        return str(data.get("error") or "")
    return ""
