"""Async HTTP transport.

Architecture:
    ``HTTPClient`` executes exactly one HTTP call per attempt and normalizes
    the outcome into a ``WireResponse``. After every round trip it inspects
    the server backpressure headers and notifies registered listeners:

    - ``Alert``: deprecation notice, emitted as ``"deprecated"``
    - ``Backoff``: advisory throttle window, emitted as ``"backoff"`` with the
      absolute release time (epoch seconds)
    - ``Retry-After``: emitted as ``"retry-after"`` with the absolute release
      time, and retried after the delay while the call's retry budget lasts

Design Decisions:
    - Fixed delay retry bounded by a per-call budget (no global default)
    - Listener failures are logged and never break a request
    - Timeouts surface as NetworkTimeoutError with credentials obscured
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy

from ...config import DEFAULT_REQUEST_HEADERS
from ...core.enums import HttpMethod
from ...core.exceptions import (
    NetworkTimeoutError,
    ServerResponseError,
    UnparseableResponseError,
)
from ...models import WireResponse

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]

EVENTS = ("deprecated", "backoff", "retry-after")


def obscure_authorization_header(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` with the Authorization value suppressed."""
    obscured = dict(headers)
    for key in obscured:
        if key.lower() == "authorization":
            obscured[key] = "**** (suppressed)"
    return obscured


class HTTPClient:
    """Async HTTP client wrapper."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None
        self._listeners: dict[str, list[Listener]] = {event: [] for event in EVENTS}

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def on(self, event: str, listener: Listener) -> None:
        """Register a listener for ``deprecated``, ``backoff`` or ``retry-after``."""
        if event not in self._listeners:
            raise ValueError(f"Unknown event: {event}")
        self._listeners[event].append(listener)

    def _emit(self, event: str, payload: Any) -> None:
        for listener in self._listeners[event]:
            try:
                listener(payload)
            except Exception:
                logger.warning("listener_failed", extra={"event": event}, exc_info=True)

    async def request(
        self,
        url: str,
        *,
        method: HttpMethod | str = HttpMethod.GET,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        retry: int = 0,
    ) -> WireResponse:
        """Perform a request and return the normalized response.

        Args:
            url: Absolute URL
            method: HTTP verb
            headers: Request headers, merged over the default JSON headers
            body: JSON-serializable body (None sends no body)
            retry: Number of Retry-After driven retries allowed for this call

        Raises:
            NetworkTimeoutError: If the configured timeout is exceeded
            UnparseableResponseError: If a non-empty body is not valid JSON
            ServerResponseError: If the final response status is >= 400
        """
        method = HttpMethod(method)
        merged = {**DEFAULT_REQUEST_HEADERS, **(headers or {})}
        data = json.dumps(body) if body is not None else None

        try:
            async with self.session.request(
                method.value, url, headers=merged, data=data
            ) as response:
                status = response.status
                reason = response.reason
                response_headers = CIMultiDictProxy(CIMultiDict(response.headers))
                text = await response.text()
        except asyncio.TimeoutError as e:
            raise NetworkTimeoutError(
                url,
                {
                    "method": method.value,
                    "headers": obscure_authorization_header(merged),
                    "body": body,
                },
            ) from e

        self._check_for_deprecation_header(response_headers)
        self._check_for_backoff_header(response_headers)
        retry_after = self._check_for_retry_after_header(response_headers)

        if retry_after is not None and retry > 0:
            logger.info(
                "retry_after_scheduled",
                extra={"url": url, "status": status, "delay": retry_after, "retry": retry},
            )
            await asyncio.sleep(retry_after)
            return await self.request(
                url, method=method, headers=headers, body=body, retry=retry - 1
            )

        return self._process_response(status, response_headers, text, reason)

    def _process_response(
        self,
        status: int,
        headers: CIMultiDictProxy[str],
        text: str,
        reason: str | None,
    ) -> WireResponse:
        payload: Any = None
        if text:
            try:
                payload = json.loads(text)
            except ValueError as e:
                raise UnparseableResponseError(status, text, e) from e
        if status >= 400:
            raise ServerResponseError(status, payload, reason=reason)
        return WireResponse(status=status, headers=headers, body=payload)

    def _check_for_deprecation_header(self, headers: CIMultiDictProxy[str]) -> None:
        alert_header = headers.get("Alert")
        if not alert_header:
            return
        try:
            alert = json.loads(alert_header)
        except ValueError:
            logger.warning("server_alert_unparseable", extra={"alert": alert_header})
            return
        logger.warning(
            "server_alert",
            extra={"alert_message": alert.get("message"), "alert_url": alert.get("url")},
        )
        self._emit("deprecated", alert)

    def _check_for_backoff_header(self, headers: CIMultiDictProxy[str]) -> None:
        backoff_header = headers.get("Backoff")
        if backoff_header is None:
            return
        seconds = _parse_seconds(backoff_header)
        release_time = time.time() + seconds if seconds > 0 else 0.0
        logger.info("backoff_received", extra={"seconds": seconds})
        self._emit("backoff", release_time)

    def _check_for_retry_after_header(self, headers: CIMultiDictProxy[str]) -> float | None:
        retry_after = headers.get("Retry-After")
        if not retry_after:
            return None
        delay = _parse_seconds(retry_after)
        self._emit("retry-after", time.time() + delay)
        return delay

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


def _parse_seconds(value: str) -> int:
    try:
        return max(int(value), 0)
    except ValueError:
        logger.warning("invalid_delay_header", extra={"value": value})
        return 0
