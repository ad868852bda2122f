"""Shared fixtures for unit tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from multidict import CIMultiDict, CIMultiDictProxy

from laakhay.kinto import KintoClient
from laakhay.kinto.models import WireResponse
from laakhay.kinto.runtime.rest import HTTPClient

REMOTE = "https://kinto.example.com/v1"


def _response(body=None, status=200, headers=None) -> WireResponse:
    return WireResponse(
        status=status,
        headers=CIMultiDictProxy(CIMultiDict(headers or {})),
        body=body,
    )


@pytest.fixture
def make_response():
    """Factory building a WireResponse from a body, status and headers."""
    return _response


@pytest.fixture
def hello():
    """Root endpoint payload of a server with the usual plugins enabled."""
    return {
        "project_name": "kinto",
        "project_version": "14.0.0",
        "http_api_version": "1.22",
        "url": f"{REMOTE}/",
        "settings": {"readonly": False, "batch_max_requests": 25},
        "capabilities": {
            "history": {"description": "Track changes"},
            "permissions_endpoint": {},
            "accounts": {},
        },
    }


@pytest.fixture
def http():
    """Transport double; tests set ``http.request.side_effect``."""
    transport = MagicMock(spec=HTTPClient)
    transport.request = AsyncMock()
    transport.close = AsyncMock()
    return transport


@pytest.fixture
def client(http):
    return KintoClient(REMOTE, http=http)
