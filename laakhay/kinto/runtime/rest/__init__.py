"""REST runtime abstractions."""

from .http_client import HTTPClient, obscure_authorization_header

__all__ = [
    "HTTPClient",
    "obscure_authorization_header",
]
