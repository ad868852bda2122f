"""Request construction layer."""

from .concurrency import ConcurrencyHeaderPolicy
from .request_builder import RequestBuilder

__all__ = ["ConcurrencyHeaderPolicy", "RequestBuilder"]
