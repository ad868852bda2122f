"""Client layer: live and recording clients plus resource handles."""

from .base import BaseClient
from .bucket import Bucket
from .client import KintoClient
from .collection import Collection
from .recording import RecordingClient
from .state import ServerState

__all__ = [
    "BaseClient",
    "Bucket",
    "Collection",
    "KintoClient",
    "RecordingClient",
    "ServerState",
]
