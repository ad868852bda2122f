"""Chunking layer for batch requests.

This module splits a recorded list of sub-requests into outer batch calls
bounded by the server's ``batch_max_requests`` setting.

Architecture:
    The chunking layer consists of:
    - definitions.py: Chunk metadata structures (ChunkPolicy, ChunkPlan, ChunkResult)
    - planners.py: Chunk planning logic (contiguous, order-preserving slices)
    - executors.py: Chunk execution logic (sequential sends, flattening)
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .definitions import ChunkPlan, ChunkPolicy, ChunkResult
from .executors import ChunkExecutor
from .planners import ChunkPlanner

__all__ = [
    "ChunkPolicy",
    "ChunkResult",
    "ChunkPlan",
    "ChunkPlanner",
    "ChunkExecutor",
]
