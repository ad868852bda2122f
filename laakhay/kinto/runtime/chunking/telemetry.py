"""Structured logging for batch chunking.

This module provides telemetry hooks for chunked batch execution, emitting
structured logs for observability.
"""

from __future__ import annotations

import logging

from .definitions import ChunkResult

logger = logging.getLogger(__name__)


def log_chunk_plan(
    *,
    total_chunks: int,
    total_requests: int,
    max_requests: int | None = None,
) -> None:
    """Log chunk plan creation.

    Args:
        total_chunks: Total number of outer calls planned
        total_requests: Total number of recorded sub-requests
        max_requests: Server limit per outer call (None if unlimited)
    """
    logger.info(
        "batch_chunk_plan_created",
        extra={
            "total_chunks": total_chunks,
            "total_requests": total_requests,
            "max_requests": max_requests,
        },
    )


def log_chunk_completed(
    *,
    chunk_index: int,
    requests: int,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single chunk.

    Args:
        chunk_index: Zero-based index of the chunk
        requests: Number of sub-requests in the chunk
        latency_ms: Latency in milliseconds (optional)
    """
    logger.info(
        "batch_chunk_completed",
        extra={
            "chunk_index": chunk_index,
            "requests": requests,
            "latency_ms": latency_ms,
        },
    )


def log_chunk_execution_complete(
    *,
    result: ChunkResult,
    total_latency_ms: float | None = None,
) -> None:
    logger.info(
        "batch_execution_complete",
        extra={
            "chunks_used": result.chunks_used,
            "total_requests": result.total_requests,
            "total_latency_ms": total_latency_ms,
        },
    )


def log_chunk_error(
    *,
    chunk_index: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log chunk execution error.

    Args:
        chunk_index: Zero-based index of the chunk that failed
        error_type: Type of error (e.g., "ServerResponseError")
        error_message: Error message
    """
    logger.error(
        "batch_chunk_error",
        extra={
            "chunk_index": chunk_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
