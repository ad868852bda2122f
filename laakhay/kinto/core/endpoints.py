"""Server endpoint path templates.

All paths are relative to the versioned remote URL (e.g. ``https://host/v1``).
"""

from __future__ import annotations


def root() -> str:
    return "/"


def batch() -> str:
    return "/batch"


def permissions() -> str:
    return "/permissions"


def account(username: str) -> str:
    return f"/accounts/{username}"


def bucket(bucket_id: str | None = None) -> str:
    return "/buckets" + (f"/{bucket_id}" if bucket_id else "")


def history(bucket_id: str) -> str:
    return f"{bucket(bucket_id)}/history"


def group(bucket_id: str, group_id: str | None = None) -> str:
    return f"{bucket(bucket_id)}/groups" + (f"/{group_id}" if group_id else "")


def collection(bucket_id: str, collection_id: str | None = None) -> str:
    return f"{bucket(bucket_id)}/collections" + (f"/{collection_id}" if collection_id else "")


def record(bucket_id: str, collection_id: str, record_id: str | None = None) -> str:
    return f"{collection(bucket_id, collection_id)}/records" + (
        f"/{record_id}" if record_id else ""
    )
