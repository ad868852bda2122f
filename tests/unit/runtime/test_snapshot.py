"""Unit tests for snapshot reconstruction from the history feed."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest

from laakhay.kinto.core.exceptions import (
    BatchError,
    CapabilityError,
    IncompleteHistoryError,
    PaginationExhaustedError,
    ValidationError,
)
from laakhay.kinto.models import HistoryEntry
from laakhay.kinto.runtime.snapshot import SnapshotReconstructor, validate_timestamp


def _entry(action: str, record_id: str, last_modified: int) -> dict:
    return {
        "action": action,
        "resource_name": "record",
        "collection_id": "c",
        "record_id": record_id,
        "last_modified": last_modified,
        "target": {
            "data": {"id": record_id, "last_modified": last_modified},
            "permissions": {"write": ["account:alice"]},
        },
    }


COLLECTION_CREATED = {
    "action": "create",
    "resource_name": "collection",
    "collection_id": "c",
    "target": {"data": {"id": "c", "last_modified": 1}, "permissions": {}},
}


class TestReplay:
    """The replay fold over literal history fixtures."""

    def test_later_delete_supersedes_create(self):
        feed = [
            _entry("delete", "1", 30),
            _entry("create", "1", 10),
            _entry("create", "2", 20),
        ]

        assert SnapshotReconstructor.replay(feed) == [{"id": "2", "last_modified": 20}]

    def test_latest_update_wins(self):
        feed = [
            _entry("update", "1", 25),
            _entry("update", "1", 15),
            _entry("create", "1", 5),
            _entry("create", "2", 20),
        ]

        assert SnapshotReconstructor.replay(feed) == [
            {"id": "1", "last_modified": 25},
            {"id": "2", "last_modified": 20},
        ]

    def test_sorted_by_descending_last_modified(self):
        feed = [_entry("create", "a", 3), _entry("create", "b", 9), _entry("create", "c", 6)]

        result = SnapshotReconstructor.replay(feed)

        assert [r["id"] for r in result] == ["b", "c", "a"]

    def test_accepts_models(self):
        feed = [HistoryEntry.model_validate(_entry("create", "1", 10))]
        assert SnapshotReconstructor.replay(feed) == [{"id": "1", "last_modified": 10}]

    def test_empty_feed(self):
        assert SnapshotReconstructor.replay([]) == []


class TestValidateTimestamp:
    @pytest.mark.parametrize("at", [0, -1, True, 1.5, "10", None])
    def test_invalid(self, at):
        with pytest.raises(ValidationError, match="expected a positive integer"):
            validate_timestamp(at)

    def test_valid(self):
        assert validate_timestamp(25) == 25


class TestCollectionSnapshot:
    """Snapshot through a collection with a mocked transport."""

    @pytest.mark.asyncio
    async def test_snapshot(self, client, http, make_response, hello):
        http.request.side_effect = [
            make_response(hello),
            make_response({"data": [COLLECTION_CREATED]}),
            make_response(
                {
                    "data": [
                        _entry("delete", "1", 30),
                        _entry("create", "1", 10),
                        _entry("create", "2", 20),
                    ]
                }
            ),
        ]
        collection = client.bucket("b").collection("c")

        cursor = await collection.get_snapshot(25)

        assert cursor.data == [{"id": "2", "last_modified": 20}]
        assert cursor.last_modified == "25"
        assert cursor.has_next_page is False
        assert cursor.total_records == 1
        with pytest.raises(PaginationExhaustedError, match="Snapshots don't support pagination"):
            await cursor.next()

        completeness_url = urlsplit(http.request.call_args_list[1].args[0])
        assert completeness_url.path == "/v1/buckets/b/history"
        assert parse_qs(completeness_url.query) == {
            "action": ["create"],
            "resource_name": ["collection"],
            "collection_id": ["c"],
            "_sort": ["-last_modified"],
            "_limit": ["1"],
        }
        changes_query = parse_qs(urlsplit(http.request.call_args_list[2].args[0]).query)
        assert changes_query == {
            "resource_name": ["record"],
            "collection_id": ["c"],
            "max_target.data.last_modified": ["25"],
            "_sort": ["-target.data.last_modified"],
        }

    @pytest.mark.asyncio
    async def test_list_records_at(self, client, http, make_response, hello):
        http.request.side_effect = [
            make_response(hello),
            make_response({"data": [COLLECTION_CREATED]}),
            make_response({"data": [_entry("create", "1", 10)]}),
        ]

        cursor = await client.bucket("b").collection("c").list_records(at=12)

        assert cursor.data == [{"id": "1", "last_modified": 10}]

    @pytest.mark.asyncio
    async def test_incomplete_history(self, client, http, make_response, hello):
        http.request.side_effect = [make_response(hello), make_response({"data": []})]

        with pytest.raises(IncompleteHistoryError):
            await client.bucket("b").collection("c").get_snapshot(25)

        assert http.request.call_count == 2

    @pytest.mark.asyncio
    async def test_invalid_timestamp_before_any_request(self, client, http):
        with pytest.raises(ValidationError):
            await client.bucket("b").collection("c").get_snapshot(-5)

        http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_requires_history_capability(self, client, http, make_response, hello):
        hello["capabilities"] = {}
        http.request.side_effect = [make_response(hello)]

        with pytest.raises(CapabilityError) as exc_info:
            await client.bucket("b").collection("c").get_snapshot(25)

        assert exc_info.value.missing == ["history"]

    @pytest.mark.asyncio
    async def test_not_available_in_batch(self, client, http):
        async def operations(collection):
            await collection.get_snapshot(25)

        with pytest.raises(BatchError):
            await client.batch(operations, bucket="b", collection="c")

        http.request.assert_not_called()
