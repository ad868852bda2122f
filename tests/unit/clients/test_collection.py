"""Unit tests for the Collection resource client."""

from __future__ import annotations

import pytest

from laakhay.kinto import KintoClient
from laakhay.kinto.core.enums import HttpMethod
from laakhay.kinto.core.exceptions import PreconditionError, ValidationError

REMOTE = "https://kinto.example.com/v1"
RECORDS = f"{REMOTE}/buckets/blog/collections/articles/records"


@pytest.fixture
def articles(client):
    return client.bucket("blog").collection("articles")


class TestCollectionRecords:
    @pytest.mark.asyncio
    async def test_create_record_without_id_posts(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {"id": "generated"}})]

        body = await articles.create_record({"title": "a"})

        args, kwargs = http.request.call_args
        assert body == {"data": {"id": "generated"}}
        assert args[0] == RECORDS
        assert kwargs["method"] == HttpMethod.POST
        assert kwargs["body"] == {"data": {"title": "a"}}

    @pytest.mark.asyncio
    async def test_create_record_with_id_puts(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await articles.create_record(
            {"id": "r1", "title": "a"}, permissions={"read": ["system.Everyone"]}
        )

        args, kwargs = http.request.call_args
        assert args[0] == f"{RECORDS}/r1"
        assert kwargs["method"] == HttpMethod.PUT
        assert kwargs["body"] == {
            "data": {"id": "r1", "title": "a"},
            "permissions": {"read": ["system.Everyone"]},
        }

    @pytest.mark.asyncio
    async def test_create_record_requires_mapping(self, articles, http):
        with pytest.raises(ValidationError):
            await articles.create_record("r1")
        http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_record_safe_if_match(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await articles.update_record({"id": "r1", "title": "b", "last_modified": 42}, safe=True)

        args, kwargs = http.request.call_args
        assert args[0] == f"{RECORDS}/r1"
        assert kwargs["method"] == HttpMethod.PUT
        assert kwargs["headers"] == {"If-Match": '"42"'}

    @pytest.mark.asyncio
    async def test_update_record_safe_without_version(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await articles.update_record({"id": "r1", "title": "b"}, safe=True)

        assert http.request.call_args.kwargs["headers"] == {"If-None-Match": "*"}

    @pytest.mark.asyncio
    async def test_update_record_patch(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await articles.update_record({"id": "r1", "title": "b"}, patch=True)

        assert http.request.call_args.kwargs["method"] == HttpMethod.PATCH

    @pytest.mark.asyncio
    async def test_update_record_requires_id(self, articles, http):
        with pytest.raises(ValidationError):
            await articles.update_record({"title": "b"})
        http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_record_version_from_record(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {"deleted": True}})]

        await articles.delete_record({"id": "r1", "last_modified": 10}, safe=True)

        args, kwargs = http.request.call_args
        assert args[0] == f"{RECORDS}/r1"
        assert kwargs["method"] == HttpMethod.DELETE
        assert kwargs["headers"] == {"If-Match": '"10"'}

    @pytest.mark.asyncio
    async def test_explicit_last_modified_wins(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await articles.delete_record({"id": "r1", "last_modified": 10}, last_modified=11, safe=True)

        assert http.request.call_args.kwargs["headers"] == {"If-Match": '"11"'}

    @pytest.mark.asyncio
    async def test_safe_delete_without_version_sends_nothing(self, articles, http):
        with pytest.raises(PreconditionError):
            await articles.delete_record("r1", safe=True)

        http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_record_fields(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {"id": "r1", "title": "a"}})]

        body = await articles.get_record("r1", fields=["title", "id"])

        assert body == {"data": {"id": "r1", "title": "a"}}
        assert http.request.call_args.args[0] == f"{RECORDS}/r1?_fields=title,id"

    @pytest.mark.asyncio
    async def test_list_records(self, articles, http, make_response):
        http.request.side_effect = [
            make_response({"data": [{"id": "r1"}]}, headers={"ETag": '"5"'}),
        ]

        cursor = await articles.list_records(sort="title", since='"3"')

        assert cursor.data == [{"id": "r1"}]
        assert cursor.last_modified == "5"
        assert http.request.call_args.args[0] == f'{RECORDS}?_sort=title&_since=%223%22'

    @pytest.mark.asyncio
    async def test_list_records_invalid_at(self, articles, http):
        with pytest.raises(ValidationError):
            await articles.list_records(at=0)
        http.request.assert_not_called()


class TestCollectionInfo:
    @pytest.mark.asyncio
    async def test_total_records(self, articles, http, make_response):
        http.request.side_effect = [make_response(None, headers={"Total-Records": "12"})]

        assert await articles.get_total_records() == 12
        args, kwargs = http.request.call_args
        assert args[0] == RECORDS
        assert kwargs["method"] == HttpMethod.HEAD

    @pytest.mark.asyncio
    async def test_total_records_missing_header(self, articles, http, make_response):
        http.request.side_effect = [make_response(None)]
        assert await articles.get_total_records() is None

    @pytest.mark.asyncio
    async def test_records_timestamp(self, articles, http, make_response):
        http.request.side_effect = [make_response(None, headers={"ETag": '"77"'})]
        assert await articles.get_records_timestamp() == '"77"'

    @pytest.mark.asyncio
    async def test_get_data(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {"id": "articles"}})]

        assert await articles.get_data() == {"id": "articles"}
        assert http.request.call_args.args[0] == f"{REMOTE}/buckets/blog/collections/articles"

    @pytest.mark.asyncio
    async def test_set_data(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await articles.set_data({"schema": {"type": "object"}, "last_modified": 4}, safe=True)

        kwargs = http.request.call_args.kwargs
        assert kwargs["method"] == HttpMethod.PUT
        assert kwargs["headers"] == {"If-Match": '"4"'}

    @pytest.mark.asyncio
    async def test_get_permissions(self, articles, http, make_response):
        http.request.side_effect = [make_response({"data": {}, "permissions": {"read": []}})]
        assert await articles.get_permissions() == {"read": []}

    @pytest.mark.asyncio
    async def test_add_permissions(self, articles, http, make_response):
        http.request.side_effect = [make_response({})]

        await articles.add_permissions({"record:create": ["system.Authenticated"]})

        args, kwargs = http.request.call_args
        assert args[0] == f"{REMOTE}/buckets/blog/collections/articles"
        assert kwargs["body"] == [
            {"op": "add", "path": "/permissions/record:create/system.Authenticated"}
        ]


class TestCollectionHeaders:
    @pytest.mark.asyncio
    async def test_headers_merge_over_bucket_and_client(self, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]
        client = KintoClient(REMOTE, headers={"A": "client", "B": "client"}, http=http)
        collection = client.bucket("blog", headers={"B": "bucket", "C": "bucket"}).collection(
            "articles", headers={"C": "collection"}
        )

        await collection.get_record("r1", headers={"D": "call"})

        assert http.request.call_args.kwargs["headers"] == {
            "A": "client",
            "B": "bucket",
            "C": "collection",
            "D": "call",
        }

    @pytest.mark.asyncio
    async def test_retry_resolution(self, http, make_response):
        http.request.side_effect = [make_response({}), make_response({})]
        client = KintoClient(REMOTE, retry=1, http=http)
        collection = client.bucket("blog").collection("articles", retry=4)

        await collection.get_record("r1")
        await collection.get_record("r1", retry=0)

        assert [c.kwargs["retry"] for c in http.request.call_args_list] == [4, 0]
