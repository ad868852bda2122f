"""Unit tests for the Bucket resource client."""

from __future__ import annotations

import pytest

from laakhay.kinto.core.enums import HttpMethod
from laakhay.kinto.core.exceptions import CapabilityError, PreconditionError, ValidationError

REMOTE = "https://kinto.example.com/v1"


class TestBucketOptions:
    def test_inherits_client_options(self, http):
        from laakhay.kinto import KintoClient

        client = KintoClient(REMOTE, safe=True, retry=2, headers={"A": "1"}, http=http)
        bucket = client.bucket("blog", headers={"B": "2"})

        assert bucket.safe is True
        assert bucket.retry == 2
        assert bucket.headers == {"A": "1", "B": "2"}

    def test_collection_overrides(self, client):
        collection = client.bucket("blog").collection("articles", safe=True, retry=1)

        assert collection.safe is True
        assert collection.retry == 1
        assert repr(collection) == "Collection(bucket='blog', name='articles')"


class TestBucketData:
    @pytest.mark.asyncio
    async def test_get_data(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {"id": "blog", "title": "Blog"}})]

        data = await client.bucket("blog").get_data(fields=["title"])

        assert data == {"id": "blog", "title": "Blog"}
        assert http.request.call_args.args[0] == f"{REMOTE}/buckets/blog?_fields=title"

    @pytest.mark.asyncio
    async def test_set_data_adds_bucket_id(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await client.bucket("blog").set_data({"title": "Blog"})

        kwargs = http.request.call_args.kwargs
        assert kwargs["method"] == HttpMethod.PUT
        assert kwargs["body"] == {"data": {"title": "Blog", "id": "blog"}}

    @pytest.mark.asyncio
    async def test_default_bucket_drops_id(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await client.bucket("default").set_data({"title": "Mine", "id": "default"}, patch=True)

        kwargs = http.request.call_args.kwargs
        assert kwargs["method"] == HttpMethod.PATCH
        assert kwargs["body"] == {"data": {"title": "Mine"}}

    @pytest.mark.asyncio
    async def test_set_data_requires_mapping(self, client, http):
        with pytest.raises(ValidationError):
            await client.bucket("blog").set_data(["title"])
        http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_set_data_safe_uses_last_modified(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await client.bucket("blog").set_data({"title": "Blog", "last_modified": 7}, safe=True)

        assert http.request.call_args.kwargs["headers"] == {"If-Match": '"7"'}


class TestBucketPermissions:
    @pytest.mark.asyncio
    async def test_get_permissions(self, client, http, make_response):
        http.request.side_effect = [
            make_response({"data": {}, "permissions": {"write": ["account:alice"]}})
        ]

        assert await client.bucket("blog").get_permissions() == {"write": ["account:alice"]}

    @pytest.mark.asyncio
    async def test_set_permissions_keeps_data(self, client, http, make_response):
        http.request.side_effect = [make_response({})]

        await client.bucket("blog").set_permissions({"read": ["system.Everyone"]})

        kwargs = http.request.call_args.kwargs
        assert kwargs["method"] == HttpMethod.PUT
        assert kwargs["body"] == {"permissions": {"read": ["system.Everyone"]}}

    @pytest.mark.asyncio
    async def test_add_permissions_json_patch(self, client, http, make_response):
        http.request.side_effect = [make_response({})]

        await client.bucket("blog").add_permissions(
            {"read": ["system.Everyone"], "write": ["account:alice", "account:bob"]}
        )

        kwargs = http.request.call_args.kwargs
        assert kwargs["method"] == HttpMethod.PATCH
        assert kwargs["headers"]["Content-Type"] == "application/json-patch+json"
        assert kwargs["body"] == [
            {"op": "add", "path": "/permissions/read/system.Everyone"},
            {"op": "add", "path": "/permissions/write/account:alice"},
            {"op": "add", "path": "/permissions/write/account:bob"},
        ]

    @pytest.mark.asyncio
    async def test_remove_permissions(self, client, http, make_response):
        http.request.side_effect = [make_response({})]

        await client.bucket("blog").remove_permissions({"read": ["system.Everyone"]})

        assert http.request.call_args.kwargs["body"] == [
            {"op": "remove", "path": "/permissions/read/system.Everyone"}
        ]


class TestBucketCollections:
    @pytest.mark.asyncio
    async def test_create_collection(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {"id": "articles"}})]

        await client.bucket("blog").create_collection("articles", data={"schema": {}})

        args, kwargs = http.request.call_args
        assert args[0] == f"{REMOTE}/buckets/blog/collections/articles"
        assert kwargs["method"] == HttpMethod.PUT
        assert kwargs["body"] == {"data": {"schema": {}, "id": "articles"}}

    @pytest.mark.asyncio
    async def test_create_collection_without_id(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {"id": "x"}})]

        await client.bucket("blog").create_collection()

        args, kwargs = http.request.call_args
        assert args[0] == f"{REMOTE}/buckets/blog/collections"
        assert kwargs["method"] == HttpMethod.POST

    @pytest.mark.asyncio
    async def test_safe_delete_collection_without_version(self, client, http):
        with pytest.raises(PreconditionError):
            await client.bucket("blog").delete_collection("articles", safe=True)
        http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_collection_from_data(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {"deleted": True}})]

        await client.bucket("blog").delete_collection(
            {"id": "articles", "last_modified": 12}, safe=True
        )

        args, kwargs = http.request.call_args
        assert args[0] == f"{REMOTE}/buckets/blog/collections/articles"
        assert kwargs["headers"] == {"If-Match": '"12"'}

    @pytest.mark.asyncio
    async def test_list_collections(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": [{"id": "articles"}]})]

        cursor = await client.bucket("blog").list_collections(limit=5)

        assert cursor.data == [{"id": "articles"}]
        assert http.request.call_args.args[0] == (
            f"{REMOTE}/buckets/blog/collections?_sort=-last_modified&_limit=5"
        )

    @pytest.mark.asyncio
    async def test_collections_timestamp(self, client, http, make_response):
        http.request.side_effect = [make_response(None, headers={"ETag": '"1234"'})]

        assert await client.bucket("blog").get_collections_timestamp() == '"1234"'
        assert http.request.call_args.kwargs["method"] == HttpMethod.HEAD

    @pytest.mark.asyncio
    async def test_delete_collections_checks_version(self, client, http, make_response, hello):
        hello["http_api_version"] = "1.0"
        http.request.side_effect = [make_response(hello)]

        with pytest.raises(CapabilityError):
            await client.bucket("blog").delete_collections()


class TestBucketGroups:
    @pytest.mark.asyncio
    async def test_create_group(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await client.bucket("blog").create_group("editors", ["account:alice"])

        args, kwargs = http.request.call_args
        assert args[0] == f"{REMOTE}/buckets/blog/groups/editors"
        assert kwargs["method"] == HttpMethod.PUT
        assert kwargs["body"] == {"data": {"members": ["account:alice"], "id": "editors"}}

    @pytest.mark.asyncio
    async def test_update_group_requires_id(self, client, http):
        with pytest.raises(ValidationError):
            await client.bucket("blog").update_group({"members": []})
        http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_group(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {}})]

        await client.bucket("blog").update_group(
            {"id": "editors", "members": ["account:bob"], "last_modified": 3}, safe=True
        )

        args, kwargs = http.request.call_args
        assert args[0] == f"{REMOTE}/buckets/blog/groups/editors"
        assert kwargs["headers"] == {"If-Match": '"3"'}

    @pytest.mark.asyncio
    async def test_get_group(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {"id": "editors"}})]

        body = await client.bucket("blog").get_group("editors", query={"_expected": 5})

        assert body == {"data": {"id": "editors"}}
        assert http.request.call_args.args[0] == (
            f"{REMOTE}/buckets/blog/groups/editors?_expected=5"
        )

    @pytest.mark.asyncio
    async def test_groups_timestamp_uses_head(self, client, http, make_response):
        http.request.side_effect = [make_response(None, headers={"etag": '"99"'})]

        timestamp = await client.bucket("blog").get_groups_timestamp()

        args, kwargs = http.request.call_args
        assert timestamp == '"99"'
        assert args[0] == f"{REMOTE}/buckets/blog/groups"
        assert kwargs["method"] == HttpMethod.HEAD

    @pytest.mark.asyncio
    async def test_delete_group(self, client, http, make_response):
        http.request.side_effect = [make_response({"data": {"deleted": True}})]

        await client.bucket("blog").delete_group("editors")

        args, kwargs = http.request.call_args
        assert args[0] == f"{REMOTE}/buckets/blog/groups/editors"
        assert kwargs["method"] == HttpMethod.DELETE


class TestBucketHistory:
    @pytest.mark.asyncio
    async def test_list_history(self, client, http, make_response, hello):
        http.request.side_effect = [make_response(hello), make_response({"data": []})]

        await client.bucket("blog").list_history(filters={"resource_name": "record"})

        assert http.request.call_args.args[0] == (
            f"{REMOTE}/buckets/blog/history?resource_name=record&_sort=-last_modified"
        )

    @pytest.mark.asyncio
    async def test_list_history_requires_capability(self, client, http, make_response, hello):
        hello["capabilities"] = {}
        http.request.side_effect = [make_response(hello)]

        with pytest.raises(CapabilityError) as exc_info:
            await client.bucket("blog").list_history()

        assert exc_info.value.missing == ["history"]
        assert http.request.call_count == 1
