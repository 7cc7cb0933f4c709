"""
Tests for the GraphQL-backed post service
"""
import json

import httpx
import pytest

from postboard.core.exceptions import PostNotFound, PostServiceForbidden
from postboard.core.graphql_client import GraphQLClient
from postboard.models.post import CreatePostInput, UpdatePostInput
from postboard.services.post_service import GraphQLPostService


def _service(handler, page_size=2) -> GraphQLPostService:
    client = GraphQLClient(
        "https://api.example.test/graphql",
        api_key="da2-key",
        transport=httpx.MockTransport(handler),
    )
    return GraphQLPostService(client, page_size=page_size)


def _item(post_id, owner="alice"):
    return {
        "id": post_id,
        "title": f"title {post_id}",
        "content": "content",
        "owner": owner,
        "createdAt": "2025-01-01T10:00:00.000Z",
        "updatedAt": "2025-01-01T10:00:00.000Z",
    }


@pytest.mark.asyncio
async def test_list_posts_follows_next_token():
    """Test all pages are fetched with the API key"""
    requests = []

    def handler(request: httpx.Request):
        body = json.loads(request.content)
        requests.append((request.headers.get("x-api-key"), body["variables"]))
        if "nextToken" not in body["variables"]:
            return httpx.Response(200, json={"data": {"listPosts": {
                "items": [_item("1"), _item("2")], "nextToken": "page-2"}}})
        return httpx.Response(200, json={"data": {"listPosts": {
            "items": [_item("3")], "nextToken": None}}})

    posts = await _service(handler).list_posts()

    assert [p.id for p in posts] == ["1", "2", "3"]
    assert requests == [
        ("da2-key", {"limit": 2}),
        ("da2-key", {"limit": 2, "nextToken": "page-2"}),
    ]
    assert posts[0].created_at is not None


@pytest.mark.asyncio
async def test_list_posts_stops_on_repeated_next_token():
    """Test a service that keeps returning the same token does not page forever"""
    calls = []

    def handler(request: httpx.Request):
        calls.append(json.loads(request.content)["variables"])
        return httpx.Response(200, json={"data": {"listPosts": {
            "items": [_item(str(len(calls)))], "nextToken": "same-token"}}})

    posts = await _service(handler).list_posts()

    assert len(calls) == 2
    assert calls[1] == {"limit": 2, "nextToken": "same-token"}
    assert [p.id for p in posts] == ["1", "2"]


@pytest.mark.asyncio
async def test_list_posts_skips_null_items():
    def handler(request):
        return httpx.Response(200, json={"data": {"listPosts": {"items": [_item("1"), None], "nextToken": None}}})

    posts = await _service(handler).list_posts()

    assert [p.id for p in posts] == ["1"]


@pytest.mark.asyncio
async def test_create_post_sends_title_and_content_only():
    seen = {}

    def handler(request: httpx.Request):
        seen["auth"] = request.headers.get("authorization")
        seen["variables"] = json.loads(request.content)["variables"]
        return httpx.Response(200, json={"data": {"createPost": _item("9")}})

    post = await _service(handler).create_post(CreatePostInput(title="Hello", content="World"), "jwt")

    assert seen["auth"] == "jwt"
    assert seen["variables"] == {"input": {"title": "Hello", "content": "World"}}
    assert post.id == "9"
    assert post.owner == "alice"


@pytest.mark.asyncio
async def test_update_post_sends_id_and_title_only():
    seen = {}

    def handler(request: httpx.Request):
        seen["variables"] = json.loads(request.content)["variables"]
        return httpx.Response(200, json={"data": {"updatePost": _item("9")}})

    await _service(handler).update_post(UpdatePostInput(id="9", title="New"), "jwt")

    assert seen["variables"] == {"input": {"id": "9", "title": "New"}}


@pytest.mark.asyncio
async def test_update_post_not_owner():
    def handler(request):
        return httpx.Response(200, json={
            "data": {"updatePost": None},
            "errors": [{"errorType": "DynamoDB:ConditionalCheckFailedException", "message": "owner mismatch"}],
        })

    with pytest.raises(PostServiceForbidden):
        await _service(handler).update_post(UpdatePostInput(id="9", title="New"), "jwt")


@pytest.mark.asyncio
async def test_update_post_null_result():
    def handler(request):
        return httpx.Response(200, json={"data": {"updatePost": None}})

    with pytest.raises(PostNotFound):
        await _service(handler).update_post(UpdatePostInput(id="9", title="New"), "jwt")
