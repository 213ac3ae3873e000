import json
import uuid
from datetime import datetime, timezone

import httpx
import pytest

from worktracker.app import create_app
from worktracker.client import ApiClient, ApiError
from worktracker.db import Database
from worktracker.models import (
    CreateSessionRequest,
    CreateTagRequest,
    Tag,
    UpdateSessionRequest,
    UpdateTagRequest,
)


def _live_client():
    database = Database(":memory:")
    transport = httpx.ASGITransport(app=create_app(database))
    return ApiClient(transport=transport)


def _mock_client(handler):
    return ApiClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_tag_round_trip():
    async with _live_client() as client:
        tag = await client.create_tag(CreateTagRequest(name="deep work", color="#123456"))
        assert await client.get_tags() == [tag]
        updated = await client.update_tag(tag.id, UpdateTagRequest(color="#654321"))
        assert updated.name == "deep work"
        assert updated.color == "#654321"
        await client.delete_tag(tag.id)
        assert await client.get_tags() == []


@pytest.mark.asyncio
async def test_session_round_trip():
    async with _live_client() as client:
        tag = await client.create_tag(CreateTagRequest(name="meeting"))
        created = await client.create_session(
            CreateSessionRequest(duration_seconds=300, description="standup", tag_ids=[tag.id])
        )
        fetched = await client.get_session(created.id)
        assert fetched.duration_seconds == 300
        assert fetched.description == "standup"
        assert fetched.tags == [tag]
        assert [s.id for s in await client.get_sessions()] == [created.id]

        updated = await client.update_session(created.id, UpdateSessionRequest(tag_ids=[]))
        assert updated.duration_seconds == 300
        assert (await client.get_session(created.id)).tags == []


@pytest.mark.asyncio
async def test_deleted_session_is_gone():
    async with _live_client() as client:
        created = await client.create_session(CreateSessionRequest(duration_seconds=1))
        await client.delete_session(created.id)
        with pytest.raises(ApiError, match="Request failed with status: 404"):
            await client.get_session(created.id)


@pytest.mark.asyncio
async def test_delete_missing_tag_raises():
    async with _live_client() as client:
        with pytest.raises(ApiError, match="Request failed with status"):
            await client.delete_tag(uuid.uuid4())


@pytest.mark.asyncio
async def test_request_body_and_url():
    seen = []
    tag = Tag(id=uuid.uuid4(), name="x", color=None, created_at=datetime.now(timezone.utc))

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": tag.to_dict(), "message": None})

    req = CreateTagRequest(name="x")
    async with _mock_client(handler) as client:
        result = await client.create_tag(req)
    assert result == tag
    assert seen[0].method == "POST"
    assert str(seen[0].url) == "http://localhost:8080/api/tags"
    assert json.loads(seen[0].content) == req.to_dict()


@pytest.mark.asyncio
async def test_missing_data_raises():
    def handler(request):
        return httpx.Response(200, json={"success": False, "data": None, "message": "nope"})

    async with _mock_client(handler) as client:
        with pytest.raises(ApiError, match="No data in response"):
            await client.get_tags()


@pytest.mark.asyncio
async def test_unparsable_body_raises():
    def handler(request):
        return httpx.Response(200, content=b"<html>")

    async with _mock_client(handler) as client:
        with pytest.raises(ApiError, match="^Failed to parse response"):
            await client.get_sessions()


@pytest.mark.asyncio
async def test_wrong_shape_raises():
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {"id": "x"}, "message": None})

    async with _mock_client(handler) as client:
        with pytest.raises(ApiError, match="^Failed to parse response"):
            await client.get_tags()


@pytest.mark.asyncio
async def test_transport_failure_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with _mock_client(handler) as client:
        with pytest.raises(ApiError, match="^Request failed: refused"):
            await client.delete_session(uuid.uuid4())