"""HTTP endpoints for sessions and tags."""

from __future__ import annotations

import functools
import logging
import uuid
from http import HTTPStatus
from typing import Any, Awaitable, Callable, TypeVar

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .db import Database
from .models import (
    ApiResponse,
    CreateSessionRequest,
    CreateTagRequest,
    UpdateSessionRequest,
    UpdateTagRequest,
)

logger = logging.getLogger(__name__)

M = TypeVar("M")


class _Reject(Exception):
    """Ends a request early with a bare status code."""

    def __init__(self, status: HTTPStatus) -> None:
        super().__init__(status)
        self.status = status


def _endpoint(
    func: Callable[[Request], Awaitable[Response]]
) -> Callable[[Request], Awaitable[Response]]:
    @functools.wraps(func)
    async def handler(request: Request) -> Response:
        try:
            return await func(request)
        except _Reject as rejection:
            return Response(status_code=rejection.status)

    return handler


def _database(request: Request) -> Database:
    return request.app.state.db


def _path_id(request: Request) -> uuid.UUID:
    try:
        return uuid.UUID(request.path_params["id"])
    except (KeyError, ValueError, TypeError):
        raise _Reject(HTTPStatus.BAD_REQUEST) from None


def _is_json(content_type: str) -> bool:
    media = content_type.split(";", 1)[0].strip().lower()
    return media == "application/json" or (
        media.startswith("application/") and media.endswith("+json")
    )


async def _body(request: Request, model: Callable[[Any], M]) -> M:
    if not _is_json(request.headers.get("content-type", "")):
        raise _Reject(HTTPStatus.UNSUPPORTED_MEDIA_TYPE)
    try:
        payload = await request.json()
    except ValueError:
        raise _Reject(HTTPStatus.BAD_REQUEST) from None
    try:
        return model(payload)
    except ValueError:
        raise _Reject(HTTPStatus.UNPROCESSABLE_ENTITY) from None


async def _run(what: str, func: Callable[..., Any], *args: Any) -> Any:
    try:
        return await run_in_threadpool(func, *args)
    except Exception as exc:
        logger.error("Failed to %s: %s", what, exc)
        raise _Reject(HTTPStatus.INTERNAL_SERVER_ERROR) from exc


def _found(value: Any) -> Any:
    if value is None or value is False:
        raise _Reject(HTTPStatus.NOT_FOUND)
    return value


def _ok(data: Any) -> JSONResponse:
    return JSONResponse(ApiResponse.success(data).to_dict())


# Sessions


@_endpoint
async def get_sessions(request: Request) -> Response:
    """List every session, newest first, with its tags."""
    sessions = await _run("get sessions", _database(request).get_sessions)
    return _ok(sessions)


@_endpoint
async def get_session(request: Request) -> Response:
    """Return one session with its tags."""
    session_id = _path_id(request)
    session = await _run(f"get session {session_id}", _database(request).get_session, session_id)
    return _ok(_found(session))


@_endpoint
async def create_session(request: Request) -> Response:
    """Create a session from the JSON body."""
    req = await _body(request, CreateSessionRequest.from_dict)
    session = await _run("create session", _database(request).create_session, req)
    return _ok(session)


@_endpoint
async def update_session(request: Request) -> Response:
    """Change the fields given in the JSON body of one session."""
    session_id = _path_id(request)
    req = await _body(request, UpdateSessionRequest.from_dict)
    session = await _run(
        f"update session {session_id}", _database(request).update_session, session_id, req
    )
    return _ok(_found(session))


@_endpoint
async def delete_session(request: Request) -> Response:
    """Delete one session and its tag links."""
    session_id = _path_id(request)
    deleted = await _run(
        f"delete session {session_id}", _database(request).delete_session, session_id
    )
    _found(deleted)
    return _ok(None)


# Tags


@_endpoint
async def get_tags(request: Request) -> Response:
    """List every tag by name."""
    tags = await _run("get tags", _database(request).get_tags)
    return _ok(tags)


@_endpoint
async def get_tag(request: Request) -> Response:
    """Return one tag."""
    tag_id = _path_id(request)
    tag = await _run(f"get tag {tag_id}", _database(request).get_tag, tag_id)
    return _ok(_found(tag))


@_endpoint
async def create_tag(request: Request) -> Response:
    """Create a tag from the JSON body."""
    req = await _body(request, CreateTagRequest.from_dict)
    tag = await _run("create tag", _database(request).create_tag, req)
    return _ok(tag)


@_endpoint
async def update_tag(request: Request) -> Response:
    """Change the fields given in the JSON body of one tag."""
    tag_id = _path_id(request)
    req = await _body(request, UpdateTagRequest.from_dict)
    tag = await _run(f"update tag {tag_id}", _database(request).update_tag, tag_id, req)
    return _ok(_found(tag))


@_endpoint
async def delete_tag(request: Request) -> Response:
    """Delete one tag and its links to sessions."""
    tag_id = _path_id(request)
    deleted = await _run(f"delete tag {tag_id}", _database(request).delete_tag, tag_id)
    _found(deleted)
    return _ok(None)