"""Browser-facing web app: pages for sessions and tags backed by the API client."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import uuid
from typing import Optional, Sequence
from urllib.parse import parse_qsl

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, RedirectResponse, Response
from starlette.routing import Route

from .client import API_BASE, ApiClient, ApiError
from .models import Tag
from .sessions_page import SESSIONS_PATH, parse_session_form, render_sessions_page
from .sessions_page import FORM_FLAG as SESSION_FORM_FLAG
from .tags_page import (
    EDIT_FLAG,
    TAGS_PATH,
    parse_create_tag_form,
    parse_update_tag_form,
    render_tags_page,
)
from .tags_page import FORM_FLAG as TAG_FORM_FLAG
from .views import render_error, render_home, render_layout, render_session_detail

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def _page(body: str, status_code: int = 200) -> HTMLResponse:
    return HTMLResponse(render_layout(body), status_code=status_code)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def _not_found() -> HTMLResponse:
    return _page(render_error("Not found"), status_code=404)


def _client(request: Request) -> ApiClient:
    return request.app.state.client


def _path_uuid(request: Request) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(request.path_params["id"])
    except (KeyError, ValueError, TypeError):
        return None


async def _form_pairs(request: Request) -> list[tuple[str, str]]:
    body = await request.body()
    return parse_qsl(body.decode("utf-8", errors="replace"), keep_blank_values=True)


# Home


async def _home(request: Request) -> Response:
    return _page(render_home())


# Sessions


async def _sessions(request: Request) -> Response:
    client = _client(request)
    show_form = SESSION_FORM_FLAG in request.query_params
    sessions = None
    error = None
    try:
        sessions = await client.get_sessions()
    except ApiError as exc:
        error = str(exc)
    available_tags: Sequence[Tag] = []
    if show_form:
        with contextlib.suppress(ApiError):
            available_tags = await client.get_tags()
    return _page(render_sessions_page(sessions, available_tags, show_form, error))


async def _create_session(request: Request) -> Response:
    try:
        req = parse_session_form(await _form_pairs(request))
    except ValueError as exc:
        return _page(render_error(str(exc)), status_code=400)
    try:
        await _client(request).create_session(req)
    except ApiError as exc:
        logger.warning("Failed to create session: %s", exc)
        return _redirect(f"{SESSIONS_PATH}?{SESSION_FORM_FLAG}=1")
    return _redirect(SESSIONS_PATH)


async def _delete_session(request: Request) -> Response:
    session_id = _path_uuid(request)
    if session_id is None:
        return _not_found()
    try:
        await _client(request).delete_session(session_id)
    except ApiError as exc:
        logger.warning("Failed to delete session %s: %s", session_id, exc)
    return _redirect(SESSIONS_PATH)


async def _session_detail(request: Request) -> Response:
    session_id = _path_uuid(request)
    if session_id is None:
        return _page(render_session_detail(None, "Invalid session ID"))
    try:
        session = await _client(request).get_session(session_id)
    except ApiError as exc:
        return _page(render_session_detail(None, str(exc)))
    return _page(render_session_detail(session))


# Tags


async def _tags(request: Request) -> Response:
    tags = None
    error = None
    try:
        tags = await _client(request).get_tags()
    except ApiError as exc:
        error = str(exc)
    editing: Optional[Tag] = None
    edit_value = request.query_params.get(EDIT_FLAG)
    if edit_value and tags:
        with contextlib.suppress(ValueError):
            wanted = uuid.UUID(edit_value)
            editing = next((tag for tag in tags if tag.id == wanted), None)
    show_form = TAG_FORM_FLAG in request.query_params or editing is not None
    return _page(render_tags_page(tags, editing, show_form, error))


async def _create_tag(request: Request) -> Response:
    req = parse_create_tag_form(await _form_pairs(request))
    try:
        await _client(request).create_tag(req)
    except ApiError as exc:
        logger.warning("Failed to create tag: %s", exc)
        return _redirect(f"{TAGS_PATH}?{TAG_FORM_FLAG}=1")
    return _redirect(TAGS_PATH)


async def _update_tag(request: Request) -> Response:
    tag_id = _path_uuid(request)
    if tag_id is None:
        return _not_found()
    req = parse_update_tag_form(await _form_pairs(request))
    try:
        await _client(request).update_tag(tag_id, req)
    except ApiError as exc:
        logger.warning("Failed to update tag %s: %s", tag_id, exc)
        return _redirect(f"{TAGS_PATH}?{EDIT_FLAG}={tag_id}")
    return _redirect(TAGS_PATH)


async def _delete_tag(request: Request) -> Response:
    tag_id = _path_uuid(request)
    if tag_id is None:
        return _not_found()
    try:
        await _client(request).delete_tag(tag_id)
    except ApiError as exc:
        logger.warning("Failed to delete tag %s: %s", tag_id, exc)
    return _redirect(TAGS_PATH)


def create_frontend(client: ApiClient) -> Starlette:
    """Build the web app whose pages read and change data through client."""
    routes = [
        Route("/", _home, methods=["GET"]),
        Route(SESSIONS_PATH, _sessions, methods=["GET"]),
        Route(SESSIONS_PATH, _create_session, methods=["POST"]),
        Route(f"{SESSIONS_PATH}/{{id}}", _session_detail, methods=["GET"]),
        Route(f"{SESSIONS_PATH}/{{id}}/delete", _delete_session, methods=["POST"]),
        Route(TAGS_PATH, _tags, methods=["GET"]),
        Route(TAGS_PATH, _create_tag, methods=["POST"]),
        Route(f"{TAGS_PATH}/{{id}}", _update_tag, methods=["POST"]),
        Route(f"{TAGS_PATH}/{{id}}/delete", _delete_tag, methods=["POST"]),
    ]
    app = Starlette(routes=routes)
    app.state.client = client
    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Serve the web pages, talking to the API at --api-base."""
    parser = argparse.ArgumentParser(description="Serve the work session tracker pages.")
    parser.add_argument("--api-base", default=API_BASE, help="base URL of the API")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    client = ApiClient(args.api_base)
    try:
        uvicorn.run(create_frontend(client), host=args.host, port=args.port)
    finally:
        asyncio.run(client.aclose())
    return 0