"""Asynchronous client for the tracker's HTTP API."""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

import httpx

from .models import (
    ApiResponse,
    CreateSessionRequest,
    CreateTagRequest,
    Tag,
    UpdateSessionRequest,
    UpdateTagRequest,
    WorkSession,
    WorkSessionWithTags,
)

API_BASE = "http://localhost:8080/api"

T = TypeVar("T")


class ApiError(Exception):
    """A request to the API did not give the expected result."""


def _list_of(parse: Callable[[Any], T]) -> Callable[[Any], list[T]]:
    def parse_list(value: Any) -> list[T]:
        if not isinstance(value, list):
            raise ValueError("expected a JSON array")
        return [parse(item) for item in value]

    return parse_list


class ApiClient:
    """Talks to the API at base_url; usable as an async context manager."""

    def __init__(
        self,
        base_url: str = API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def _send(self, method: str, path: str, body: Any = None) -> httpx.Response:
        try:
            response = await self._http.request(method, f"{self._base_url}{path}", json=body)
        except httpx.HTTPError as exc:
            raise ApiError(f"Request failed: {exc}") from exc
        if not response.is_success:
            raise ApiError(f"Request failed with status: {response.status_code}")
        return response

    async def _fetch(
        self, method: str, path: str, parse: Callable[[Any], T], body: Any = None
    ) -> T:
        response = await self._send(method, path, body)
        try:
            envelope = ApiResponse.from_dict(response.json(), parse)
        except ValueError as exc:
            raise ApiError(f"Failed to parse response: {exc}") from exc
        if envelope.data is None:
            raise ApiError("No data in response")
        return envelope.data

    async def get_sessions(self) -> list[WorkSessionWithTags]:
        return await self._fetch("GET", "/sessions", _list_of(WorkSessionWithTags.from_dict))

    async def get_session(self, session_id) -> WorkSessionWithTags:
        return await self._fetch("GET", f"/sessions/{session_id}", WorkSessionWithTags.from_dict)

    async def create_session(self, req: CreateSessionRequest) -> WorkSession:
        return await self._fetch("POST", "/sessions", WorkSession.from_dict, req.to_dict())

    async def update_session(self, session_id, req: UpdateSessionRequest) -> WorkSession:
        return await self._fetch(
            "PUT", f"/sessions/{session_id}", WorkSession.from_dict, req.to_dict()
        )

    async def delete_session(self, session_id) -> None:
        await self._send("DELETE", f"/sessions/{session_id}")

    async def get_tags(self) -> list[Tag]:
        return await self._fetch("GET", "/tags", _list_of(Tag.from_dict))

    async def create_tag(self, req: CreateTagRequest) -> Tag:
        return await self._fetch("POST", "/tags", Tag.from_dict, req.to_dict())

    async def update_tag(self, tag_id, req: UpdateTagRequest) -> Tag:
        return await self._fetch("PUT", f"/tags/{tag_id}", Tag.from_dict, req.to_dict())

    async def delete_tag(self, tag_id) -> None:
        await self._send("DELETE", f"/tags/{tag_id}")