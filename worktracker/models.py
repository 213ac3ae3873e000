"""Records shared by the server and the client, with their JSON form."""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_FRACTION = re.compile(r"\.(\d+)")


def _field(data: Any, key: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _optional(data: Any, key: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    return data.get(key)


def _parse_uuid(value: Any, key: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a UUID string")
    try:
        return uuid.UUID(value)
    except ValueError as exc:
        raise ValueError(f"invalid UUID in `{key}`: {value!r}") from exc


def _parse_i32(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field `{key}` must be an integer")
    if not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"field `{key}` is out of range for a 32-bit integer")
    return value


def _parse_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string")
    return value


def _parse_opt_str(data: Any, key: str) -> Optional[str]:
    value = _optional(data, key)
    return None if value is None else _parse_str(value, key)


def _parse_uuid_list(value: Any, key: str) -> list[uuid.UUID]:
    if not isinstance(value, list):
        raise ValueError(f"field `{key}` must be a list")
    return [_parse_uuid(item, key) for item in value]


def _parse_datetime(value: Any, key: str) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str):
            raise ValueError(f"field `{key}` must be a timestamp string")
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"invalid timestamp in `{key}`: {value!r}") from exc
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp in `{key}` has no UTC offset")
    return parsed.astimezone(timezone.utc)


def _format_datetime(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _to_json(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, datetime):
        return _format_datetime(value)
    return value


@dataclass
class WorkSession:
    """A tracked stretch of work."""

    id: uuid.UUID
    duration_seconds: int
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "duration_seconds": self.duration_seconds,
            "description": self.description,
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "WorkSession":
        return cls(
            id=_parse_uuid(_field(data, "id"), "id"),
            duration_seconds=_parse_i32(_field(data, "duration_seconds"), "duration_seconds"),
            description=_parse_opt_str(data, "description"),
            created_at=_parse_datetime(_field(data, "created_at"), "created_at"),
            updated_at=_parse_datetime(_field(data, "updated_at"), "updated_at"),
        )


@dataclass
class Tag:
    """A label that sessions can carry."""

    id: uuid.UUID
    name: str
    color: Optional[str]
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "color": self.color,
            "created_at": _format_datetime(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Tag":
        return cls(
            id=_parse_uuid(_field(data, "id"), "id"),
            name=_parse_str(_field(data, "name"), "name"),
            color=_parse_opt_str(data, "color"),
            created_at=_parse_datetime(_field(data, "created_at"), "created_at"),
        )


@dataclass
class SessionTag:
    """A link between a session and a tag."""

    session_id: uuid.UUID
    tag_id: uuid.UUID

    def to_dict(self) -> dict[str, Any]:
        return {"session_id": str(self.session_id), "tag_id": str(self.tag_id)}

    @classmethod
    def from_dict(cls, data: Any) -> "SessionTag":
        return cls(
            session_id=_parse_uuid(_field(data, "session_id"), "session_id"),
            tag_id=_parse_uuid(_field(data, "tag_id"), "tag_id"),
        )


@dataclass
class WorkSessionWithTags:
    """A work session together with its tags."""

    id: uuid.UUID
    duration_seconds: int
    description: Optional[str]
    created_at: datetime
    updated_at: datetime
    tags: list[Tag] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "duration_seconds": self.duration_seconds,
            "description": self.description,
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
            "tags": [tag.to_dict() for tag in self.tags],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "WorkSessionWithTags":
        tags = _field(data, "tags")
        if not isinstance(tags, list):
            raise ValueError("field `tags` must be a list")
        return cls(
            id=_parse_uuid(_field(data, "id"), "id"),
            duration_seconds=_parse_i32(_field(data, "duration_seconds"), "duration_seconds"),
            description=_parse_opt_str(data, "description"),
            created_at=_parse_datetime(_field(data, "created_at"), "created_at"),
            updated_at=_parse_datetime(_field(data, "updated_at"), "updated_at"),
            tags=[Tag.from_dict(item) for item in tags],
        )


@dataclass
class CreateSessionRequest:
    """Body of a request that creates a session."""

    duration_seconds: int
    description: Optional[str] = None
    tag_ids: list[uuid.UUID] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration_seconds": self.duration_seconds,
            "description": self.description,
            "tag_ids": [str(tag_id) for tag_id in self.tag_ids],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "CreateSessionRequest":
        return cls(
            duration_seconds=_parse_i32(_field(data, "duration_seconds"), "duration_seconds"),
            description=_parse_opt_str(data, "description"),
            tag_ids=_parse_uuid_list(_field(data, "tag_ids"), "tag_ids"),
        )


@dataclass
class UpdateSessionRequest:
    """Body of a request that changes a session; None leaves a field as it is."""

    duration_seconds: Optional[int] = None
    description: Optional[str] = None
    tag_ids: Optional[list[uuid.UUID]] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration_seconds": self.duration_seconds,
            "description": self.description,
            "tag_ids": None
            if self.tag_ids is None
            else [str(tag_id) for tag_id in self.tag_ids],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "UpdateSessionRequest":
        duration = _optional(data, "duration_seconds")
        tag_ids = _optional(data, "tag_ids")
        return cls(
            duration_seconds=None if duration is None else _parse_i32(duration, "duration_seconds"),
            description=_parse_opt_str(data, "description"),
            tag_ids=None if tag_ids is None else _parse_uuid_list(tag_ids, "tag_ids"),
        )


@dataclass
class CreateTagRequest:
    """Body of a request that creates a tag."""

    name: str
    color: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, data: Any) -> "CreateTagRequest":
        return cls(
            name=_parse_str(_field(data, "name"), "name"),
            color=_parse_opt_str(data, "color"),
        )


@dataclass
class UpdateTagRequest:
    """Body of a request that changes a tag; None leaves a field as it is."""

    name: Optional[str] = None
    color: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, data: Any) -> "UpdateTagRequest":
        return cls(
            name=_parse_opt_str(data, "name"),
            color=_parse_opt_str(data, "color"),
        )


@dataclass
class ApiResponse(Generic[T]):
    """Envelope around every API reply."""

    success: bool
    data: Optional[T] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":  # type: ignore[override]
        return cls(success=True, data=data, message=None)

    @classmethod
    def error(cls, message: str) -> "ApiResponse[T]":
        return cls(success=False, data=None, message=message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "data": _to_json(self.data),
            "message": self.message,
        }

    @classmethod
    def from_dict(
        cls, data: Any, parse: Optional[Callable[[Any], T]] = None
    ) -> "ApiResponse[T]":
        success = _field(data, "success")
        if not isinstance(success, bool):
            raise ValueError("field `success` must be a boolean")
        payload = _optional(data, "data")
        if payload is not None and parse is not None:
            payload = parse(payload)
        return cls(success=success, data=payload, message=_parse_opt_str(data, "message"))