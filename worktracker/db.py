"""Storage of sessions and tags in an SQLite database."""

from __future__ import annotations

import os
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from .models import (
    CreateSessionRequest,
    CreateTagRequest,
    Tag,
    UpdateSessionRequest,
    UpdateTagRequest,
    WorkSession,
    WorkSessionWithTags,
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS work_sessions (
    id TEXT PRIMARY KEY,
    duration_seconds INTEGER NOT NULL,
    description TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS tags (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    color TEXT,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS session_tags (
    session_id TEXT NOT NULL REFERENCES work_sessions(id),
    tag_id TEXT NOT NULL REFERENCES tags(id),
    PRIMARY KEY (session_id, tag_id)
);
"""

_SESSION_COLUMNS = "id, duration_seconds, description, created_at, updated_at"
_TAG_COLUMNS = "id, name, color, created_at"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _stamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _from_stamp(text: str) -> datetime:
    return datetime.fromisoformat(text).astimezone(timezone.utc)


def _session_from_row(row: sqlite3.Row) -> WorkSession:
    return WorkSession(
        id=uuid.UUID(row["id"]),
        duration_seconds=row["duration_seconds"],
        description=row["description"],
        created_at=_from_stamp(row["created_at"]),
        updated_at=_from_stamp(row["updated_at"]),
    )


def _tag_from_row(row: sqlite3.Row) -> Tag:
    return Tag(
        id=uuid.UUID(row["id"]),
        name=row["name"],
        color=row["color"],
        created_at=_from_stamp(row["created_at"]),
    )


class Database:
    """Work sessions and tags kept in one SQLite file (or ":memory:")."""

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self._conn = sqlite3.connect(os.fspath(path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(_SCHEMA)
        self._lock = threading.RLock()

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # Sessions

    def create_session(self, req: CreateSessionRequest) -> WorkSession:
        session_id = uuid.uuid4()
        now = _now()
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT INTO work_sessions (id, duration_seconds, description, created_at, updated_at)"
                " VALUES (?, ?, ?, ?, ?)",
                (str(session_id), req.duration_seconds, req.description, _stamp(now), _stamp(now)),
            )
            self._insert_links(session_id, req.tag_ids)
        return WorkSession(
            id=session_id,
            duration_seconds=req.duration_seconds,
            description=req.description,
            created_at=_from_stamp(_stamp(now)),
            updated_at=_from_stamp(_stamp(now)),
        )

    def get_session(self, session_id: uuid.UUID) -> Optional[WorkSessionWithTags]:
        with self._lock:
            row = self._conn.execute(
                f"SELECT {_SESSION_COLUMNS} FROM work_sessions WHERE id = ?",
                (str(session_id),),
            ).fetchone()
            if row is None:
                return None
            return self._with_tags(_session_from_row(row))

    def get_sessions(self) -> list[WorkSessionWithTags]:
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_SESSION_COLUMNS} FROM work_sessions"
                " ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
            return [self._with_tags(_session_from_row(row)) for row in rows]

    def update_session(
        self, session_id: uuid.UUID, req: UpdateSessionRequest
    ) -> Optional[WorkSession]:
        with self._lock, self._conn:
            cursor = self._conn.execute(
                "UPDATE work_sessions"
                " SET duration_seconds = COALESCE(?, duration_seconds),"
                " description = COALESCE(?, description),"
                " updated_at = ?"
                " WHERE id = ?",
                (req.duration_seconds, req.description, _stamp(_now()), str(session_id)),
            )
            if cursor.rowcount == 0:
                return None
            if req.tag_ids is not None:
                self._conn.execute(
                    "DELETE FROM session_tags WHERE session_id = ?", (str(session_id),)
                )
                self._insert_links(session_id, req.tag_ids)
            row = self._conn.execute(
                f"SELECT {_SESSION_COLUMNS} FROM work_sessions WHERE id = ?",
                (str(session_id),),
            ).fetchone()
        return _session_from_row(row)

    def delete_session(self, session_id: uuid.UUID) -> bool:
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM session_tags WHERE session_id = ?", (str(session_id),))
            cursor = self._conn.execute(
                "DELETE FROM work_sessions WHERE id = ?", (str(session_id),)
            )
        return cursor.rowcount > 0

    # Tags

    def create_tag(self, req: CreateTagRequest) -> Tag:
        tag_id = uuid.uuid4()
        now = _stamp(_now())
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT INTO tags (id, name, color, created_at) VALUES (?, ?, ?, ?)",
                (str(tag_id), req.name, req.color, now),
            )
        return Tag(id=tag_id, name=req.name, color=req.color, created_at=_from_stamp(now))

    def get_tags(self) -> list[Tag]:
        with self._lock:
            rows = self._conn.execute(f"SELECT {_TAG_COLUMNS} FROM tags ORDER BY name").fetchall()
        return [_tag_from_row(row) for row in rows]

    def get_tag(self, tag_id: uuid.UUID) -> Optional[Tag]:
        with self._lock:
            row = self._conn.execute(
                f"SELECT {_TAG_COLUMNS} FROM tags WHERE id = ?", (str(tag_id),)
            ).fetchone()
        return None if row is None else _tag_from_row(row)

    def update_tag(self, tag_id: uuid.UUID, req: UpdateTagRequest) -> Optional[Tag]:
        with self._lock, self._conn:
            cursor = self._conn.execute(
                "UPDATE tags SET name = COALESCE(?, name), color = COALESCE(?, color)"
                " WHERE id = ?",
                (req.name, req.color, str(tag_id)),
            )
            if cursor.rowcount == 0:
                return None
            row = self._conn.execute(
                f"SELECT {_TAG_COLUMNS} FROM tags WHERE id = ?", (str(tag_id),)
            ).fetchone()
        return _tag_from_row(row)

    def delete_tag(self, tag_id: uuid.UUID) -> bool:
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM session_tags WHERE tag_id = ?", (str(tag_id),))
            cursor = self._conn.execute("DELETE FROM tags WHERE id = ?", (str(tag_id),))
        return cursor.rowcount > 0

    # Helpers

    def _insert_links(self, session_id: uuid.UUID, tag_ids: list[uuid.UUID]) -> None:
        self._conn.executemany(
            "INSERT INTO session_tags (session_id, tag_id) VALUES (?, ?)",
            [(str(session_id), str(tag_id)) for tag_id in tag_ids],
        )

    def _session_tags(self, session_id: uuid.UUID) -> list[Tag]:
        rows = self._conn.execute(
            "SELECT t.id, t.name, t.color, t.created_at"
            " FROM tags t JOIN session_tags st ON t.id = st.tag_id"
            " WHERE st.session_id = ?"
            " ORDER BY t.name",
            (str(session_id),),
        ).fetchall()
        return [_tag_from_row(row) for row in rows]

    def _with_tags(self, session: WorkSession) -> WorkSessionWithTags:
        return WorkSessionWithTags(
            id=session.id,
            duration_seconds=session.duration_seconds,
            description=session.description,
            created_at=session.created_at,
            updated_at=session.updated_at,
            tags=self._session_tags(session.id),
        )