import sqlite3
import uuid

import pytest

from worktracker.db import Database
from worktracker.models import (
    CreateSessionRequest,
    CreateTagRequest,
    UpdateSessionRequest,
    UpdateTagRequest,
)


@pytest.fixture
def db():
    database = Database(":memory:")
    yield database
    database.close()


def test_create_and_get_session(db):
    created = db.create_session(CreateSessionRequest(300, "writing", []))
    fetched = db.get_session(created.id)
    assert fetched.id == created.id
    assert fetched.duration_seconds == 300
    assert fetched.description == "writing"
    assert fetched.created_at == created.created_at
    assert fetched.updated_at == created.created_at
    assert fetched.tags == []


def test_get_missing_session_is_none(db):
    assert db.get_session(uuid.uuid4()) is None


def test_session_tags_sorted_by_name(db):
    beta = db.create_tag(CreateTagRequest("beta", None))
    alpha = db.create_tag(CreateTagRequest("alpha", "#123456"))
    created = db.create_session(CreateSessionRequest(60, None, [beta.id, alpha.id]))
    fetched = db.get_session(created.id)
    assert fetched.tags == [alpha, beta]


def test_sessions_newest_first(db):
    first = db.create_session(CreateSessionRequest(1, None, []))
    second = db.create_session(CreateSessionRequest(2, None, []))
    assert [s.id for s in db.get_sessions()] == [second.id, first.id]


def test_unknown_tag_rolls_back_session(db):
    with pytest.raises(sqlite3.IntegrityError):
        db.create_session(CreateSessionRequest(10, None, [uuid.uuid4()]))
    assert db.get_sessions() == []


def test_update_session_keeps_unset_fields(db):
    created = db.create_session(CreateSessionRequest(100, "keep me", []))
    updated = db.update_session(created.id, UpdateSessionRequest(duration_seconds=200))
    assert updated.duration_seconds == 200
    assert updated.description == "keep me"
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at


def test_update_session_replaces_tags_only_when_given(db):
    a = db.create_tag(CreateTagRequest("a"))
    b = db.create_tag(CreateTagRequest("b"))
    created = db.create_session(CreateSessionRequest(5, None, [a.id]))
    db.update_session(created.id, UpdateSessionRequest(description="x"))
    assert db.get_session(created.id).tags == [a]
    db.update_session(created.id, UpdateSessionRequest(tag_ids=[b.id]))
    assert db.get_session(created.id).tags == [b]
    db.update_session(created.id, UpdateSessionRequest(tag_ids=[]))
    assert db.get_session(created.id).tags == []


def test_update_missing_session_is_none(db):
    tag = db.create_tag(CreateTagRequest("t"))
    assert db.update_session(uuid.uuid4(), UpdateSessionRequest(tag_ids=[tag.id])) is None


def test_delete_session(db):
    tag = db.create_tag(CreateTagRequest("t"))
    created = db.create_session(CreateSessionRequest(5, None, [tag.id]))
    assert db.delete_session(created.id) is True
    assert db.get_session(created.id) is None
    assert db.delete_session(created.id) is False
    assert db.get_tag(tag.id) == tag


def test_tags_sorted_by_name(db):
    for name in ["zeta", "eta", "theta"]:
        db.create_tag(CreateTagRequest(name))
    names = [t.name for t in db.get_tags()]
    assert names == sorted(names)
    assert len(names) == 3


def test_get_tag_and_missing(db):
    tag = db.create_tag(CreateTagRequest("home", "#00ff00"))
    assert db.get_tag(tag.id) == tag
    assert db.get_tag(uuid.uuid4()) is None


def test_update_tag_coalesces(db):
    tag = db.create_tag(CreateTagRequest("old", "#111111"))
    renamed = db.update_tag(tag.id, UpdateTagRequest(name="new"))
    assert renamed.name == "new"
    assert renamed.color == "#111111"
    recolored = db.update_tag(tag.id, UpdateTagRequest(color="#222222"))
    assert recolored.name == "new"
    assert recolored.color == "#222222"
    assert recolored.created_at == tag.created_at


def test_update_missing_tag_is_none(db):
    assert db.update_tag(uuid.uuid4(), UpdateTagRequest(name="x")) is None


def test_delete_tag_removes_links(db):
    tag = db.create_tag(CreateTagRequest("gone"))
    created = db.create_session(CreateSessionRequest(5, None, [tag.id]))
    assert db.delete_tag(tag.id) is True
    assert db.get_session(created.id).tags == []
    assert db.delete_tag(tag.id) is False


def test_data_persists_in_file(tmp_path):
    path = tmp_path / "tracker.db"
    with Database(path) as first:
        created = first.create_session(CreateSessionRequest(42, "saved", []))
    with Database(path) as second:
        fetched = second.get_session(created.id)
    assert fetched.duration_seconds == 42
    assert fetched.description == "saved"