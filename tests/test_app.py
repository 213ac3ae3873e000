from http import HTTPStatus
from unittest.mock import patch

import pytest
from starlette.testclient import TestClient

from worktracker.app import DEFAULT_DATABASE_PATH, create_app, database_path_from_env, main
from worktracker.db import Database


@pytest.fixture
def client():
    database = Database(":memory:")
    with TestClient(create_app(database)) as test_client:
        yield test_client
    database.close()


def test_empty_lists(client):
    assert client.get("/api/sessions").json() == {"success": True, "data": [], "message": None}
    assert client.get("/api/tags").json() == {"success": True, "data": [], "message": None}


def test_unrouted_method_not_allowed(client):
    assert client.patch("/api/sessions").status_code == HTTPStatus.METHOD_NOT_ALLOWED


def test_cors_preflight_allows_listed_methods(client):
    response = client.options(
        "/api/tags",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "PUT",
            "Access-Control-Request-Headers": "content-type",
        },
    )
    assert response.status_code == HTTPStatus.OK
    assert response.headers["access-control-allow-origin"] == "*"
    assert "PUT" in response.headers["access-control-allow-methods"]


def test_cors_preflight_rejects_other_methods(client):
    response = client.options(
        "/api/tags",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "PATCH"},
    )
    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_simple_request_gets_cors_header(client):
    response = client.get("/api/tags", headers={"Origin": "http://localhost:3000"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_app_uses_given_database():
    database = Database(":memory:")
    app = create_app(database)
    assert app.state.db is database
    database.close()


def test_database_path_default(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    assert database_path_from_env() == DEFAULT_DATABASE_PATH


def test_database_path_from_env(monkeypatch, tmp_path):
    plain = str(tmp_path / "plain.db")
    monkeypatch.setenv("DATABASE_URL", plain)
    assert database_path_from_env() == plain
    monkeypatch.setenv("DATABASE_URL", "sqlite:///relative.db")
    assert database_path_from_env() == "relative.db"


def test_main_serves_on_default_address(tmp_path):
    db_file = tmp_path / "tracker.db"
    with patch("worktracker.app.uvicorn.run") as run:
        assert main(["--database", str(db_file)]) == 0
    args, kwargs = run.call_args
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 8080
    assert isinstance(args[0].state.db, Database)
    assert db_file.exists()


def test_main_reads_database_from_env(tmp_path, monkeypatch):
    db_file = tmp_path / "env.db"
    monkeypatch.setenv("DATABASE_URL", str(db_file))
    with patch("worktracker.app.uvicorn.run") as run:
        assert main(["--port", "9000"]) == 0
    assert run.call_args.kwargs["port"] == 9000
    assert db_file.exists()