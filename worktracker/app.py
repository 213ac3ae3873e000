"""The HTTP server: routes, CORS and the command that starts it."""

from __future__ import annotations

import argparse
import logging
import os
from typing import Optional, Sequence

import uvicorn
from dotenv import load_dotenv
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Route

from . import handlers
from .db import Database

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_PATH = "work_tracker.db"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

_SQLITE_PREFIXES = ("sqlite:///", "sqlite://")


def create_app(database: Database) -> Starlette:
    """Build the application that serves the API from the given database."""
    routes = [
        Route("/api/sessions", handlers.get_sessions, methods=["GET"]),
        Route("/api/sessions", handlers.create_session, methods=["POST"]),
        Route("/api/sessions/{id}", handlers.get_session, methods=["GET"]),
        Route("/api/sessions/{id}", handlers.update_session, methods=["PUT"]),
        Route("/api/sessions/{id}", handlers.delete_session, methods=["DELETE"]),
        Route("/api/tags", handlers.get_tags, methods=["GET"]),
        Route("/api/tags", handlers.create_tag, methods=["POST"]),
        Route("/api/tags/{id}", handlers.get_tag, methods=["GET"]),
        Route("/api/tags/{id}", handlers.update_tag, methods=["PUT"]),
        Route("/api/tags/{id}", handlers.delete_tag, methods=["DELETE"]),
    ]
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
            allow_origins=["*"],
        )
    ]
    app = Starlette(routes=routes, middleware=middleware)
    app.state.db = database
    return app


def database_path_from_env() -> str:
    """Database location from DATABASE_URL, or the default file."""
    value = os.environ.get("DATABASE_URL", DEFAULT_DATABASE_PATH)
    for prefix in _SQLITE_PREFIXES:
        if value.startswith(prefix):
            return value[len(prefix):]
    return value


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open the database and serve the API."""
    load_dotenv()
    parser = argparse.ArgumentParser(description="Serve the work session tracker API.")
    parser.add_argument("--database", help="SQLite database file (default: $DATABASE_URL)")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    path = args.database or database_path_from_env()
    logger.info("Connecting to database: %s", path)
    with Database(path) as database:
        app = create_app(database)
        logger.info("Server running on http://%s:%d", args.host, args.port)
        uvicorn.run(app, host=args.host, port=args.port)
    return 0