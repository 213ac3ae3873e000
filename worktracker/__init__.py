"""Work session tracking with tags: SQLite storage, JSON API server, async client and web front end."""

__version__ = "0.1.0"

__all__ = ["__version__"]