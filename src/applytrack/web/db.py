"""SQLAlchemy engine for the web admin."""

from __future__ import annotations

from sqlalchemy import create_engine, event


def _get_database_url() -> str:
    """Point at the same SQLite file the CLI and API use."""
    from applytrack.config import load_config

    return f"sqlite:///{load_config().storage.sqlite_path}"


def _make_engine(url: str | None = None):
    """Create a SQLAlchemy engine with appropriate settings."""
    url = url or _get_database_url()
    engine = create_engine(url, connect_args={"check_same_thread": False})

    # Enable WAL and foreign keys for SQLite
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


engine = _make_engine()
