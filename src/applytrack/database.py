"""SQLite database connection and schema management."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from applytrack.config import Config, load_config

_SCHEMA_PATH = Path(__file__).parent / "schema.sql"

TABLES = ("applications", "user_profile")


def get_db(config: Config | None = None, db_path: str | None = None) -> sqlite3.Connection:
    """Return a configured SQLite connection.

    Uses WAL mode and row_factory=sqlite3.Row for dict-like access.
    """
    if db_path is None:
        if config is None:
            config = load_config()
        db_path = config.storage.sqlite_path

    conn = sqlite3.connect(db_path, timeout=10, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.execute("PRAGMA busy_timeout=5000")
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables from schema.sql."""
    schema = _SCHEMA_PATH.read_text(encoding="utf-8")
    conn.executescript(schema)


def reset_db(config: Config | None = None) -> sqlite3.Connection:
    """Drop and recreate the database. Returns a fresh connection."""
    if config is None:
        config = load_config()

    db_path = Path(config.storage.sqlite_path)
    if db_path.exists():
        db_path.unlink()

    conn = get_db(config)
    init_db(conn)
    return conn


def migrate_db(conn: sqlite3.Connection) -> list[str]:
    """Add columns that may be missing from databases created by older versions.

    Uses PRAGMA table_info to detect missing columns and ALTER TABLE to add them.
    Returns list of migration actions taken.
    """
    migrations: list[str] = []

    expected_columns = [
        ("applications", "tech_stack", "TEXT"),
        ("applications", "daily_tasks_forecast", "TEXT"),
        ("applications", "recruitment_process", "TEXT"),
        ("applications", "profile_requirements", "TEXT"),
        ("applications", "company_summary", "TEXT"),
        ("applications", "cover_letter_context", "TEXT"),
        ("applications", "cv_context_id", "TEXT"),
        ("user_profile", "availability_start", "TEXT"),
        ("user_profile", "availability_duration_months", "INTEGER"),
        ("user_profile", "bio_preferences", "TEXT"),
    ]

    for table, column, col_type in expected_columns:
        existing = conn.execute(f"PRAGMA table_info({table})").fetchall()
        existing_names = {row["name"] for row in existing}
        if column not in existing_names:
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}")
            migrations.append(f"Added {table}.{column} ({col_type})")

    if migrations:
        conn.commit()

    return migrations


def db_stats(conn: sqlite3.Connection) -> dict[str, int]:
    """Return row counts for all tables."""
    stats = {}
    for table in TABLES:
        try:
            row = conn.execute(f"SELECT COUNT(*) as cnt FROM {table}").fetchone()
            stats[table] = row["cnt"]
        except sqlite3.OperationalError:
            stats[table] = -1  # table doesn't exist
    return stats
