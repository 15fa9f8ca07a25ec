"""Tests for database schema and operations."""

import sqlite3

import pytest

from applytrack.config import Config
from applytrack.database import TABLES, db_stats, get_db, init_db, migrate_db, reset_db


def test_schema_creates_all_tables(db):
    tables = {
        row[0]
        for row in db.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    }
    assert set(TABLES) <= tables


def test_init_db_is_idempotent(db):
    init_db(db)
    init_db(db)


def test_status_check_constraint(db):
    with pytest.raises(sqlite3.IntegrityError):
        db.execute(
            "INSERT INTO applications (id, created_at, status) VALUES ('x', 't', 'Accepted')"
        )


def test_db_stats_empty(db):
    assert db_stats(db) == {"applications": 0, "user_profile": 0}


def test_db_stats_missing_table():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    assert db_stats(conn) == {"applications": -1, "user_profile": -1}
    conn.close()


def test_migrate_adds_missing_columns():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute(
        "CREATE TABLE applications (id TEXT PRIMARY KEY, created_at TEXT, company_name TEXT, role TEXT)"
    )
    conn.execute("CREATE TABLE user_profile (id TEXT PRIMARY KEY, created_at TEXT, full_name TEXT)")

    actions = migrate_db(conn)

    assert "Added applications.tech_stack (TEXT)" in actions
    assert "Added user_profile.availability_duration_months (INTEGER)" in actions
    assert migrate_db(conn) == []
    conn.close()


def test_migrate_noop_on_current_schema(db):
    assert migrate_db(db) == []


def test_reset_db_recreates_file(tmp_path):
    config = Config()
    config.storage.sqlite_path = str(tmp_path / "apps.db")

    conn = get_db(config)
    init_db(conn)
    conn.execute("INSERT INTO applications (id, created_at) VALUES ('a', 't')")
    conn.commit()
    conn.close()

    conn = reset_db(config)
    assert db_stats(conn)["applications"] == 0
    conn.close()
