"""Application records: CRUD, status pipeline and board grouping."""

from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timezone

from applytrack.errors import ApplicationNotFoundError
from applytrack.models import APPLICATION_FIELDS, LIST_FIELDS, Application, ApplicationStatus

_READONLY_FIELDS = ("id", "created_at")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _validate_status(status: str) -> str:
    try:
        return ApplicationStatus(status).value
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise ValueError(f"Unknown status: {status!r}. Use one of: {allowed}") from None


def _encode(values: dict) -> dict:
    """Validate field names and JSON-encode list columns."""
    unknown = set(values) - set(APPLICATION_FIELDS)
    if unknown:
        raise ValueError(f"Unknown application field(s): {', '.join(sorted(unknown))}")
    encoded = dict(values)
    for name in LIST_FIELDS:
        if name in encoded:
            encoded[name] = json.dumps(encoded[name] or [], ensure_ascii=False)
    if "status" in encoded:
        encoded["status"] = _validate_status(encoded["status"])
    return encoded


def list_applications(
    db: sqlite3.Connection,
    search: str | None = None,
    tech: str | None = None,
    newest_first: bool = True,
) -> list[Application]:
    """Return applications, optionally filtered.

    ``search`` matches company or role, ``tech`` matches any tech_stack entry
    (both case-insensitive substring matches).
    """
    order = "DESC" if newest_first else "ASC"
    rows = db.execute(f"SELECT * FROM applications ORDER BY created_at {order}").fetchall()
    apps = [Application.from_row(r) for r in rows]

    if search:
        q = search.lower()
        apps = [a for a in apps if q in (a.company_name or "").lower() or q in (a.role or "").lower()]
    if tech:
        q = tech.lower()
        apps = [a for a in apps if any(q in t.lower() for t in a.tech_stack)]
    return apps


def get_application(db: sqlite3.Connection, application_id: str) -> Application:
    row = db.execute("SELECT * FROM applications WHERE id = ?", (application_id,)).fetchone()
    if row is None:
        raise ApplicationNotFoundError(application_id)
    return Application.from_row(row)


def create_application(db: sqlite3.Connection, draft: dict) -> Application:
    """Insert a new application from *draft* and return it.

    ``id`` and ``created_at`` are assigned here; status defaults to pending.
    """
    values = {k: v for k, v in draft.items() if k not in _READONLY_FIELDS}
    values.setdefault("status", ApplicationStatus.PENDING.value)
    values = _encode(values)
    values["id"] = str(uuid.uuid4())
    values["created_at"] = _now()

    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)
    db.execute(
        f"INSERT INTO applications ({columns}) VALUES ({placeholders})",
        tuple(values.values()),
    )
    db.commit()
    return get_application(db, values["id"])


def update_application(db: sqlite3.Connection, application_id: str, updates: dict) -> Application:
    """Apply a partial update. ``id`` and ``created_at`` cannot be changed."""
    values = {k: v for k, v in updates.items() if k not in _READONLY_FIELDS}
    if not values:
        return get_application(db, application_id)
    values = _encode(values)

    assignments = ", ".join(f"{col} = ?" for col in values)
    cur = db.execute(
        f"UPDATE applications SET {assignments} WHERE id = ?",
        (*values.values(), application_id),
    )
    if cur.rowcount == 0:
        raise ApplicationNotFoundError(application_id)
    db.commit()
    return get_application(db, application_id)


def update_status(db: sqlite3.Connection, application_id: str, status: str) -> Application:
    """Move an application to another pipeline column.

    Moving to "Postulé" stamps ``applied_at`` unless it is already set.
    """
    status = _validate_status(status)
    app = get_application(db, application_id)
    updates: dict = {"status": status}
    if status == ApplicationStatus.APPLIED.value and not app.applied_at:
        updates["applied_at"] = _now()
    return update_application(db, application_id, updates)


def delete_application(db: sqlite3.Connection, application_id: str) -> None:
    cur = db.execute("DELETE FROM applications WHERE id = ?", (application_id,))
    if cur.rowcount == 0:
        raise ApplicationNotFoundError(application_id)
    db.commit()


def board(db: sqlite3.Connection) -> dict[str, list[Application]]:
    """Group applications by status; every column is present, in pipeline order."""
    columns: dict[str, list[Application]] = {s.value: [] for s in ApplicationStatus}
    for app in list_applications(db):
        columns.setdefault(app.status, []).append(app)
    return columns
