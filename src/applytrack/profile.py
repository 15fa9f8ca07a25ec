"""Singleton user profile and CV text extraction."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone

from applytrack.models import PROFILE_FIELDS, UserProfile


def get_user_profile(db: sqlite3.Connection) -> UserProfile | None:
    """Return the profile row, or None before the first save."""
    row = db.execute("SELECT * FROM user_profile ORDER BY created_at LIMIT 1").fetchone()
    if row is None:
        return None
    return UserProfile.from_row(row)


def upsert_user_profile(db: sqlite3.Connection, **fields) -> UserProfile:
    """Update the single profile row, creating it on first use."""
    unknown = set(fields) - set(PROFILE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown profile field(s): {', '.join(sorted(unknown))}")
    values = {k: v for k, v in fields.items() if k not in ("id", "created_at")}

    existing = get_user_profile(db)
    if existing is None:
        values["id"] = str(uuid.uuid4())
        values["created_at"] = datetime.now(timezone.utc).isoformat()
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        db.execute(
            f"INSERT INTO user_profile ({columns}) VALUES ({placeholders})",
            tuple(values.values()),
        )
    elif values:
        assignments = ", ".join(f"{col} = ?" for col in values)
        db.execute(
            f"UPDATE user_profile SET {assignments} WHERE id = ?",
            (*values.values(), existing.id),
        )
    db.commit()
    return get_user_profile(db)


def extract_cv_text(pdf_bytes: bytes) -> str:
    """Return the plain text of a PDF CV, pages joined by newlines."""
    import fitz  # PyMuPDF

    if not pdf_bytes:
        raise ValueError("No file uploaded")

    try:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            chunks = [page.get_text() for page in doc]
    except RuntimeError as e:  # fitz.FileDataError and friends
        raise ValueError(f"Failed to parse PDF: {e}") from e
    return "\n".join(chunks).strip()
