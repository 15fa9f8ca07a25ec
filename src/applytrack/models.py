"""Dataclasses mirroring DB tables for type safety."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field, fields
from enum import Enum


class ApplicationStatus(str, Enum):
    """Pipeline columns, in board order."""

    PENDING = "En attente"
    APPLIED = "Postulé"
    INTERVIEW = "Entretien"
    REJECTED = "Refusé"


# Columns holding JSON-encoded lists
LIST_FIELDS = ("missions", "tech_stack", "profile_requirements")


def _decode_list(raw: str | None) -> list[str]:
    """Decode a list column, accepting hand-edited plain text as comma-separated."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return [part.strip() for part in raw.split(",") if part.strip()]
    if isinstance(value, list):
        return [str(v) for v in value if v is not None]
    if value is None or value == "":
        return []
    return [str(value)]


@dataclass
class Application:
    id: str
    created_at: str
    company_name: str = ""
    role: str = ""
    location: str | None = None
    status: str = ApplicationStatus.PENDING.value
    job_description: str | None = None
    missions: list[str] = field(default_factory=list)
    insights: str | None = None
    cover_letter: str | None = None
    email_content: str | None = None
    gap_analysis: str | None = None
    applied_at: str | None = None
    job_url: str | None = None
    tech_stack: list[str] = field(default_factory=list)
    daily_tasks_forecast: str | None = None
    recruitment_process: str | None = None
    profile_requirements: list[str] = field(default_factory=list)
    company_summary: str | None = None
    cover_letter_context: str | None = None
    cv_context_id: str | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Application:
        data = dict(row)
        for name in LIST_FIELDS:
            data[name] = _decode_list(data.get(name))
        return cls(**data)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class UserProfile:
    id: str
    created_at: str
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    school: str | None = None
    availability_start: str | None = None  # e.g. "mars 2026"
    availability_duration_months: int | None = None
    bio_preferences: str | None = None  # Markdown
    cv_url: str | None = None
    cv_content: str | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> UserProfile:
        return cls(**dict(row))

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class JobMetadata:
    title: str | None = None
    company: str | None = None
    company_logo: str | None = None
    location: str | None = None
    description: str | None = None

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


APPLICATION_FIELDS = tuple(f.name for f in fields(Application))
PROFILE_FIELDS = tuple(f.name for f in fields(UserProfile))
