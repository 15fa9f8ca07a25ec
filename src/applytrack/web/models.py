"""SQLAlchemy ORM models mirroring schema.sql, used by the admin UI."""

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Application(Base):
    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    created_at: Mapped[str] = mapped_column(String)
    company_name: Mapped[str] = mapped_column(String, default="")
    role: Mapped[str] = mapped_column(String, default="")
    location: Mapped[str | None] = mapped_column(String)
    status: Mapped[str] = mapped_column(String, default="En attente")
    job_description: Mapped[str | None] = mapped_column(Text)
    missions: Mapped[str | None] = mapped_column(Text)
    insights: Mapped[str | None] = mapped_column(Text)
    cover_letter: Mapped[str | None] = mapped_column(Text)
    email_content: Mapped[str | None] = mapped_column(Text)
    gap_analysis: Mapped[str | None] = mapped_column(Text)
    applied_at: Mapped[str | None] = mapped_column(String)
    job_url: Mapped[str | None] = mapped_column(String)
    tech_stack: Mapped[str | None] = mapped_column(Text)
    daily_tasks_forecast: Mapped[str | None] = mapped_column(Text)
    recruitment_process: Mapped[str | None] = mapped_column(Text)
    profile_requirements: Mapped[str | None] = mapped_column(Text)
    company_summary: Mapped[str | None] = mapped_column(Text)
    cover_letter_context: Mapped[str | None] = mapped_column(Text)
    cv_context_id: Mapped[str | None] = mapped_column(String)


class UserProfile(Base):
    __tablename__ = "user_profile"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    created_at: Mapped[str] = mapped_column(String)
    full_name: Mapped[str | None] = mapped_column(String)
    email: Mapped[str | None] = mapped_column(String)
    phone: Mapped[str | None] = mapped_column(String)
    address: Mapped[str | None] = mapped_column(String)
    city: Mapped[str | None] = mapped_column(String)
    school: Mapped[str | None] = mapped_column(String)
    availability_start: Mapped[str | None] = mapped_column(String)
    availability_duration_months: Mapped[int | None] = mapped_column(Integer)
    bio_preferences: Mapped[str | None] = mapped_column(Text)
    cv_url: Mapped[str | None] = mapped_column(String)
    cv_content: Mapped[str | None] = mapped_column(Text)
