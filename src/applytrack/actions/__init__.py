"""Actions that turn a job posting plus the profile into stored documents."""

from __future__ import annotations

from applytrack.actions.analyze_job import analyze_job_description
from applytrack.actions.cover_letter import generate_cover_letter
from applytrack.actions.email_draft import generate_email
from applytrack.actions.gap import analyze_gap
from applytrack.errors import MissingJobDescriptionError
from applytrack.models import Application

__all__ = [
    "analyze_gap",
    "analyze_job_description",
    "generate_cover_letter",
    "generate_email",
    "job_brief",
]


def job_brief(application: Application) -> str:
    """Text describing the job to the letter/email prompts.

    Falls back to "<role> chez <company>" when only the analysis was kept.
    """
    if not application.job_description and not application.insights:
        raise MissingJobDescriptionError("Description du poste manquante")
    if application.job_description:
        return application.job_description
    return f"{application.role} chez {application.company_name}"
