"""Pydantic schemas for structured AI output."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class JobAnalysis(BaseModel):
    """Structured output of the job-analysis prompt."""

    company_name: str = ""
    role: str = ""
    location: str = ""
    missions: list[str] = Field(default_factory=list)
    insights: str = Field(
        default="",
        description="Vigilance / Pépite / Le Vrai Job, separated by blank lines",
    )
    tech_stack: list[str] = Field(default_factory=list)
    daily_tasks_forecast: str = ""
    recruitment_process: str = ""
    profile_requirements: list[str] = Field(default_factory=list)
    company_summary: str = ""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # Models answer null for fields the offer does not mention
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def to_application_fields(self) -> dict:
        """Return the fields an application record stores from this analysis."""
        return self.model_dump()
