"""Shared test fixtures."""

from __future__ import annotations

import sqlite3

import pytest

from applytrack.ai.base import AIRequest, AIResponse
from applytrack.ai.router import AIRouter
from applytrack.database import init_db
from applytrack.errors import ProviderError


@pytest.fixture
def db():
    """In-memory SQLite database with schema initialized."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON")
    init_db(conn)
    yield conn
    conn.close()


class StubCaller:
    """Provider caller that records requests and replays a canned outcome.

    ``outcome`` is either the text to return or a ProviderError to raise.
    """

    def __init__(self, name: str, outcome="ok", model: str = "stub-model"):
        self.name = name
        self.outcome = outcome
        self.model = model
        self.requests: list[AIRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def call(self, request: AIRequest) -> AIResponse:
        self.requests.append(request)
        if isinstance(self.outcome, ProviderError):
            raise self.outcome
        return AIResponse(
            text=self.outcome,
            provider_used=self.name,
            model_used=request.model_override or self.model,
        )


@pytest.fixture
def make_router():
    """Build an AIRouter over two StubCallers: make_router(gemini_outcome, openai_outcome)."""

    def _make(primary="from gemini", secondary="from openai"):
        gemini = StubCaller("gemini", primary, model="gemini-3-flash-preview")
        openai = StubCaller("openai", secondary, model="gpt-4o-mini")
        return AIRouter(gemini, openai), gemini, openai

    return _make


@pytest.fixture
def sample_profile_fields():
    """Complete profile, as stored by the profile form."""
    return {
        "full_name": "Camille Martin",
        "email": "camille@example.com",
        "phone": "06 12 34 56 78",
        "address": "12 rue de la République, Lyon",
        "city": "Lyon",
        "school": "École 42 Lyon",
        "availability_start": "mars 2026",
        "availability_duration_months": 6,
        "bio_preferences": "Je cherche un stage backend Python, idéalement dans la santé.",
        "cv_content": (
            "Camille Martin\n"
            "Everflow (4 ans) : API mobile React Native, automatisation Excel vers ERP avec Zapier.\n"
            "École 42 Lyon : C, Python, Docker, PostgreSQL."
        ),
    }


@pytest.fixture
def sample_job_description():
    return (
        "Doctolib recrute un stagiaire développeur backend (H/F) à Lyon. "
        "Stack : Python, FastAPI, PostgreSQL, Kubernetes. "
        "Missions : concevoir des API, améliorer la fiabilité des services de prise de rendez-vous. "
        "Process : entretien RH, test technique, entretien équipe."
    )
