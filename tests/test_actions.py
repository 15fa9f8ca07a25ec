"""Tests for the drafting actions, run against stub providers."""

import json
from datetime import date

import pytest

from applytrack.actions import (
    analyze_gap,
    analyze_job_description,
    generate_cover_letter,
    generate_email,
    job_brief,
)
from applytrack.actions.analyze_job import parse_job_analysis
from applytrack.actions.cover_letter import strip_code_fences
from applytrack.ai.base import OutputMode
from applytrack.config import ProfileDefaults
from applytrack.errors import (
    DownstreamParseError,
    GenerationError,
    MissingJobDescriptionError,
    ProfileIncompleteError,
    ProviderCallError,
)
from applytrack.models import Application, UserProfile

ANALYSIS = {
    "company_name": "Doctolib",
    "role": "Stagiaire développeur backend",
    "location": "Lyon",
    "missions": ["Concevoir des API", "Fiabiliser la prise de rendez-vous"],
    "insights": "🚩 **Vigilance** : rythme soutenu\n\n💎 **Pépite** : Kubernetes\n\n⚡ **Le Vrai Job** : maintenir les API",
    "tech_stack": ["Python", "FastAPI", "PostgreSQL"],
    "daily_tasks_forecast": "• Coder des endpoints (≈50% du temps)",
    "recruitment_process": "• Entretien RH\n• Test technique",
    "profile_requirements": ["**Must** Python", "**Nice** Kubernetes"],
    "company_summary": "Plateforme de prise de rendez-vous médicaux.",
}


@pytest.fixture
def user(sample_profile_fields):
    return UserProfile(id="p1", created_at="2026-10-01T00:00:00+00:00", **sample_profile_fields)


# --- Job analysis ---

def test_analyze_job_returns_structured_analysis(make_router, sample_job_description):
    router, gemini, _ = make_router(primary=json.dumps(ANALYSIS))
    analysis = analyze_job_description(router, sample_job_description)

    assert analysis.company_name == "Doctolib"
    assert analysis.tech_stack == ["Python", "FastAPI", "PostgreSQL"]
    request = gemini.requests[0]
    assert request.output_mode is OutputMode.JSON
    assert sample_job_description in request.prompt
    assert request.cacheable_context is None


def test_analyze_job_invalid_json_is_parse_error(make_router):
    router, _, _ = make_router(primary="{not json")
    with pytest.raises(DownstreamParseError) as exc_info:
        analyze_job_description(router, "Offre")
    assert exc_info.value.raw_text == "{not json"


def test_analyze_job_forced_openai_with_model(make_router):
    router, gemini, openai = make_router(secondary=json.dumps(ANALYSIS))
    analyze_job_description(router, "Offre", policy="openai", openai_model="gpt-4.1")
    assert gemini.calls == 0
    assert openai.requests[0].model_override == "gpt-4.1"


def test_analyze_job_provider_failure_wrapped(make_router):
    router, _, _ = make_router(
        primary=ProviderCallError("gemini", "down"),
        secondary=ProviderCallError("openai", "OpenAI error 500: oops"),
    )
    with pytest.raises(GenerationError, match="Failed to analyze job description"):
        analyze_job_description(router, "Offre")


def test_analyze_job_empty_description(make_router):
    router, gemini, _ = make_router()
    with pytest.raises(ValueError):
        analyze_job_description(router, "  ")
    assert gemini.calls == 0


def test_parse_job_analysis_accepts_partial_and_nulls():
    analysis = parse_job_analysis('{"company_name": "Acme", "location": null}')
    assert analysis.company_name == "Acme"
    assert analysis.location == ""
    assert analysis.missions == []


@pytest.mark.parametrize("text", ['["a", "b"]', '{"missions": "not a list"}'])
def test_parse_job_analysis_rejects_wrong_shape(text):
    with pytest.raises(DownstreamParseError):
        parse_job_analysis(text)


# --- Gap analysis ---

def test_gap_sends_cv_as_cacheable_context(make_router, user):
    router, gemini, _ = make_router(primary="  ### 🎯 Score de pertinence : 80%\n")
    text = analyze_gap(router, user, "Offre backend")

    assert text == "### 🎯 Score de pertinence : 80%"
    request = gemini.requests[0]
    assert request.cacheable_context == user.cv_content
    assert user.cv_content not in request.prompt
    assert user.bio_preferences in request.prompt


def test_gap_requires_cv(make_router, user):
    router, gemini, _ = make_router()
    user.cv_content = None
    with pytest.raises(ProfileIncompleteError):
        analyze_gap(router, user, "Offre")
    with pytest.raises(ProfileIncompleteError):
        analyze_gap(router, None, "Offre")
    assert gemini.calls == 0


def test_gap_failure_names_likely_cause(make_router, user):
    router, _, _ = make_router(primary=ProviderCallError("gemini", "down"))
    with pytest.raises(GenerationError, match="CV"):
        analyze_gap(router, user, "Offre", policy="gemini")


# --- Cover letter ---

def test_cover_letter_uses_profile_and_strips_fences(make_router, user):
    router, gemini, _ = make_router(primary="```html\n<p>Madame, Monsieur,</p>\n```")
    html = generate_cover_letter(
        router, user, "Offre backend",
        user_context="Insiste sur Docker",
        today=date(2026, 10, 19),
    )
    assert html == "<p>Madame, Monsieur,</p>"

    request = gemini.requests[0]
    assert request.output_mode is OutputMode.TEXT
    assert request.cacheable_context == user.cv_content
    assert "Lyon, le 19 octobre 2026" in request.prompt
    assert "6 mois" in request.prompt
    assert "Insiste sur Docker" in request.prompt


def test_cover_letter_applies_defaults(make_router):
    router, gemini, _ = make_router(primary="<p>ok</p>")
    sparse = UserProfile(id="p", created_at="t", full_name="Camille", email="c@example.com")
    defaults = ProfileDefaults(city="Paris, France", school="Epitech", availability_duration="3 mois")
    generate_cover_letter(router, sparse, "Offre", defaults=defaults, today=date(2026, 1, 5))

    request = gemini.requests[0]
    assert "Paris, France, le 5 janvier 2026" in request.prompt
    assert "Étudiant à Epitech" in request.prompt
    assert "3 mois" in request.prompt
    # Empty CV still produces a valid call
    assert request.cacheable_context is None or request.cacheable_context == ""


@pytest.mark.parametrize("fields", [
    {"full_name": "", "email": "c@example.com"},
    {"full_name": "Camille", "email": "  "},
])
def test_cover_letter_requires_name_and_email(make_router, fields):
    router, gemini, _ = make_router()
    with pytest.raises(ProfileIncompleteError, match="nom \\+ email"):
        generate_cover_letter(router, UserProfile(id="p", created_at="t", **fields), "Offre")
    assert gemini.calls == 0


def test_strip_code_fences():
    assert strip_code_fences("```html\n<p>a</p>\n```") == "<p>a</p>"
    assert strip_code_fences("<p>a</p>") == "<p>a</p>"


# --- Email ---

def test_email_draft(make_router, user):
    router, gemini, _ = make_router(primary="OBJET : Candidature\n\nBonjour,\n")
    text = generate_email(router, user, "Offre data", user_note="Parler de Transcendence")
    assert text == "OBJET : Candidature\n\nBonjour,"
    request = gemini.requests[0]
    assert "Parler de Transcendence" in request.prompt
    assert "Camille Martin, Lyon" in request.prompt
    assert request.cacheable_context == user.cv_content


def test_email_city_default(make_router):
    router, gemini, _ = make_router(primary="ok")
    profile = UserProfile(id="p", created_at="t", full_name="Camille", email="c@example.com")
    generate_email(router, profile, "Offre")
    assert "Camille, Lyon" in gemini.requests[0].prompt


def test_email_failure_wrapped(make_router, user):
    router, _, _ = make_router(secondary=ProviderCallError("openai", "OpenAI error 401: bad key"))
    with pytest.raises(GenerationError, match="401"):
        generate_email(router, user, "Offre", policy="openai")


# --- Job brief ---

def test_job_brief_prefers_description():
    app = Application(id="a", created_at="t", company_name="Acme", role="Dev", job_description="Full text")
    assert job_brief(app) == "Full text"


def test_job_brief_falls_back_to_role_and_company():
    app = Application(id="a", created_at="t", company_name="Acme", role="Dev", insights="x")
    assert job_brief(app) == "Dev chez Acme"


def test_job_brief_missing():
    with pytest.raises(MissingJobDescriptionError):
        job_brief(Application(id="a", created_at="t", company_name="Acme", role="Dev"))
