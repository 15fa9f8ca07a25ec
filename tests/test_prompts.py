"""Tests for prompt template rendering."""

from datetime import date

from applytrack.ai.prompts import (
    NO_NOTE,
    build_cover_letter_prompt,
    build_email_prompt,
    build_gap_analysis_prompt,
    build_job_analysis_prompt,
    french_long_date,
)


def _letter(**overrides):
    kwargs = dict(
        job_description="Stage backend chez Doctolib",
        full_name="Camille Martin",
        email="camille@example.com",
        city="Lyon",
        school="École 42 Lyon",
        availability_start="mars 2026",
        availability_duration="6 mois",
        today="19 octobre 2026",
    )
    kwargs.update(overrides)
    return build_cover_letter_prompt(**kwargs)


def test_french_long_date():
    assert french_long_date(date(2026, 10, 19)) == "19 octobre 2026"
    assert french_long_date(date(2026, 2, 1)) == "1 février 2026"
    assert french_long_date(date(2026, 8, 15)) == "15 août 2026"


def test_job_analysis_prompt_lists_every_field():
    prompt = build_job_analysis_prompt("Offre Python à Lyon")
    for key in (
        "company_name", "role", "location", "missions", "insights", "tech_stack",
        "daily_tasks_forecast", "recruitment_process", "profile_requirements", "company_summary",
    ):
        assert f'"{key}"' in prompt
    assert prompt.rstrip().endswith("Offre Python à Lyon")
    # JSON braces survive str.format
    assert "{\n" in prompt


def test_gap_prompt_without_preferences():
    prompt = build_gap_analysis_prompt("Offre X")
    assert "Offre X" in prompt
    assert "Score de pertinence" in prompt
    assert "objectifs" not in prompt


def test_gap_prompt_with_preferences():
    prompt = build_gap_analysis_prompt("Offre X", "Je veux de la data")
    assert "Je veux de la data" in prompt
    assert "en tenant compte de ses objectifs" in prompt


def test_cover_letter_prompt_fills_header_and_intro():
    prompt = _letter(phone="06 00 00 00 00", address="1 place Bellecour")
    assert "Camille Martin<br>camille@example.com<br>06 00 00 00 00<br>1 place Bellecour" in prompt
    assert "Lyon, le 19 octobre 2026" in prompt
    assert "Étudiant à École 42 Lyon" in prompt
    assert "disponible dès mars 2026 pour une durée de 6 mois" in prompt
    assert "N'INVENTE AUCUN CHIFFRE" in prompt


def test_cover_letter_prompt_address_falls_back_to_city():
    prompt = _letter()
    assert "camille@example.com<br><br>Lyon" in prompt


def test_cover_letter_prompt_note_defaults():
    assert f"(à appliquer strictement, même si cela implique d'ajuster le wording) : {NO_NOTE}" in _letter()
    assert "Insiste sur Docker" in _letter(user_context="  Insiste sur Docker ")
    assert f": {NO_NOTE}" in _letter(user_context="   ")


def test_cover_letter_prompt_preferences_line_optional():
    assert "Parcours et objectifs du candidat" not in _letter()
    assert "Parcours et objectifs du candidat : santé" in _letter(bio_preferences="santé")


def test_email_prompt():
    prompt = build_email_prompt(
        job_description="Stage data",
        full_name="Camille Martin",
        city="Lyon",
        note="Mentionner le projet Transcendence",
    )
    assert "Candidat : Camille Martin, Lyon" in prompt
    assert "Note du candidat : Mentionner le projet Transcendence" in prompt
    assert "50-80 mots" in prompt
    assert "pas de HTML" in prompt


def test_email_prompt_without_note():
    prompt = build_email_prompt(job_description="Stage", full_name="C", city="Lyon")
    assert f"Note du candidat : {NO_NOTE}" in prompt
