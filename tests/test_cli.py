"""Tests for CLI commands."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from applytrack.ai.router import AIRouter
from applytrack.applications import create_application, get_application
from applytrack.cli import app
from applytrack.database import get_db, init_db
from applytrack.profile import upsert_user_profile

runner = CliRunner()


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the CLI at a fresh SQLite file and keep real keys out."""
    path = tmp_path / "cli.db"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("APPLYTRACK_DB", str(path))
    for name in ("APPLYTRACK_CONFIG", "GEMINI_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return path


@pytest.fixture
def conn(db_path):
    c = get_db(db_path=str(db_path))
    init_db(c)
    yield c
    c.close()


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "applytrack" in result.output.lower() or "Job-application" in result.output


def test_db_stats(db_path):
    result = runner.invoke(app, ["db", "--stats"])
    assert result.exit_code == 0
    assert "applications" in result.output
    assert "user_profile" in result.output


def test_db_reset(db_path, conn):
    create_application(conn, {"company_name": "Acme", "role": "Dev"})
    conn.close()
    result = runner.invoke(app, ["db", "--reset"])
    assert result.exit_code == 0
    assert "reset" in result.output.lower()

    fresh = get_db(db_path=str(db_path))
    assert fresh.execute("SELECT COUNT(*) FROM applications").fetchone()[0] == 0
    fresh.close()


def test_profile_update_and_show(db_path):
    result = runner.invoke(app, ["profile", "--name", "Camille Martin", "--email", "c@example.com", "--months", "6"])
    assert result.exit_code == 0
    assert "Camille Martin" in result.output

    result = runner.invoke(app, ["profile"])
    assert result.exit_code == 0
    assert "c@example.com" in result.output
    assert "availability_duration_months" in result.output


def test_profile_empty(db_path):
    result = runner.invoke(app, ["profile"])
    assert result.exit_code == 0
    assert "No profile yet" in result.output


def test_add_analyzes_and_stores(db_path, conn, make_router, sample_profile_fields):
    upsert_user_profile(conn, **sample_profile_fields)
    analysis = json.dumps({"company_name": "Doctolib", "role": "Backend", "tech_stack": ["Python"]})
    router, gemini, _ = make_router(primary=analysis)

    with patch.object(AIRouter, "from_config", return_value=router):
        result = runner.invoke(app, ["add", "--description", "Offre backend Python à Lyon"])

    assert result.exit_code == 0, result.output
    assert "Added Doctolib" in result.output
    # analysis then gap analysis
    assert gemini.calls == 2
    assert gemini.requests[1].cacheable_context == sample_profile_fields["cv_content"]

    row = conn.execute("SELECT job_description, gap_analysis, status FROM applications").fetchone()
    assert row["job_description"] == "Offre backend Python à Lyon"
    assert row["gap_analysis"] == analysis
    assert row["status"] == "En attente"


def test_add_without_input_fails(db_path):
    result = runner.invoke(app, ["add"])
    assert result.exit_code == 1


def test_add_reports_provider_failure(db_path, make_router):
    from applytrack.errors import ProviderCallError

    router, _, _ = make_router(
        primary=ProviderCallError("gemini", "down"),
        secondary=ProviderCallError("openai", "OpenAI error 500: oops"),
    )
    with patch.object(AIRouter, "from_config", return_value=router):
        result = runner.invoke(app, ["add", "-d", "Offre"])
    assert result.exit_code == 1
    assert "Failed to analyze job description" in result.output


def test_list_board_status_show_delete(db_path, conn):
    record = create_application(conn, {"company_name": "Acme", "role": "Dev", "tech_stack": ["Go"]})

    result = runner.invoke(app, ["list", "--tech", "go"])
    assert result.exit_code == 0
    assert "Acme" in result.output

    result = runner.invoke(app, ["status", record.id, "Postulé"])
    assert result.exit_code == 0
    assert "Postulé" in result.output

    result = runner.invoke(app, ["board"])
    assert result.exit_code == 0
    assert "Postulé (1)" in result.output
    assert "En attente (0)" in result.output

    result = runner.invoke(app, ["show", record.id])
    assert result.exit_code == 0
    assert "Acme" in result.output
    assert "applied:" in result.output

    result = runner.invoke(app, ["delete", record.id, "--yes"])
    assert result.exit_code == 0
    result = runner.invoke(app, ["show", record.id])
    assert result.exit_code == 1
    assert "Application not found" in result.output


def test_status_rejects_unknown(db_path, conn):
    record = create_application(conn, {"company_name": "Acme", "role": "Dev"})
    result = runner.invoke(app, ["status", record.id, "Hired"])
    assert result.exit_code == 1
    assert "Unknown status" in result.output


def test_letter_stores_draft(db_path, conn, make_router, sample_profile_fields):
    upsert_user_profile(conn, **sample_profile_fields)
    record = create_application(conn, {"company_name": "Acme", "role": "Dev", "job_description": "Offre"})
    router, _, openai = make_router(secondary="<p>Madame, Monsieur,</p>")

    with patch.object(AIRouter, "from_config", return_value=router):
        result = runner.invoke(app, [
            "letter", record.id, "--provider", "openai", "--openai-model", "gpt-4.1",
            "--context", "Insiste sur Docker",
        ])

    assert result.exit_code == 0, result.output
    assert "<p>Madame, Monsieur,</p>" in result.output
    assert openai.requests[0].model_override == "gpt-4.1"
    assert "Insiste sur Docker" in openai.requests[0].prompt
    assert get_application(conn, record.id).cover_letter == "<p>Madame, Monsieur,</p>"


def test_email_requires_profile(db_path, conn, make_router):
    record = create_application(conn, {"company_name": "Acme", "role": "Dev", "job_description": "Offre"})
    router, gemini, _ = make_router()
    with patch.object(AIRouter, "from_config", return_value=router):
        result = runner.invoke(app, ["email", record.id])
    assert result.exit_code == 1
    assert "nom + email" in result.output
    assert gemini.calls == 0


def test_gap_without_description(db_path, conn, make_router, sample_profile_fields):
    upsert_user_profile(conn, **sample_profile_fields)
    record = create_application(conn, {"company_name": "Acme", "role": "Dev"})
    router, _, _ = make_router()
    with patch.object(AIRouter, "from_config", return_value=router):
        result = runner.invoke(app, ["gap", record.id])
    assert result.exit_code == 1
    assert "Description du poste manquante" in result.output


def test_pdf_writes_file(db_path, conn, tmp_path):
    record = create_application(conn, {"company_name": "Acme", "role": "Dev", "cover_letter": "<p>Lettre</p>"})
    out = tmp_path / "lettre.pdf"
    with patch("applytrack.pdf.render_pdf", return_value=b"%PDF-fake") as mock_render:
        result = runner.invoke(app, ["pdf", record.id, "--output", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_bytes() == b"%PDF-fake"
    assert mock_render.call_args.args[0] == "<p>Lettre</p>"


def test_pdf_without_letter(db_path, conn):
    record = create_application(conn, {"company_name": "Acme", "role": "Dev"})
    result = runner.invoke(app, ["pdf", record.id])
    assert result.exit_code == 1
    assert "No cover letter yet" in result.output
