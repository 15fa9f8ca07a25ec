"""applytrack CLI — Typer app with all subcommands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from applytrack.ai.base import ProviderPolicy
from applytrack.errors import ApplyTrackError

app = typer.Typer(
    name="applytrack",
    help="Job-application tracker — analyze offers, draft letters, follow the pipeline.",
    no_args_is_help=True,
)

PROVIDER_OPTION = typer.Option(
    ProviderPolicy.AUTO, "--provider", "-p",
    help="auto (Gemini then OpenAI), gemini or openai.",
)
OPENAI_MODEL_OPTION = typer.Option(
    None, "--openai-model", help="Override the OpenAI model for this call.",
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging.")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _open_db():
    from applytrack.config import load_config
    from applytrack.database import get_db, init_db

    config = load_config()
    conn = get_db(config)
    init_db(conn)
    return config, conn


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


def _print_application(app_record) -> None:
    typer.echo(f"{app_record.company_name} — {app_record.role}")
    typer.echo(f"  id:       {app_record.id}")
    typer.echo(f"  status:   {app_record.status}")
    if app_record.location:
        typer.echo(f"  location: {app_record.location}")
    if app_record.job_url:
        typer.echo(f"  url:      {app_record.job_url}")
    if app_record.tech_stack:
        typer.echo(f"  stack:    {', '.join(app_record.tech_stack)}")
    if app_record.applied_at:
        typer.echo(f"  applied:  {app_record.applied_at}")
    for label, text in (
        ("Summary", app_record.company_summary),
        ("Insights", app_record.insights),
        ("Gap analysis", app_record.gap_analysis),
        ("Email", app_record.email_content),
    ):
        if text:
            typer.echo(f"\n{label}:\n{text}")


# --- Database commands ---

@app.command()
def db(
    reset: bool = typer.Option(False, "--reset", help="Wipe and recreate the database."),
    stats: bool = typer.Option(False, "--stats", help="Show row counts for all tables."),
    migrate: bool = typer.Option(False, "--migrate", help="Run pending schema migrations."),
):
    """Database management."""
    from applytrack.config import load_config
    from applytrack.database import db_stats, get_db, init_db, migrate_db, reset_db

    config = load_config()

    if reset:
        conn = reset_db(config)
        typer.echo("Database reset and initialized.")
        conn.close()
        return

    conn = get_db(config)
    init_db(conn)
    try:
        if migrate:
            actions = migrate_db(conn)
            for action in actions:
                typer.echo(f"  {action}")
            typer.echo("Schema migrations applied.")
        elif stats:
            typer.echo("Table row counts:")
            for table, count in db_stats(conn).items():
                status = f"{count}" if count >= 0 else "missing"
                typer.echo(f"  {table:20s} {status}")
        else:
            typer.echo("Use --reset, --stats or --migrate.")
    finally:
        conn.close()


# --- Profile ---

@app.command()
def profile(
    full_name: Optional[str] = typer.Option(None, "--name", help="Full name."),
    email: Optional[str] = typer.Option(None, "--email"),
    phone: Optional[str] = typer.Option(None, "--phone"),
    address: Optional[str] = typer.Option(None, "--address"),
    city: Optional[str] = typer.Option(None, "--city"),
    school: Optional[str] = typer.Option(None, "--school"),
    availability_start: Optional[str] = typer.Option(None, "--start", help='e.g. "mars 2026".'),
    months: Optional[int] = typer.Option(None, "--months", help="Internship length in months."),
    bio_file: Optional[Path] = typer.Option(None, "--bio", help="Markdown file with goals and preferences."),
    cv: Optional[Path] = typer.Option(None, "--cv", help="PDF CV to extract and store."),
):
    """Show or update the profile used to personalize letters."""
    from applytrack.profile import extract_cv_text, get_user_profile, upsert_user_profile

    _, conn = _open_db()
    try:
        updates = {
            "full_name": full_name,
            "email": email,
            "phone": phone,
            "address": address,
            "city": city,
            "school": school,
            "availability_start": availability_start,
            "availability_duration_months": months,
        }
        updates = {k: v for k, v in updates.items() if v is not None}
        if bio_file is not None:
            updates["bio_preferences"] = bio_file.read_text(encoding="utf-8")
        if cv is not None:
            try:
                updates["cv_content"] = extract_cv_text(cv.read_bytes())
            except ValueError as e:
                _fail(e)
            updates["cv_url"] = str(cv.resolve())

        current = upsert_user_profile(conn, **updates) if updates else get_user_profile(conn)
        if current is None:
            typer.echo("No profile yet. Set one with --name and --email.")
            return
        for key, value in current.to_dict().items():
            if key in ("cv_content", "bio_preferences") and value:
                value = f"{len(value)} chars"
            typer.echo(f"  {key:30s} {value if value is not None else ''}")
    finally:
        conn.close()


# --- Job postings ---

@app.command()
def scrape(url: str = typer.Argument(..., help="Job posting URL.")):
    """Print metadata scraped from a job posting page."""
    from applytrack.config import load_config
    from applytrack.scraper import fetch_job_metadata

    config = load_config()
    try:
        meta = fetch_job_metadata(
            url,
            timeout=config.scraper.timeout,
            user_agent=config.scraper.user_agent,
            description_chars=config.scraper.description_chars,
        )
    except ApplyTrackError as e:
        _fail(e)
    for key, value in meta.to_dict().items():
        typer.echo(f"{key:14s} {value or ''}")


@app.command()
def add(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Job posting URL."),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Job description text."),
    description_file: Optional[Path] = typer.Option(None, "--file", "-f", help="File with the job description."),
    provider: ProviderPolicy = PROVIDER_OPTION,
    openai_model: Optional[str] = OPENAI_MODEL_OPTION,
    gap: bool = typer.Option(True, "--gap/--no-gap", help="Run the CV gap analysis too."),
):
    """Analyze a job posting with AI and add it to the tracker."""
    from applytrack.actions import analyze_gap, analyze_job_description
    from applytrack.ai.router import AIRouter
    from applytrack.applications import create_application
    from applytrack.profile import get_user_profile
    from applytrack.scraper import fetch_job_metadata

    config, conn = _open_db()
    try:
        if description_file is not None:
            description = description_file.read_text(encoding="utf-8")
        if not description and url:
            typer.echo(f"Fetching {url}...")
            try:
                meta = fetch_job_metadata(
                    url,
                    timeout=config.scraper.timeout,
                    user_agent=config.scraper.user_agent,
                    description_chars=config.scraper.description_chars,
                )
            except ApplyTrackError as e:
                _fail(e)
            description = meta.description
        if not description:
            typer.echo("Provide --description, --file or a --url with a readable page.", err=True)
            raise typer.Exit(1)

        router = AIRouter.from_config(config.ai)
        typer.echo(f"Analyzing offer ({provider.value})...")
        try:
            analysis = analyze_job_description(router, description, policy=provider, openai_model=openai_model)
        except ApplyTrackError as e:
            _fail(e)

        draft = analysis.to_application_fields()
        draft.update({"job_description": description, "job_url": url})

        user = get_user_profile(conn)
        if gap and user is not None and user.cv_content:
            typer.echo("Running gap analysis...")
            try:
                draft["gap_analysis"] = analyze_gap(
                    router, user, description, policy=provider, openai_model=openai_model,
                )
            except ApplyTrackError as e:
                typer.echo(f"Gap analysis skipped: {e}", err=True)

        record = create_application(conn, draft)
        typer.echo(f"Added {record.company_name} — {record.role} ({record.id})")
    finally:
        conn.close()


# --- Tracking ---

@app.command(name="list")
def list_cmd(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Filter by company or role."),
    tech: Optional[str] = typer.Option(None, "--tech", "-t", help="Filter by technology."),
    oldest: bool = typer.Option(False, "--oldest", help="Oldest first."),
):
    """List tracked applications."""
    from applytrack.applications import list_applications

    _, conn = _open_db()
    try:
        apps = list_applications(conn, search=search, tech=tech, newest_first=not oldest)
        if not apps:
            typer.echo("No applications.")
            return
        typer.echo(f"{'ID':<36}  {'Status':<11} {'Company':<25} Role")
        typer.echo("-" * 100)
        for a in apps:
            typer.echo(f"{a.id:<36}  {a.status:<11} {a.company_name[:25]:<25} {a.role}")
    finally:
        conn.close()


@app.command()
def board():
    """Show applications grouped by status column."""
    from applytrack.applications import board as board_columns

    _, conn = _open_db()
    try:
        for status, apps in board_columns(conn).items():
            typer.echo(f"{status} ({len(apps)})")
            for a in apps:
                typer.echo(f"  - {a.company_name} — {a.role}  [{a.id[:8]}]")
    finally:
        conn.close()


@app.command()
def show(application_id: str = typer.Argument(..., help="Application id.")):
    """Show one application."""
    from applytrack.applications import get_application

    _, conn = _open_db()
    try:
        try:
            record = get_application(conn, application_id)
        except ApplyTrackError as e:
            _fail(e)
        _print_application(record)
    finally:
        conn.close()


@app.command()
def status(
    application_id: str = typer.Argument(..., help="Application id."),
    new_status: str = typer.Argument(..., help='"En attente", "Postulé", "Entretien" or "Refusé".'),
):
    """Move an application to another status."""
    from applytrack.applications import update_status

    _, conn = _open_db()
    try:
        try:
            record = update_status(conn, application_id, new_status)
        except (ApplyTrackError, ValueError) as e:
            _fail(e)
        typer.echo(f"{record.company_name} — {record.role}: {record.status}")
    finally:
        conn.close()


@app.command()
def delete(
    application_id: str = typer.Argument(..., help="Application id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
):
    """Delete an application."""
    from applytrack.applications import delete_application

    if not yes:
        typer.confirm(f"Delete application {application_id}?", abort=True)
    _, conn = _open_db()
    try:
        try:
            delete_application(conn, application_id)
        except ApplyTrackError as e:
            _fail(e)
        typer.echo("Deleted.")
    finally:
        conn.close()


# --- Drafting ---

def _draft(application_id: str, kind: str, provider, openai_model, note: str | None) -> str:
    """Generate a document for an application and store it on the record."""
    from applytrack.actions import analyze_gap, generate_cover_letter, generate_email, job_brief
    from applytrack.ai.router import AIRouter
    from applytrack.applications import get_application, update_application
    from applytrack.profile import get_user_profile

    config, conn = _open_db()
    try:
        try:
            record = get_application(conn, application_id)
            brief = job_brief(record)
            user = get_user_profile(conn)
            router = AIRouter.from_config(config.ai)
            if kind == "gap":
                text = analyze_gap(router, user, brief, policy=provider, openai_model=openai_model)
                field = "gap_analysis"
            elif kind == "letter":
                text = generate_cover_letter(
                    router, user, brief, policy=provider, openai_model=openai_model,
                    user_context=note or record.cover_letter_context,
                    defaults=config.profile_defaults,
                )
                field = "cover_letter"
            else:
                text = generate_email(
                    router, user, brief, user_note=note or record.cover_letter_context,
                    policy=provider, openai_model=openai_model,
                    defaults=config.profile_defaults,
                )
                field = "email_content"
        except ApplyTrackError as e:
            _fail(e)
        update_application(conn, application_id, {field: text})
        return text
    finally:
        conn.close()


@app.command()
def gap(
    application_id: str = typer.Argument(..., help="Application id."),
    provider: ProviderPolicy = PROVIDER_OPTION,
    openai_model: Optional[str] = OPENAI_MODEL_OPTION,
):
    """Compare the stored CV with the offer."""
    typer.echo(_draft(application_id, "gap", provider, openai_model, None))


@app.command()
def letter(
    application_id: str = typer.Argument(..., help="Application id."),
    context: Optional[str] = typer.Option(None, "--context", "-c", help="Instructions to apply to the letter."),
    provider: ProviderPolicy = PROVIDER_OPTION,
    openai_model: Optional[str] = OPENAI_MODEL_OPTION,
):
    """Draft the cover letter (HTML)."""
    typer.echo(_draft(application_id, "letter", provider, openai_model, context))


@app.command()
def email(
    application_id: str = typer.Argument(..., help="Application id."),
    note: Optional[str] = typer.Option(None, "--note", "-n", help="Note to take into account."),
    provider: ProviderPolicy = PROVIDER_OPTION,
    openai_model: Optional[str] = OPENAI_MODEL_OPTION,
):
    """Draft the email that accompanies the CV and letter."""
    typer.echo(_draft(application_id, "email", provider, openai_model, note))


@app.command()
def pdf(
    application_id: str = typer.Argument(..., help="Application id."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output PDF path."),
):
    """Render the stored cover letter to PDF."""
    from applytrack.applications import get_application
    from applytrack.pdf import render_pdf, safe_filename

    config, conn = _open_db()
    try:
        try:
            record = get_application(conn, application_id)
        except ApplyTrackError as e:
            _fail(e)
    finally:
        conn.close()

    if not record.cover_letter:
        typer.echo("No cover letter yet. Run 'applytrack letter <id>' first.", err=True)
        raise typer.Exit(1)

    if output is None:
        output = Path(safe_filename(f"lettre_{record.company_name}", default=config.pdf.default_filename))
    output.write_bytes(render_pdf(record.cover_letter, config.pdf))
    typer.echo(f"Wrote {output}")


# --- Web command ---

@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Bind host."),
    port: int = typer.Option(8000, "--port", help="Bind port."),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development."),
):
    """Start the API and admin interface."""
    import uvicorn

    typer.echo(f"Starting applytrack at http://{host}:{port}/admin")
    uvicorn.run(
        "applytrack.web.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )
