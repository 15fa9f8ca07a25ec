"""REST API routes: applications, profile, AI drafting, metadata and PDF."""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterator, Literal, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from applytrack import applications as apps_store
from applytrack import profile as profile_store
from applytrack.actions import (
    analyze_gap,
    analyze_job_description,
    generate_cover_letter,
    generate_email,
    job_brief,
)
from applytrack.ai.router import AIRouter
from applytrack.config import Config, load_config
from applytrack.errors import (
    ApplicationNotFoundError,
    ApplyTrackError,
    DownstreamParseError,
    GenerationError,
    MissingJobDescriptionError,
    ProfileIncompleteError,
    ProviderError,
    ScrapeError,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api"])


# ---------------------------------------------------------------------------
# Dependencies (overridden in tests)
# ---------------------------------------------------------------------------

def get_config() -> Config:
    return load_config()


def get_conn(config: Config = Depends(get_config)) -> Iterator[sqlite3.Connection]:
    from applytrack.database import get_db, init_db

    conn = get_db(config)
    init_db(conn)
    try:
        yield conn
    finally:
        conn.close()


def get_ai_router(config: Config = Depends(get_config)) -> AIRouter:
    return AIRouter.from_config(config.ai)


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class AIOptions(BaseModel):
    provider: Literal["auto", "gemini", "openai"] = "auto"
    openai_model: Optional[str] = None


class AnalyzeJobRequest(AIOptions):
    description: str


class CoverLetterRequest(AIOptions):
    user_context: Optional[str] = None


class EmailRequest(AIOptions):
    user_note: Optional[str] = None


class StatusUpdate(BaseModel):
    status: str


class PdfRequest(BaseModel):
    html: Optional[str] = None
    fileName: Optional[str] = None


def _http_error(exc: ApplyTrackError) -> HTTPException:
    """Map domain errors to HTTP status codes."""
    if isinstance(exc, ApplicationNotFoundError):
        return HTTPException(404, str(exc))
    if isinstance(exc, (ProfileIncompleteError, MissingJobDescriptionError)):
        return HTTPException(400, str(exc))
    if isinstance(exc, (ProviderError, GenerationError, DownstreamParseError)):
        return HTTPException(502, str(exc))
    return HTTPException(500, str(exc))


def _load(conn: sqlite3.Connection, application_id: str):
    try:
        return apps_store.get_application(conn, application_id)
    except ApplicationNotFoundError as e:
        raise _http_error(e) from e


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------

@router.get("/applications")
def list_applications(
    search: Optional[str] = None,
    tech: Optional[str] = None,
    order: str = Query("newest", pattern="^(newest|oldest)$"),
    conn: sqlite3.Connection = Depends(get_conn),
):
    """List applications, filtered by company/role and tech stack."""
    apps = apps_store.list_applications(conn, search=search, tech=tech, newest_first=order == "newest")
    return [a.to_dict() for a in apps]


@router.post("/applications", status_code=201)
def create_application(draft: dict = Body(...), conn: sqlite3.Connection = Depends(get_conn)):
    try:
        app = apps_store.create_application(conn, draft)
    except ValueError as e:
        raise HTTPException(422, str(e)) from e
    return app.to_dict()


@router.get("/applications/{application_id}")
def get_application(application_id: str, conn: sqlite3.Connection = Depends(get_conn)):
    return _load(conn, application_id).to_dict()


@router.patch("/applications/{application_id}")
def update_application(
    application_id: str,
    updates: dict = Body(...),
    conn: sqlite3.Connection = Depends(get_conn),
):
    try:
        app = apps_store.update_application(conn, application_id, updates)
    except ApplicationNotFoundError as e:
        raise _http_error(e) from e
    except ValueError as e:
        raise HTTPException(422, str(e)) from e
    return app.to_dict()


@router.patch("/applications/{application_id}/status")
def update_status(
    application_id: str,
    body: StatusUpdate,
    conn: sqlite3.Connection = Depends(get_conn),
):
    """Move an application to another board column."""
    try:
        app = apps_store.update_status(conn, application_id, body.status)
    except ApplicationNotFoundError as e:
        raise _http_error(e) from e
    except ValueError as e:
        raise HTTPException(422, str(e)) from e
    return app.to_dict()


@router.delete("/applications/{application_id}", status_code=204)
def delete_application(application_id: str, conn: sqlite3.Connection = Depends(get_conn)):
    try:
        apps_store.delete_application(conn, application_id)
    except ApplicationNotFoundError as e:
        raise _http_error(e) from e
    return Response(status_code=204)


@router.get("/board")
def get_board(conn: sqlite3.Connection = Depends(get_conn)):
    """Applications grouped by status, columns in pipeline order."""
    return {status: [a.to_dict() for a in apps] for status, apps in apps_store.board(conn).items()}


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@router.get("/profile")
def get_profile(conn: sqlite3.Connection = Depends(get_conn)):
    profile = profile_store.get_user_profile(conn)
    return profile.to_dict() if profile else None


@router.put("/profile")
def put_profile(fields: dict = Body(...), conn: sqlite3.Connection = Depends(get_conn)):
    try:
        profile = profile_store.upsert_user_profile(conn, **fields)
    except ValueError as e:
        raise HTTPException(422, str(e)) from e
    return profile.to_dict()


@router.post("/profile/cv")
async def upload_cv(request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    """Extract text from a raw PDF request body and store it as the CV."""
    pdf_bytes = await request.body()
    # PDF parsing and the SQLite write block; keep them off the event loop
    try:
        text = await run_in_threadpool(profile_store.extract_cv_text, pdf_bytes)
    except ValueError as e:
        raise HTTPException(400, str(e)) from e
    profile = await run_in_threadpool(profile_store.upsert_user_profile, conn, cv_content=text)
    return {"characters": len(text), "profile": profile.to_dict()}


# ---------------------------------------------------------------------------
# AI drafting
# ---------------------------------------------------------------------------

@router.post("/ai/analyze-job")
def analyze_job(body: AnalyzeJobRequest, ai: AIRouter = Depends(get_ai_router)):
    """Structured analysis of a pasted job description."""
    try:
        result = analyze_job_description(ai, body.description, policy=body.provider, openai_model=body.openai_model)
    except ValueError as e:
        raise HTTPException(400, str(e)) from e
    except ApplyTrackError as e:
        raise _http_error(e) from e
    return result.model_dump()


@router.post("/applications/{application_id}/gap-analysis")
def application_gap_analysis(
    application_id: str,
    body: Optional[AIOptions] = None,
    conn: sqlite3.Connection = Depends(get_conn),
    ai: AIRouter = Depends(get_ai_router),
):
    body = body or AIOptions()
    app = _load(conn, application_id)
    try:
        text = analyze_gap(
            ai,
            profile_store.get_user_profile(conn),
            job_brief(app),
            policy=body.provider,
            openai_model=body.openai_model,
        )
    except ApplyTrackError as e:
        raise _http_error(e) from e
    apps_store.update_application(conn, application_id, {"gap_analysis": text})
    return {"text": text}


@router.post("/applications/{application_id}/cover-letter")
def application_cover_letter(
    application_id: str,
    body: Optional[CoverLetterRequest] = None,
    conn: sqlite3.Connection = Depends(get_conn),
    config: Config = Depends(get_config),
    ai: AIRouter = Depends(get_ai_router),
):
    body = body or CoverLetterRequest()
    app = _load(conn, application_id)
    try:
        text = generate_cover_letter(
            ai,
            profile_store.get_user_profile(conn),
            job_brief(app),
            policy=body.provider,
            openai_model=body.openai_model,
            user_context=body.user_context or app.cover_letter_context,
            defaults=config.profile_defaults,
        )
    except ApplyTrackError as e:
        raise _http_error(e) from e
    apps_store.update_application(conn, application_id, {"cover_letter": text})
    return {"text": text}


@router.post("/applications/{application_id}/email")
def application_email(
    application_id: str,
    body: Optional[EmailRequest] = None,
    conn: sqlite3.Connection = Depends(get_conn),
    config: Config = Depends(get_config),
    ai: AIRouter = Depends(get_ai_router),
):
    body = body or EmailRequest()
    app = _load(conn, application_id)
    try:
        text = generate_email(
            ai,
            profile_store.get_user_profile(conn),
            job_brief(app),
            user_note=body.user_note or app.cover_letter_context,
            policy=body.provider,
            openai_model=body.openai_model,
            defaults=config.profile_defaults,
        )
    except ApplyTrackError as e:
        raise _http_error(e) from e
    apps_store.update_application(conn, application_id, {"email_content": text})
    return {"text": text}


# ---------------------------------------------------------------------------
# Job metadata & PDF
# ---------------------------------------------------------------------------

@router.get("/job-metadata")
def job_metadata(url: Optional[str] = None, config: Config = Depends(get_config)):
    """Scrape title, company, logo, locale and description from a posting URL."""
    from applytrack.scraper import fetch_job_metadata

    if not url:
        return JSONResponse({"error": "Missing url"}, status_code=400)
    try:
        meta = fetch_job_metadata(
            url,
            timeout=config.scraper.timeout,
            user_agent=config.scraper.user_agent,
            description_chars=config.scraper.description_chars,
        )
    except ScrapeError:
        return JSONResponse({"error": "Fetch failed"}, status_code=500)
    return meta.to_dict()


@router.post("/generate-pdf")
def generate_pdf(body: PdfRequest, config: Config = Depends(get_config)):
    """Render an HTML letter to an A4 PDF download."""
    from applytrack.pdf import render_pdf, safe_filename

    if not body.html:
        return JSONResponse({"error": "Missing HTML content"}, status_code=400)
    try:
        pdf_bytes = render_pdf(body.html, config.pdf)
    except Exception:
        logger.exception("PDF generation error")
        return JSONResponse({"error": "Failed to generate PDF"}, status_code=500)

    filename = safe_filename(body.fileName, default=config.pdf.default_filename)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
