"""FastAPI application factory — mounts admin UI and API routes."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from applytrack import __version__


def create_app() -> FastAPI:
    """Build the FastAPI application with admin and API."""
    from applytrack.config import load_config
    from applytrack.database import get_db, init_db

    # The admin works on the tables through SQLAlchemy; make sure they exist.
    conn = get_db(load_config())
    init_db(conn)
    conn.close()

    app = FastAPI(title="applytrack", version=__version__)

    from applytrack.web.admin import create_admin
    from applytrack.web.db import engine

    admin = create_admin(engine)
    admin.mount_to(app)

    from applytrack.web.api import router as api_router
    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def _root():
        return RedirectResponse(url="/admin")

    return app
