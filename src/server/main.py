"""FastAPI application serving one course checkout."""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from coursebook.config import COURSEBOOK_ROOT
from coursebook.exceptions import CoursebookError, IndexNotFoundError
from coursebook.utils.logging_config import get_logger
from server.routers import check, lessons, site

logger = get_logger(__name__)


def create_app(root: Path | None = None) -> FastAPI:
    """Build the reader app for the course at ``root`` (default ``COURSEBOOK_ROOT``)."""
    application = FastAPI(title="coursebook", description="Read-only reader for a markdown textbook")
    application.state.course_root = (root or COURSEBOOK_ROOT).resolve()

    @application.exception_handler(CoursebookError)
    async def handle_coursebook_error(request: Request, exc: CoursebookError) -> JSONResponse:
        status_code = 503 if isinstance(exc, IndexNotFoundError) else 500
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "status": status_code, "error": str(exc)},
        )
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    @application.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    application.include_router(lessons.router)
    application.include_router(check.router)
    application.include_router(site.router)
    return application


app = create_app()
