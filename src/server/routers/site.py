"""Rendered HTML pages, addressed like the static site build."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse

from coursebook.schemas import Course
from coursebook.site import INDEX_PAGE, page_path, render_index_html, render_lesson_html
from server.models import ErrorResponse
from server.routers.deps import get_course
from server.routers.lessons import available_lesson

router = APIRouter()

CourseDep = Annotated[Course, Depends(get_course)]

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}


@router.get("/", response_class=HTMLResponse)
async def index_page(course: CourseDep) -> HTMLResponse:
    """Rendered index document."""
    return HTMLResponse(await asyncio.to_thread(render_index_html, course))


@router.get("/lessons/{number:int}", response_class=HTMLResponse, responses=_NOT_FOUND)
async def lesson_page(number: int, course: CourseDep) -> HTMLResponse:
    """Rendered lesson page, addressed by lesson number."""
    lesson = available_lesson(course, number)
    return HTMLResponse(await asyncio.to_thread(render_lesson_html, course, lesson))


@router.get("/{page:path}", response_class=HTMLResponse, responses=_NOT_FOUND)
async def site_page(page: str, course: CourseDep) -> HTMLResponse:
    """Rendered page at the same relative path the static build would write.

    Pages link to each other as ``lessons/NN-slug.html``; this route resolves
    those links.
    """
    if page in ("", INDEX_PAGE):
        return HTMLResponse(await asyncio.to_thread(render_index_html, course))
    for lesson in course.lessons:
        if lesson.document is not None and page_path(course, lesson).as_posix() == page:
            return HTMLResponse(await asyncio.to_thread(render_lesson_html, course, lesson))
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No page at /{page}")
