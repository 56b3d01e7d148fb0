"""Course outline and lesson endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from coursebook.exceptions import LessonNotFoundError
from coursebook.schemas import Course, Lesson
from server.models import CourseResponse, ErrorResponse, LessonResponse
from server.routers.deps import get_course
from server.server_config import MAX_DISPLAY_SIZE

router = APIRouter()

CourseDep = Annotated[Course, Depends(get_course)]

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}


@router.get("/api/course", response_model=CourseResponse)
async def api_course(course: CourseDep) -> CourseResponse:
    """Return the table of contents: blocks, lesson numbers, and titles."""
    return CourseResponse.from_course(course)


@router.get("/api/lessons/{number}", response_model=LessonResponse, responses=_NOT_FOUND)
async def api_lesson(number: int, course: CourseDep) -> LessonResponse:
    """Return one lesson's metadata, heading outline, and markdown.

    **Raises**

    - **HTTPException**: **404** - the number is not in the table of contents or its file is missing
    """
    lesson = available_lesson(course, number)
    previous, following = course.neighbours(lesson)
    content = lesson.document.markdown
    truncated = len(content) > MAX_DISPLAY_SIZE
    if truncated:
        content = content[:MAX_DISPLAY_SIZE]

    return LessonResponse(
        number=lesson.number,
        title=lesson.title,
        heading=lesson.document.title,
        block=lesson.block,
        previous=previous.number if previous else None,
        next=following.number if following else None,
        sections=lesson.document.sections,
        content=content,
        truncated=truncated,
    )


def available_lesson(course: Course, number: int) -> Lesson:
    try:
        lesson = course.get_lesson(number)
    except LessonNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if lesson.document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Lesson file missing: {lesson.href}",
        )
    return lesson
