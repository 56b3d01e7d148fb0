"""Integrity check endpoint."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from coursebook.schemas import Course, IntegrityReport
from coursebook.validation import validate_course, validate_external_links
from server.routers.deps import get_course

router = APIRouter()


@router.get("/api/check", response_model=IntegrityReport)
async def api_check(
    course: Annotated[Course, Depends(get_course)],
    expected_lessons: int | None = None,
    expected_blocks: int | None = None,
    strict: bool = False,
    external: bool = False,
    closing_sections: bool = True,
    internal_links: bool = True,
) -> IntegrityReport:
    """Validate the course and return the integrity report.

    **Query Parameters**
    - **expected_lessons** (`int`, optional): Required number of lessons
    - **expected_blocks** (`int`, optional): Required number of blocks
    - **strict** (`bool`): Treat warnings as failures
    - **external** (`bool`): Also check http(s) links over the network
    - **closing_sections** (`bool`): Require "what to read next" and "self-check" sections
    - **internal_links** (`bool`): Resolve links between lessons
    """
    report = await asyncio.to_thread(
        validate_course,
        course,
        expected_lessons=expected_lessons,
        expected_blocks=expected_blocks,
        require_closing_sections=closing_sections,
        check_internal_links=internal_links,
        strict=strict,
    )
    if external:
        report.issues.extend(await validate_external_links(course))
    return report
