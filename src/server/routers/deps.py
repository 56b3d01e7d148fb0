"""Shared request dependencies."""

from __future__ import annotations

from fastapi import Request

from coursebook.loader import load_course
from coursebook.schemas import Course


async def get_course(request: Request) -> Course:
    """Load the course fresh for each request so edits show up without a restart."""
    return await load_course(request.app.state.course_root)
