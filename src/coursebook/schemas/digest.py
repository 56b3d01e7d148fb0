"""Digest output model."""

from __future__ import annotations

from pydantic import BaseModel


class DigestResult(BaseModel):
    """Whole-course digest output."""

    summary: str
    lessons_tree: str
    content: str
