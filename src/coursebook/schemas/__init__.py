"""Shared schemas for coursebook."""

from coursebook.schemas.course import (
    Block,
    Course,
    Lesson,
    LessonDocument,
    LessonLink,
    LinkKind,
)
from coursebook.schemas.digest import DigestResult
from coursebook.schemas.report import IntegrityReport, Issue, Severity
from coursebook.schemas.sections import SectionNode

__all__ = [
    "Block",
    "Course",
    "DigestResult",
    "IntegrityReport",
    "Issue",
    "Lesson",
    "LessonDocument",
    "LessonLink",
    "LinkKind",
    "SectionNode",
    "Severity",
]
