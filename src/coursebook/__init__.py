"""coursebook: check, read, and render markdown textbooks."""

from coursebook.exceptions import (
    CoursebookError,
    FetchError,
    IndexNotFoundError,
    IndexParseError,
    LessonNotFoundError,
    RenderError,
)
from coursebook.index_parser import parse_index
from coursebook.lesson_parser import parse_lesson
from coursebook.loader import load_course, load_course_sync
from coursebook.output_formatter import format_course, format_report, format_toc
from coursebook.schemas import (
    Block,
    Course,
    DigestResult,
    IntegrityReport,
    Issue,
    Lesson,
    LessonDocument,
    SectionNode,
    Severity,
)
from coursebook.site import build_site
from coursebook.validation import validate_course, validate_external_links

__all__ = [
    "Block",
    "Course",
    "CoursebookError",
    "DigestResult",
    "FetchError",
    "IndexNotFoundError",
    "IndexParseError",
    "IntegrityReport",
    "Issue",
    "Lesson",
    "LessonDocument",
    "LessonNotFoundError",
    "RenderError",
    "SectionNode",
    "Severity",
    "build_site",
    "format_course",
    "format_report",
    "format_toc",
    "load_course",
    "load_course_sync",
    "parse_index",
    "parse_lesson",
    "validate_course",
    "validate_external_links",
]
