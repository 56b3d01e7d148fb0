"""Load a course checkout from disk."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable

from coursebook.config import (
    COURSEBOOK_INDEX_NAME,
    COURSEBOOK_LESSONS_DIR,
    COURSEBOOK_ROOT,
)
from coursebook.exceptions import IndexNotFoundError
from coursebook.fs_utils import discover_markdown_files, read_text_async
from coursebook.index_parser import parse_index
from coursebook.lesson_parser import parse_lesson
from coursebook.schemas import Course, Lesson

logger = logging.getLogger(__name__)


async def load_course(
    root: Path | str | None = None,
    *,
    index_name: str = COURSEBOOK_INDEX_NAME,
    lessons_dir: str = COURSEBOOK_LESSONS_DIR,
    load_bodies: bool = True,
) -> Course:
    """Read the index and, optionally, every lesson body of a course.

    Missing lesson files are not an error here; validation reports them.

    Args:
        root: Course checkout directory. Defaults to ``COURSEBOOK_ROOT``.
        index_name: Filename of the index document inside ``root``.
        lessons_dir: Directory holding lesson files, relative to ``root``.
        load_bodies: If False, only the table of contents is parsed.

    Returns:
        The parsed course.

    Raises:
        IndexNotFoundError: If the index document does not exist.
        IndexParseError: If the index links to no lessons.
    """
    root_path = Path(root).expanduser().resolve() if root is not None else COURSEBOOK_ROOT
    index_path = root_path / index_name
    if not index_path.is_file():
        raise IndexNotFoundError(f"No course index at {index_path}")

    text = await read_text_async(index_path)
    course = parse_index(text, root=root_path, index_path=index_path, lessons_dir=lessons_dir)

    if load_bodies:
        await load_lesson_documents(course.lessons)

    logger.debug(
        "Loaded course %r: %d blocks, %d lessons",
        course.title,
        len(course.blocks),
        course.lesson_count,
    )
    return course


def load_course_sync(root: Path | str | None = None, **kwargs) -> Course:
    """Blocking wrapper around :func:`load_course`."""
    return asyncio.run(load_course(root, **kwargs))


async def load_lesson_documents(lessons: Iterable[Lesson]) -> None:
    """Read and parse the bodies of lessons whose files exist."""
    pending = [lesson for lesson in lessons if lesson.document is None and lesson.exists]
    texts = await asyncio.gather(*(read_text_async(lesson.path) for lesson in pending))
    for lesson, text in zip(pending, texts):
        lesson.document = parse_lesson(text)


def ensure_document(lesson: Lesson) -> None:
    """Parse a lesson body synchronously if it has not been loaded yet."""
    if lesson.document is None and lesson.exists:
        lesson.document = parse_lesson(lesson.path.read_text(encoding="utf-8", errors="replace"))


def discover_lesson_files(course: Course) -> list[Path]:
    """Every markdown file in the course's lessons directory."""
    return discover_markdown_files(course.root / course.lessons_dir)
