"""Tests for course loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from coursebook.exceptions import IndexNotFoundError, IndexParseError
from coursebook.loader import (
    discover_lesson_files,
    ensure_document,
    load_course,
    load_course_sync,
)

from helpers import lesson_body, nested_index


class TestLoadCourse:
    """Tests for load_course function."""

    @pytest.mark.asyncio
    async def test_loads_index_and_bodies(self, course_root: Path) -> None:
        course = await load_course(course_root)

        assert course.title == "System Design Primer"
        assert course.root == course_root.resolve()
        assert course.index_path == course_root.resolve() / "README.md"
        assert course.lesson_count == 4
        assert all(lesson.document is not None for lesson in course.lessons)
        assert course.lessons[3].document.title == "Eviction policies"

    @pytest.mark.asyncio
    async def test_skips_bodies_when_asked(self, course_root: Path) -> None:
        course = await load_course(course_root, load_bodies=False)

        assert all(lesson.document is None for lesson in course.lessons)

    @pytest.mark.asyncio
    async def test_missing_lesson_is_not_an_error(self, course_root: Path) -> None:
        (course_root / "lessons" / "02-back-of-the-envelope.md").unlink()

        course = await load_course(course_root)

        lesson = course.get_lesson(2)
        assert not lesson.exists
        assert lesson.document is None
        assert course.get_lesson(3).document is not None

    @pytest.mark.asyncio
    async def test_missing_index_raises(self, tmp_path: Path) -> None:
        with pytest.raises(IndexNotFoundError, match="No course index"):
            await load_course(tmp_path)

    @pytest.mark.asyncio
    async def test_index_without_lessons_raises(self, make_course) -> None:
        root = make_course("# Empty course\n\nNothing here yet.\n")

        with pytest.raises(IndexParseError):
            await load_course(root)

    @pytest.mark.asyncio
    async def test_custom_index_and_lessons_dir(self, tmp_path: Path) -> None:
        root = tmp_path / "book"
        (root / "chapters").mkdir(parents=True)
        (root / "chapters" / "01-start.md").write_text(lesson_body("Start"), encoding="utf-8")
        (root / "INDEX.md").write_text(
            nested_index({"Part one": [("Start", "chapters/01-start.md")]}),
            encoding="utf-8",
        )

        course = await load_course(root, index_name="INDEX.md", lessons_dir="chapters")

        assert course.lessons_dir == "chapters"
        assert course.index_path.name == "INDEX.md"
        assert course.lessons[0].document.title == "Start"
        assert discover_lesson_files(course) == [(root / "chapters" / "01-start.md").resolve()]


def test_load_course_sync(course_root: Path) -> None:
    course = load_course_sync(course_root)

    assert [block.title for block in course.blocks] == ["Foundations", "Caching"]


def test_ensure_document_parses_once(course_root: Path) -> None:
    course = load_course_sync(course_root, load_bodies=False)
    lesson = course.get_lesson(1)

    ensure_document(lesson)
    first = lesson.document
    ensure_document(lesson)

    assert first is not None
    assert lesson.document is first


def test_discover_lesson_files(course_root: Path) -> None:
    (course_root / "lessons" / "notes.txt").write_text("not markdown", encoding="utf-8")
    course = load_course_sync(course_root, load_bodies=False)

    names = [path.name for path in discover_lesson_files(course)]

    assert names == [
        "01-latency-numbers.md",
        "02-back-of-the-envelope.md",
        "03-cache-strategies.md",
        "04-eviction-policies.md",
    ]
