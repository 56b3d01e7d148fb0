"""Tests for course index parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from coursebook.exceptions import IndexParseError
from coursebook.index_parser import (
    is_conventional_filename,
    is_lesson_href,
    normalize_list_indentation,
    parse_index,
    parse_lesson_filename,
)

from conftest import FIXTURE_COURSE


class TestParseIndex:
    """Tests for parse_index function."""

    @pytest.fixture
    def course(self):
        text = (FIXTURE_COURSE / "README.md").read_text(encoding="utf-8")
        return parse_index(text, root=FIXTURE_COURSE.resolve())

    def test_course_title_from_first_heading(self, course) -> None:
        assert course.title == "System Design Primer"

    def test_blocks_in_order(self, course) -> None:
        assert [block.title for block in course.blocks] == ["Foundations", "Caching"]
        assert [block.position for block in course.blocks] == [1, 2]

    def test_lessons_in_order(self, course) -> None:
        lessons = course.lessons
        assert [lesson.number for lesson in lessons] == [1, 2, 3, 4]
        assert [lesson.position for lesson in lessons] == [1, 2, 3, 4]
        assert [lesson.block for lesson in lessons] == [1, 1, 2, 2]
        assert lessons[0].title == "Latency numbers every engineer should know"
        assert lessons[0].slug == "latency-numbers"
        assert lessons[0].href == "lessons/01-latency-numbers.md"
        assert lessons[0].path == (FIXTURE_COURSE / "lessons" / "01-latency-numbers.md").resolve()

    def test_ignores_non_lesson_links(self, course) -> None:
        assert all("CONTRIBUTING" not in lesson.href for lesson in course.lessons)

    def test_heading_layout(self, tmp_path: Path) -> None:
        """Each heading opens a block holding the list below it."""
        text = (
            "# Course\n\n"
            "## Basics\n\n"
            "- [A](lessons/01-a.md)\n"
            "- [B](lessons/02-b.md)\n\n"
            "## Advanced\n\n"
            "- [C](lessons/03-c.md)\n"
        )

        course = parse_index(text, root=tmp_path)

        assert [block.title for block in course.blocks] == ["Basics", "Advanced"]
        assert [len(block.lessons) for block in course.blocks] == [2, 1]

    def test_two_space_nested_lists(self, tmp_path: Path) -> None:
        """Nested lists indented GitHub-style still produce blocks."""
        text = (
            "1. Block one\n"
            "  1. [A](lessons/01-a.md)\n"
            "  2. [B](lessons/02-b.md)\n"
            "2. Block two\n"
            "  1. [C](lessons/03-c.md)\n"
        )

        course = parse_index(text, root=tmp_path)

        assert [block.title for block in course.blocks] == ["Block one", "Block two"]
        assert [lesson.number for lesson in course.lessons] == [1, 2, 3]

    def test_flat_list_gets_default_block(self, tmp_path: Path) -> None:
        course = parse_index("# Course\n\n- [A](lessons/01-a.md)\n", root=tmp_path)

        assert len(course.blocks) == 1
        assert course.blocks[0].title == "Lessons"

    def test_title_falls_back_to_directory_name(self, tmp_path: Path) -> None:
        root = tmp_path / "my-course"
        course = parse_index("- [A](lessons/01-a.md)\n", root=root)

        assert course.title == "my-course"

    def test_unconventional_filename_has_no_number(self, tmp_path: Path) -> None:
        course = parse_index("- [Intro](lessons/intro.md)\n", root=tmp_path)

        lesson = course.lessons[0]
        assert lesson.number is None
        assert lesson.slug is None
        assert lesson.label == "Intro"

    def test_raises_without_lesson_links(self, tmp_path: Path) -> None:
        text = "# Course\n\n- [Site](https://example.com)\n- [Section](#intro)\n"

        with pytest.raises(IndexParseError, match="does not link to any lesson"):
            parse_index(text, root=tmp_path)


class TestLessonFilenames:
    """Tests for filename convention helpers."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("05-caching.md", (5, "caching")),
            ("57-case-study-twitter.md", (57, "case-study-twitter")),
            ("1-intro.md", (1, "intro")),
            ("notes.md", None),
            ("05-caching.txt", None),
        ],
    )
    def test_parse_lesson_filename(self, name: str, expected: tuple[int, str] | None) -> None:
        assert parse_lesson_filename(name) == expected

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("05-cache-aside.md", True),
            ("5-cache.md", False),
            ("05_cache.md", False),
            ("05-Cache.md", False),
            ("05-cache--aside.md", False),
        ],
    )
    def test_is_conventional_filename(self, name: str, expected: bool) -> None:
        assert is_conventional_filename(name) is expected

    @pytest.mark.parametrize(
        ("href", "expected"),
        [
            ("lessons/01-a.md", True),
            ("./lessons/intro.md", True),
            ("lessons/01-a.md#part", True),
            ("other/07-b.md", True),
            ("CONTRIBUTING.md", False),
            ("https://example.com/01-a.md", False),
            ("#lessons", False),
        ],
    )
    def test_is_lesson_href(self, href: str, expected: bool) -> None:
        assert is_lesson_href(href) is expected


def test_normalize_list_indentation() -> None:
    text = "1. A\n   1. B\n      1. C\n2. D\n\nParagraph"

    assert normalize_list_indentation(text) == "1. A\n    1. B\n        1. C\n2. D\n\nParagraph"
