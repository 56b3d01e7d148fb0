"""Tests for output formatting."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from coursebook.loader import load_course_sync
from coursebook.output_formatter import (
    _format_token_count,
    count_course_sections,
    count_sections,
    format_course,
    format_report,
    format_toc,
    render_sections,
)
from coursebook.schemas import IntegrityReport, Issue, SectionNode, Severity


class TestFormatCourse:
    """Tests for format_course function."""

    def test_lessons_tree(self, course_root: Path) -> None:
        result = format_course(load_course_sync(course_root))

        assert result.lessons_tree == (
            "Lessons:\n"
            "Foundations\n"
            "    01. Latency numbers every engineer should know\n"
            "    02. Back-of-the-envelope estimation\n"
            "Caching\n"
            "    03. Cache strategies\n"
            "    04. Eviction policies"
        )

    def test_summary(self, course_root: Path) -> None:
        result = format_course(load_course_sync(course_root))

        lines = result.summary.splitlines()
        assert lines[:4] == [
            "Title: System Design Primer",
            "Blocks: 2",
            "Lessons: 4",
            "Sections: 18",
        ]
        assert "Missing lessons" not in result.summary

    def test_content_concatenates_lessons_in_order(self, course_root: Path) -> None:
        result = format_course(load_course_sync(course_root))

        assert result.content.startswith("# System Design Primer\n\n## Contents\n- Foundations\n")
        positions = [
            result.content.index(title)
            for title in (
                "# Latency numbers every engineer should know",
                "# Back-of-the-envelope estimation",
                "# Cache strategies",
                "Eviction policies\n=================",
            )
        ]
        assert positions == sorted(positions)

    def test_without_toc(self, course_root: Path) -> None:
        result = format_course(load_course_sync(course_root), include_toc=False)

        assert "## Contents" not in result.content

    def test_missing_lesson_placeholder(self, course_root: Path) -> None:
        (course_root / "lessons" / "02-back-of-the-envelope.md").unlink()

        result = format_course(load_course_sync(course_root))

        assert "*Lesson file missing: lessons/02-back-of-the-envelope.md*" in result.content
        assert "Missing lessons: 1" in result.summary

    def test_token_estimate_omitted_without_tiktoken(self, course_root: Path) -> None:
        with patch("coursebook.output_formatter.tiktoken", None):
            result = format_course(load_course_sync(course_root))

        assert "Estimated tokens" not in result.summary


def test_format_toc(course_root: Path) -> None:
    (course_root / "lessons" / "04-eviction-policies.md").unlink()

    toc = format_toc(load_course_sync(course_root))

    assert toc.splitlines() == [
        "System Design Primer",
        "",
        "1. Foundations",
        "   01. Latency numbers every engineer should know",
        "   02. Back-of-the-envelope estimation",
        "2. Caching",
        "   03. Cache strategies",
        "   04. Eviction policies  (missing)",
    ]


class TestFormatReport:
    """Tests for format_report function."""

    def test_errors_before_warnings(self) -> None:
        report = IntegrityReport(
            course_title="Course",
            blocks_checked=1,
            lessons_checked=2,
            issues=[
                Issue(severity=Severity.WARNING, code="orphan-file", message="lessons/09-x.md is orphaned"),
                Issue(severity=Severity.ERROR, code="missing-file", message="lessons/02-b.md does not exist"),
            ],
        )

        assert format_report(report).splitlines() == [
            "Course: Course",
            "Checked 1 blocks, 2 lessons",
            "ERROR   [missing-file] lessons/02-b.md does not exist",
            "WARNING [orphan-file] lessons/09-x.md is orphaned",
            "Result: FAILED (1 errors, 1 warnings)",
        ]

    def test_ok_report(self) -> None:
        report = IntegrityReport(course_title="Course", blocks_checked=1, lessons_checked=1)

        assert format_report(report).endswith("Result: OK (0 errors, 0 warnings)")


def _sections() -> list[SectionNode]:
    return [
        SectionNode(
            title="Caching",
            level=1,
            markdown="Intro.",
            children=[SectionNode(title="LRU", level=2, markdown="Evict.")],
        )
    ]


def test_render_sections() -> None:
    assert render_sections(_sections()) == "# Caching\n\nIntro.\n\n## LRU\n\nEvict."


def test_count_sections() -> None:
    assert count_sections(_sections()) == 2
    assert count_sections([]) == 0


def test_count_course_sections(course_root: Path) -> None:
    assert count_course_sections(load_course_sync(course_root)) == 18


class TestFormatTokenCount:
    """Tests for _format_token_count function."""

    def test_without_tiktoken(self) -> None:
        with patch("coursebook.output_formatter.tiktoken", None):
            assert _format_token_count("hello") is None

    def test_formats_thousands(self) -> None:
        class FakeEncoding:
            def encode(self, text, disallowed_special=()):
                return [0] * 2500

        class FakeTiktoken:
            @staticmethod
            def get_encoding(name):
                return FakeEncoding()

        with patch("coursebook.output_formatter.tiktoken", FakeTiktoken):
            assert _format_token_count("text") == "2.5k"
