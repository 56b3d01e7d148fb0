"""Format a course into outlines, digests, and integrity reports."""

from __future__ import annotations

from typing import Iterable

try:
    import tiktoken
except ImportError:  # pragma: no cover - optional dependency
    tiktoken = None

from coursebook.schemas import (
    Course,
    DigestResult,
    IntegrityReport,
    Lesson,
    SectionNode,
    Severity,
)


def format_course(course: Course, *, include_toc: bool = True) -> DigestResult:
    """Create summary, lessons tree, and whole-course content."""
    tree = "Lessons:\n" + _create_lessons_tree(course)
    content = _render_content(course, include_toc=include_toc)

    summary_lines = [f"Title: {course.title}"]
    summary_lines.append(f"Blocks: {len(course.blocks)}")
    summary_lines.append(f"Lessons: {course.lesson_count}")
    missing = sum(1 for lesson in course.lessons if lesson.document is None)
    if missing:
        summary_lines.append(f"Missing lessons: {missing}")
    summary_lines.append(f"Sections: {count_course_sections(course)}")

    token_estimate = _format_token_count(tree + "\n" + content)
    if token_estimate:
        summary_lines.append(f"Estimated tokens: {token_estimate}")

    summary = "\n".join(summary_lines)

    return DigestResult(summary=summary, lessons_tree=tree, content=content)


def format_toc(course: Course) -> str:
    """Numbered outline of blocks and lessons."""
    lines = [course.title, ""]
    for block in course.blocks:
        lines.append(f"{block.position}. {block.title}")
        for lesson in block.lessons:
            marker = "" if lesson.exists else "  (missing)"
            lines.append(f"   {lesson.label}{marker}")
    return "\n".join(lines)


def format_report(report: IntegrityReport) -> str:
    """Human-readable integrity report, errors first."""
    lines = [
        f"Course: {report.course_title}",
        f"Checked {report.blocks_checked} blocks, {report.lessons_checked} lessons",
    ]
    for severity in (Severity.ERROR, Severity.WARNING):
        for issue in report.issues:
            if issue.severity is not severity:
                continue
            label = severity.value.upper()
            lines.append(f"{label:<7} [{issue.code}] {issue.message}")

    status = "OK" if report.ok else "FAILED"
    lines.append(f"Result: {status} ({len(report.errors)} errors, {len(report.warnings)} warnings)")
    return "\n".join(lines)


def render_sections(sections: Iterable[SectionNode]) -> str:
    """Serialize a (possibly filtered) section tree back to markdown."""
    blocks: list[str] = []
    for section in sections:
        blocks.extend(_render_section(section))
    return "\n\n".join(block for block in blocks if block).strip()


def count_sections(sections: Iterable[SectionNode]) -> int:
    """Count total sections in the tree."""
    total = 0
    for section in sections:
        total += 1
        total += count_sections(section.children)
    return total


def count_course_sections(course: Course) -> int:
    return sum(
        count_sections(lesson.document.sections)
        for lesson in course.lessons
        if lesson.document is not None
    )


def _render_content(course: Course, *, include_toc: bool) -> str:
    blocks: list[str] = [f"# {course.title}"]
    if include_toc:
        toc = _render_toc(course)
        if toc:
            blocks.append("## Contents\n" + toc)

    for lesson in course.lessons:
        blocks.append(_render_lesson(lesson))

    return "\n\n".join(block for block in blocks if block).strip()


def _render_lesson(lesson: Lesson) -> str:
    if lesson.document is None:
        return f"*Lesson file missing: {lesson.href}*"
    return lesson.document.markdown.strip()


def _render_section(section: SectionNode) -> list[str]:
    blocks: list[str] = []
    heading_prefix = "#" * min(section.level, 6)
    blocks.append(f"{heading_prefix} {section.title}")
    if section.markdown:
        blocks.append(section.markdown)
    for child in section.children:
        blocks.extend(_render_section(child))
    return blocks


def _render_toc(course: Course) -> str:
    lines: list[str] = []
    for block in course.blocks:
        lines.append(f"- {block.title}")
        for lesson in block.lessons:
            lines.append(f"  - {lesson.label}")
    return "\n".join(lines)


def _create_lessons_tree(course: Course) -> str:
    lines: list[str] = []
    for block in course.blocks:
        lines.append(block.title)
        for lesson in block.lessons:
            lines.append(" " * 4 + lesson.label)
    return "\n".join(lines)


def _format_token_count(text: str) -> str | None:
    if not tiktoken:
        return None
    try:
        encoding = tiktoken.get_encoding("o200k_base")
        total_tokens = len(encoding.encode(text, disallowed_special=()))
    except Exception:
        return None

    if total_tokens >= 1_000_000:
        return f"{total_tokens / 1_000_000:.1f}M"
    if total_tokens >= 1_000:
        return f"{total_tokens / 1_000:.1f}k"
    return str(total_tokens)
