"""Integrity checks for a course table of contents and its lesson files."""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path

from coursebook.config import COURSEBOOK_FETCH_CONCURRENCY
from coursebook.http_utils import check_urls
from coursebook.index_parser import is_conventional_filename
from coursebook.lesson_parser import parse_lesson
from coursebook.loader import discover_lesson_files, ensure_document
from coursebook.markdown_utils import slugify_anchor, split_href
from coursebook.schemas import (
    Course,
    IntegrityReport,
    Issue,
    Lesson,
    LessonDocument,
    LinkKind,
    Severity,
)

logger = logging.getLogger(__name__)

# Size of the reference textbook.
REFERENCE_LESSON_COUNT = 57
REFERENCE_BLOCK_COUNT = 10


def validate_course(
    course: Course,
    *,
    expected_lessons: int | None = None,
    expected_blocks: int | None = None,
    require_closing_sections: bool = True,
    check_internal_links: bool = True,
    strict: bool = False,
) -> IntegrityReport:
    """Run every local integrity check against ``course``.

    Content problems never raise; each becomes an :class:`Issue` on the
    returned report. External links are checked separately by
    :func:`validate_external_links` because that needs the network.

    Args:
        course: The loaded course. Lesson bodies that were not loaded yet
            are parsed on demand.
        expected_lessons: Required number of table-of-contents entries.
        expected_blocks: Required number of blocks.
        require_closing_sections: Warn about lessons without the "what to
            read next" and "self-check" sections.
        check_internal_links: Resolve relative links and anchors inside
            lesson bodies.
        strict: Make warnings fail the report as well.
    """
    report = IntegrityReport(
        course_title=course.title,
        blocks_checked=len(course.blocks),
        lessons_checked=course.lesson_count,
        strict=strict,
    )
    issues = report.issues
    issues.extend(_check_counts(course, expected_lessons, expected_blocks))
    issues.extend(_check_blocks(course))
    issues.extend(_check_entries(course))
    issues.extend(_check_numbering(course))
    issues.extend(_check_orphans(course))
    issues.extend(_check_contents(course, require_closing_sections=require_closing_sections))
    if check_internal_links:
        issues.extend(_check_internal_links(course))

    logger.info(
        "Validated course %r: %d errors, %d warnings",
        course.title,
        len(report.errors),
        len(report.warnings),
    )
    return report


async def validate_external_links(
    course: Course,
    *,
    concurrency: int = COURSEBOOK_FETCH_CONCURRENCY,
) -> list[Issue]:
    """Check every ``http(s)`` link in the lesson bodies.

    Each failing URL yields one ``external-link`` error per lesson that
    references it.
    """
    occurrences: dict[str, list[Lesson]] = defaultdict(list)
    for lesson in course.lessons:
        ensure_document(lesson)
        if lesson.document is None:
            continue
        for link in lesson.document.links:
            if link.kind is not LinkKind.EXTERNAL:
                continue
            url = link.href.split("#", 1)[0]
            if lesson not in occurrences[url]:
                occurrences[url].append(lesson)

    results = await check_urls(occurrences, concurrency=concurrency)

    issues: list[Issue] = []
    for url, outcome in results.items():
        if isinstance(outcome, int) and outcome < 400:
            continue
        detail = f"HTTP {outcome}" if isinstance(outcome, int) else outcome
        for lesson in occurrences[url]:
            issues.append(
                _issue(Severity.ERROR, "external-link", f"{url} is unreachable ({detail})", lesson)
            )
    return issues


def _issue(severity: Severity, code: str, message: str, lesson: Lesson | None = None) -> Issue:
    return Issue(
        severity=severity,
        code=code,
        message=message,
        lesson=lesson.number if lesson else None,
        path=lesson.path if lesson else None,
    )


def _check_counts(
    course: Course,
    expected_lessons: int | None,
    expected_blocks: int | None,
) -> list[Issue]:
    issues: list[Issue] = []
    if expected_lessons is not None and course.lesson_count != expected_lessons:
        issues.append(
            _issue(
                Severity.ERROR,
                "lesson-count",
                f"Expected {expected_lessons} lessons, table of contents has {course.lesson_count}",
            )
        )
    if expected_blocks is not None and len(course.blocks) != expected_blocks:
        issues.append(
            _issue(
                Severity.ERROR,
                "block-count",
                f"Expected {expected_blocks} blocks, table of contents has {len(course.blocks)}",
            )
        )
    return issues


def _check_blocks(course: Course) -> list[Issue]:
    return [
        _issue(Severity.WARNING, "empty-block", f"Block {block.position} ({block.title!r}) has no lessons")
        for block in course.blocks
        if not block.lessons
    ]


def _check_entries(course: Course) -> list[Issue]:
    issues: list[Issue] = []
    lessons_root = (course.root / course.lessons_dir).resolve()
    seen_targets: dict[Path, Lesson] = {}

    for lesson in course.lessons:
        if not lesson.exists:
            issues.append(
                _issue(Severity.ERROR, "missing-file", f"{lesson.href} does not exist", lesson)
            )

        if not is_conventional_filename(lesson.path.name):
            issues.append(
                _issue(
                    Severity.ERROR,
                    "bad-filename",
                    f"{lesson.path.name} does not follow the NN-kebab-case-title.md convention",
                    lesson,
                )
            )

        if lessons_root not in lesson.path.parents:
            issues.append(
                _issue(
                    Severity.WARNING,
                    "wrong-directory",
                    f"{lesson.href} is outside the {course.lessons_dir}/ directory",
                    lesson,
                )
            )

        previous = seen_targets.get(lesson.path)
        if previous is not None:
            issues.append(
                _issue(
                    Severity.ERROR,
                    "duplicate-target",
                    f"{lesson.href} is linked from entries {previous.position} and {lesson.position}",
                    lesson,
                )
            )
        else:
            seen_targets[lesson.path] = lesson

    return issues


def _check_numbering(course: Course) -> list[Issue]:
    issues: list[Issue] = []
    numbered = [lesson for lesson in course.lessons if lesson.number is not None]
    if not numbered:
        return issues

    by_number: dict[int, list[Lesson]] = defaultdict(list)
    for lesson in numbered:
        by_number[lesson.number].append(lesson)
    for number, lessons in sorted(by_number.items()):
        if len(lessons) > 1:
            titles = ", ".join(repr(lesson.title) for lesson in lessons)
            issues.append(
                _issue(
                    Severity.ERROR,
                    "duplicate-number",
                    f"Lesson number {number:02d} is used by {len(lessons)} entries: {titles}",
                    lessons[1],
                )
            )
        if number < 1:
            for lesson in lessons:
                issues.append(
                    _issue(
                        Severity.ERROR,
                        "number-out-of-range",
                        f"Lesson number {number:02d} is outside the sequence, which starts at 01",
                        lesson,
                    )
                )

    highest = max(by_number)
    for number in range(1, highest + 1):
        if number not in by_number:
            issues.append(
                _issue(
                    Severity.ERROR,
                    "numbering-gap",
                    f"Lesson {number:02d} is missing from the sequence 01-{highest:02d}",
                )
            )

    previous: Lesson | None = None
    for lesson in numbered:
        if previous is not None and lesson.number <= previous.number:
            where = (
                f"in block {lesson.block}"
                if lesson.block == previous.block
                else f"at the start of block {lesson.block}"
            )
            issues.append(
                _issue(
                    Severity.ERROR,
                    "out-of-order",
                    f"Lesson {lesson.number:02d} appears after lesson {previous.number:02d} {where}",
                    lesson,
                )
            )
        previous = lesson

    return issues


def _check_orphans(course: Course) -> list[Issue]:
    referenced = {lesson.path for lesson in course.lessons}
    return [
        Issue(
            severity=Severity.WARNING,
            code="orphan-file",
            message=f"{_display_path(course, path)} is not linked from the table of contents",
            path=path,
        )
        for path in discover_lesson_files(course)
        if path not in referenced
    ]


def _display_path(course: Course, path: Path) -> str:
    try:
        return path.relative_to(course.root).as_posix()
    except ValueError:
        # Lessons directory is a symlink leading outside the root.
        lessons_root = (course.root / course.lessons_dir).resolve()
        return (Path(course.lessons_dir) / path.relative_to(lessons_root)).as_posix()


def _check_contents(course: Course, *, require_closing_sections: bool) -> list[Issue]:
    issues: list[Issue] = []
    for lesson in course.lessons:
        ensure_document(lesson)
        document = lesson.document
        if document is None:
            continue

        if document.is_empty:
            issues.append(_issue(Severity.ERROR, "empty-lesson", f"{lesson.href} is empty", lesson))
            continue
        if not document.has_heading:
            issues.append(
                _issue(Severity.ERROR, "no-heading", f"{lesson.href} contains no heading", lesson)
            )
        if require_closing_sections:
            if not document.has_read_next:
                issues.append(
                    _issue(
                        Severity.WARNING,
                        "missing-read-next",
                        f"{lesson.href} has no 'what to read next' section",
                        lesson,
                    )
                )
            if not document.has_self_check:
                issues.append(
                    _issue(
                        Severity.WARNING,
                        "missing-self-check",
                        f"{lesson.href} has no 'self-check' section",
                        lesson,
                    )
                )
    return issues


def _check_internal_links(course: Course) -> list[Issue]:
    issues: list[Issue] = []
    documents: dict[Path, LessonDocument] = {
        lesson.path: lesson.document for lesson in course.lessons if lesson.document is not None
    }

    def document_for(path: Path) -> LessonDocument | None:
        if path not in documents and path.is_file() and path.suffix.lower() == ".md":
            documents[path] = parse_lesson(path.read_text(encoding="utf-8", errors="replace"))
        return documents.get(path)

    for lesson in course.lessons:
        document = lesson.document
        if document is None:
            continue
        for link in document.links:
            if link.kind is LinkKind.ANCHOR:
                fragment = link.href[1:]
                if fragment and slugify_anchor(fragment) not in document.anchors:
                    issues.append(
                        _issue(
                            Severity.WARNING,
                            "broken-anchor",
                            f"{lesson.href} links to missing heading #{fragment}",
                            lesson,
                        )
                    )
                continue
            if link.kind is not LinkKind.RELATIVE:
                continue

            path_part, fragment = split_href(link.href)
            target = (lesson.path.parent / path_part).resolve()
            if not target.exists():
                issues.append(
                    _issue(
                        Severity.ERROR,
                        "broken-link",
                        f"{lesson.href} links to {link.href}, which does not exist",
                        lesson,
                    )
                )
                continue
            if not fragment:
                continue
            target_document = document_for(target)
            if target_document is not None and slugify_anchor(fragment) not in target_document.anchors:
                issues.append(
                    _issue(
                        Severity.WARNING,
                        "broken-anchor",
                        f"{lesson.href} links to {link.href}, which has no such heading",
                        lesson,
                    )
                )
    return issues
