"""Command-line interface for checking, reading, and rendering a course."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from coursebook.config import (
    COURSEBOOK_INDEX_NAME,
    COURSEBOOK_LESSONS_DIR,
    COURSEBOOK_LOG_LEVEL,
    COURSEBOOK_ROOT,
)
from coursebook.exceptions import CoursebookError, RenderError
from coursebook.loader import load_course
from coursebook.output_formatter import format_course, format_report, format_toc, render_sections
from coursebook.schemas import Course
from coursebook.sections import filter_sections
from coursebook.site import build_site
from coursebook.utils.logging_config import configure_logging, get_logger
from coursebook.validation import validate_course, validate_external_links

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INTEGRITY_FAILED = 1
EXIT_ERROR = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _add_course_options(parser: argparse.ArgumentParser, *, with_defaults: bool) -> None:
    """Options accepted both before and after the subcommand name.

    Subcommand copies suppress their defaults so they do not overwrite a value
    given before the subcommand.
    """

    def default(value):
        return value if with_defaults else argparse.SUPPRESS

    parser.add_argument("--root", type=Path, default=default(COURSEBOOK_ROOT), help="Course checkout directory")
    parser.add_argument("--index", default=default(COURSEBOOK_INDEX_NAME), help="Index document inside the root")
    parser.add_argument(
        "--lessons-dir",
        default=default(COURSEBOOK_LESSONS_DIR),
        help="Lessons directory inside the root",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=default(COURSEBOOK_LOG_LEVEL.upper()),
        help="Logging level",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coursebook",
        description="Check, read, and render a markdown textbook.",
    )
    _add_course_options(parser, with_defaults=True)
    common = argparse.ArgumentParser(add_help=False)
    _add_course_options(common, with_defaults=False)
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", parents=[common], help="Validate table of contents and lesson files")
    check.add_argument("--expected-lessons", type=int, help="Required number of lessons")
    check.add_argument("--expected-blocks", type=int, help="Required number of blocks")
    check.add_argument("--strict", action="store_true", help="Treat warnings as failures")
    check.add_argument("--external", action="store_true", help="Also check http(s) links over the network")
    check.add_argument(
        "--no-closing-sections",
        action="store_true",
        help="Do not require 'what to read next' and 'self-check' sections",
    )
    check.add_argument("--no-internal-links", action="store_true", help="Skip links between lessons")
    check.add_argument("--format", choices=("text", "json"), default="text")

    subparsers.add_parser("toc", parents=[common], help="Print the table of contents")

    show = subparsers.add_parser("show", parents=[common], help="Print one lesson")
    show.add_argument("number", type=int, help="Lesson number")
    show.add_argument(
        "--section",
        action="append",
        default=[],
        help="Only print sections with this title (repeatable)",
    )

    digest = subparsers.add_parser("digest", parents=[common], help="Print the whole course as one markdown document")
    digest.add_argument("--no-toc", action="store_true", help="Omit the generated contents list")
    digest.add_argument("--output", type=Path, help="Write to this file instead of stdout")

    build = subparsers.add_parser("build", parents=[common], help="Render the course to a static HTML site")
    build.add_argument("out_dir", type=Path, help="Output directory")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level)
    except ValueError as exc:
        parser.error(f"invalid log level {args.log_level!r}: {exc}")

    try:
        return asyncio.run(_dispatch(args))
    except CoursebookError as exc:
        logger.debug("Command failed", extra={"command": args.command, "error": str(exc)})
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


async def _dispatch(args: argparse.Namespace) -> int:
    course = await load_course(args.root, index_name=args.index, lessons_dir=args.lessons_dir)

    if args.command == "check":
        return await _run_check(course, args)
    if args.command == "toc":
        print(format_toc(course))
        return EXIT_OK
    if args.command == "show":
        return _run_show(course, args)
    if args.command == "digest":
        return _run_digest(course, args)
    if args.command == "build":
        written = await build_site(course, args.out_dir)
        print(f"Wrote {len(written)} pages to {args.out_dir}")
        return EXIT_OK
    raise CoursebookError(f"Unknown command: {args.command}")


async def _run_check(course: Course, args: argparse.Namespace) -> int:
    report = validate_course(
        course,
        expected_lessons=args.expected_lessons,
        expected_blocks=args.expected_blocks,
        require_closing_sections=not args.no_closing_sections,
        check_internal_links=not args.no_internal_links,
        strict=args.strict,
    )
    if args.external:
        report.issues.extend(await validate_external_links(course))

    if args.format == "json":
        print(report.model_dump_json(indent=2))
    else:
        print(format_report(report))
    return EXIT_OK if report.ok else EXIT_INTEGRITY_FAILED


def _run_show(course: Course, args: argparse.Namespace) -> int:
    lesson = course.get_lesson(args.number)
    if lesson.document is None:
        print(f"error: lesson file missing: {lesson.href}", file=sys.stderr)
        return EXIT_INTEGRITY_FAILED
    if args.section:
        sections = filter_sections(lesson.document.sections, mode="include", selected=args.section)
        print(render_sections(sections))
    else:
        print(lesson.document.markdown.rstrip())
    return EXIT_OK


def _run_digest(course: Course, args: argparse.Namespace) -> int:
    result = format_course(course, include_toc=not args.no_toc)
    if args.output:
        try:
            args.output.write_text(result.content + "\n", encoding="utf-8")
        except OSError as exc:
            raise RenderError(f"Cannot write {args.output}: {exc}") from exc
        print(result.summary)
    else:
        print(result.content)
    return EXIT_OK


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())
