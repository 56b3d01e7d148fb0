"""Render a course to a static HTML site."""

from __future__ import annotations

import asyncio
import html
import logging
from pathlib import Path, PurePosixPath

from coursebook.exceptions import LessonNotFoundError, RenderError
from coursebook.fs_utils import mkdir_async, write_text_async
from coursebook.markdown_utils import is_relative_href, render_markdown
from coursebook.schemas import Course, Lesson

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RenderError(
        "BeautifulSoup4 is required for HTML rendering (pip install beautifulsoup4)."
    ) from exc

logger = logging.getLogger(__name__)

INDEX_PAGE = "index.html"

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{nav}
<main>
{body}
</main>
{nav}
</body>
</html>
"""


def rewrite_links(fragment: str, *, index_name: str = "README.md") -> str:
    """Point relative ``.md`` links at the ``.html`` pages of the built site."""
    soup = BeautifulSoup(fragment, "html.parser")
    for tag in soup.find_all("a", href=True):
        href = str(tag["href"])
        if not is_relative_href(href):
            continue
        path, sep, fragment_id = href.partition("#")
        posix = PurePosixPath(path)
        if posix.suffix.lower() != ".md":
            continue
        if posix.name.lower() == index_name.lower():
            posix = posix.with_name(INDEX_PAGE)
        else:
            posix = posix.with_suffix(".html")
        tag["href"] = f"{posix}{sep}{fragment_id}"
    return str(soup)


def page_path(course: Course, lesson: Lesson) -> Path:
    """Output path of a lesson page, relative to the site root."""
    try:
        relative = lesson.path.relative_to(course.root)
    except ValueError:
        relative = Path(course.lessons_dir) / lesson.path.name
    return relative.with_suffix(".html")


def render_index_html(course: Course) -> str:
    """Render the index document as the site's front page."""
    text = course.index_path.read_text(encoding="utf-8", errors="replace")
    body = rewrite_links(render_markdown(text), index_name=course.index_path.name)
    return _PAGE_TEMPLATE.format(title=html.escape(course.title), nav="", body=body)


def render_lesson_html(course: Course, lesson: Lesson) -> str:
    """Render one lesson as a standalone page with previous/next navigation.

    Raises:
        LessonNotFoundError: If the lesson body has not been loaded or its
            file is missing.
    """
    if lesson.document is None:
        raise LessonNotFoundError(f"Lesson file missing: {lesson.href}")

    body = rewrite_links(render_markdown(lesson.document.markdown), index_name=course.index_path.name)
    nav = _render_nav(course, lesson)
    title = f"{lesson.label} | {course.title}"
    return _PAGE_TEMPLATE.format(title=html.escape(title), nav=nav, body=body)


async def build_site(course: Course, out_dir: Path) -> list[Path]:
    """Write ``index.html`` and one page per available lesson.

    Returns:
        The written paths, index page first.

    Raises:
        RenderError: If ``out_dir`` exists and is not a directory.
    """
    if out_dir.exists() and not out_dir.is_dir():
        raise RenderError(f"Output path {out_dir} is not a directory")

    await mkdir_async(out_dir, parents=True, exist_ok=True)
    pages: list[tuple[Path, str]] = [(out_dir / INDEX_PAGE, render_index_html(course))]
    for lesson in course.lessons:
        if lesson.document is None:
            logger.warning("Skipping missing lesson %s", lesson.href)
            continue
        pages.append((out_dir / page_path(course, lesson), render_lesson_html(course, lesson)))

    for directory in sorted({path.parent for path, _ in pages}):
        await mkdir_async(directory, parents=True, exist_ok=True)
    await asyncio.gather(*(write_text_async(path, content) for path, content in pages))

    logger.info("Built site with %d pages in %s", len(pages), out_dir)
    return [path for path, _ in pages]


def _render_nav(course: Course, lesson: Lesson) -> str:
    here = page_path(course, lesson).parent
    previous, following = course.neighbours(lesson)
    links = [f'<a href="{_relative_url(here, Path(INDEX_PAGE))}">Contents</a>']
    if previous is not None:
        href = _relative_url(here, page_path(course, previous))
        links.insert(0, f'<a rel="prev" href="{href}">&larr; {html.escape(previous.label)}</a>')
    if following is not None:
        href = _relative_url(here, page_path(course, following))
        links.append(f'<a rel="next" href="{href}">{html.escape(following.label)} &rarr;</a>')
    return "<nav>" + " | ".join(links) + "</nav>"


def _relative_url(from_dir: Path, target: Path) -> str:
    from_parts = from_dir.parts
    target_parts = target.parts
    common = 0
    while (
        common < len(from_parts)
        and common < len(target_parts) - 1
        and from_parts[common] == target_parts[common]
    ):
        common += 1
    ups = [".."] * (len(from_parts) - common)
    return PurePosixPath(*ups, *target_parts[common:]).as_posix()
