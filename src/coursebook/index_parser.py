"""Parse a course index document into blocks and lessons."""

from __future__ import annotations

import re
from pathlib import Path

from coursebook.exceptions import IndexParseError
from coursebook.markdown_utils import (
    find_content_root,
    is_relative_href,
    markdown_to_soup,
    split_href,
)
from coursebook.schemas import Block, Course, Lesson

try:
    from bs4.element import NavigableString, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise IndexParseError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


_HEADING_RE = re.compile(r"^h[1-6]$")
_LIST_TAGS = ("ol", "ul")
_LIST_ITEM_RE = re.compile(r"^(?P<indent>[ \t]*)(?:\d+\.|[*+-])[ \t]+")
_LESSON_FILENAME_RE = re.compile(r"^(?P<number>\d+)-(?P<slug>.+)\.md$", re.IGNORECASE)
# Two-digit index followed by a kebab-case title.
CONVENTIONAL_FILENAME_RE = re.compile(r"^\d{2}-[a-z0-9]+(?:-[a-z0-9]+)*\.md$")
_DEFAULT_BLOCK_TITLE = "Lessons"


def parse_lesson_filename(name: str) -> tuple[int, str] | None:
    """Extract ``(number, slug)`` from a lesson filename such as ``05-caching.md``."""
    match = _LESSON_FILENAME_RE.match(name)
    if not match:
        return None
    return int(match.group("number")), match.group("slug")


def is_conventional_filename(name: str) -> bool:
    return bool(CONVENTIONAL_FILENAME_RE.match(name))


def parse_index(
    text: str,
    *,
    root: Path,
    index_path: Path | None = None,
    lessons_dir: str = "lessons",
) -> Course:
    """Build a :class:`Course` from the index markdown.

    Two layouts are recognized. In the nested layout each top-level list item
    is a block whose nested list links to lessons. In the heading layout each
    ``##`` heading opens a block and the list under it links to lessons. Both
    may be mixed in one document.

    Raises:
        IndexParseError: If the document links to no lesson at all.
    """
    soup = markdown_to_soup(normalize_list_indentation(text))
    content_root = find_content_root(soup)

    course_title: str | None = None
    blocks: list[Block] = []
    pending_title: str | None = None
    heading_block: Block | None = None

    for element in content_root.children:
        if not isinstance(element, Tag):
            continue

        if _HEADING_RE.match(element.name):
            heading = element.get_text(" ", strip=True)
            if element.name == "h1" and course_title is None:
                course_title = heading
            else:
                pending_title = heading
                heading_block = None
            continue

        if element.name not in _LIST_TAGS:
            continue

        for item in element.find_all("li", recursive=False):
            nested = item.find_all(_LIST_TAGS, recursive=False)
            nested_links = [link for lst in nested for link in _lesson_links(lst, lessons_dir)]
            if nested_links:
                title = _block_title(item) or pending_title or f"Block {len(blocks) + 1}"
                block = Block(position=len(blocks) + 1, title=title)
                blocks.append(block)
                for link in nested_links:
                    _append_lesson(block, link, root=root)
                heading_block = None
                continue

            own_links = _lesson_links(item, lessons_dir)
            if not own_links:
                continue
            if heading_block is None:
                heading_block = Block(
                    position=len(blocks) + 1,
                    title=pending_title or _DEFAULT_BLOCK_TITLE,
                )
                blocks.append(heading_block)
            for link in own_links:
                _append_lesson(heading_block, link, root=root)

    _assign_positions(blocks)
    if not any(block.lessons for block in blocks):
        raise IndexParseError("Index does not link to any lesson file")

    return Course(
        title=course_title or root.name,
        root=root,
        index_path=index_path or root / "README.md",
        lessons_dir=lessons_dir,
        blocks=blocks,
    )


def normalize_list_indentation(text: str) -> str:
    """Re-indent nested list items to four spaces per level.

    Python-Markdown only nests list items indented by four spaces, while
    GitHub also accepts two or three.
    """
    lines: list[str] = []
    stack: list[int] = []
    in_fence = False
    for line in text.splitlines():
        stripped = line.lstrip()
        if stripped.startswith(("```", "~~~")):
            in_fence = not in_fence
        if in_fence or not stripped:
            lines.append(line)
            continue

        match = _LIST_ITEM_RE.match(line)
        if not match:
            if line[:1] not in (" ", "\t"):
                stack = []
            lines.append(line)
            continue

        width = len(match.group("indent").expandtabs(4))
        while stack and stack[-1] > width:
            stack.pop()
        if not stack or stack[-1] < width:
            stack.append(width)
        lines.append("    " * (len(stack) - 1) + stripped)
    return "\n".join(lines)


def is_lesson_href(href: str, lessons_dir: str = "lessons") -> bool:
    """True for relative markdown links into the lessons directory or named ``NN-slug.md``."""
    if not is_relative_href(href):
        return False
    path_part, _ = split_href(href)
    if not path_part.lower().endswith(".md"):
        return False
    parts = Path(path_part).parts
    in_lessons_dir = lessons_dir in parts
    return in_lessons_dir or parse_lesson_filename(Path(path_part).name) is not None


def _lesson_links(container: Tag, lessons_dir: str) -> list[Tag]:
    return [
        link
        for link in container.find_all("a", href=True)
        if is_lesson_href(str(link["href"]), lessons_dir)
    ]


def _block_title(item: Tag) -> str | None:
    parts: list[str] = []
    for child in item.children:
        if isinstance(child, Tag) and child.name in _LIST_TAGS:
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag):
            parts.append(child.get_text(" ", strip=True))
    title = " ".join(" ".join(parts).split()).rstrip(":").strip()
    return title or None


def _append_lesson(block: Block, link: Tag, *, root: Path) -> None:
    href = str(link["href"])
    path_part, _ = split_href(href)
    parsed = parse_lesson_filename(Path(path_part).name)
    number, slug = parsed if parsed else (None, None)
    block.lessons.append(
        Lesson(
            title=link.get_text(" ", strip=True) or Path(path_part).stem,
            href=href,
            path=(root / path_part).resolve(),
            number=number,
            slug=slug,
            block=block.position,
            position=1,
        )
    )


def _assign_positions(blocks: list[Block]) -> None:
    position = 0
    for block in blocks:
        for lesson in block.lessons:
            position += 1
            lesson.position = position
