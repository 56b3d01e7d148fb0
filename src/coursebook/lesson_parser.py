"""Parse lesson markdown into metadata, section tree, and links."""

from __future__ import annotations

import re
from dataclasses import dataclass

from coursebook.markdown_utils import (
    find_content_root,
    inline_text,
    is_external_href,
    is_relative_href,
    markdown_to_soup,
    slugify_anchor,
)
from coursebook.schemas import LessonDocument, LessonLink, LinkKind, SectionNode
from coursebook.sections import has_section_like

_ATX_HEADING_RE = re.compile(r"^ {0,3}(?P<marks>#{1,6})(?:[ \t]+(?P<title>.*?))?[ \t]*#*[ \t]*$")
_SETEXT_UNDERLINE_RE = re.compile(r"^ {0,3}(?P<marks>=+|-+)[ \t]*$")
_FENCE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})")
_BLOCK_START_RE = re.compile(r"^ {0,3}(?:[*+-]|\d+[.)]|>|#|\|)")

READ_NEXT_TITLES = (
    "what to read next",
    "read next",
    "further reading",
    "next steps",
    "what's next",
)
SELF_CHECK_TITLES = (
    "self-check",
    "self check",
    "check yourself",
    "review questions",
)


@dataclass
class _Heading:
    level: int
    title: str
    line: int
    setext: bool = False


def parse_lesson(text: str) -> LessonDocument:
    """Extract title, section tree, links, and closing-section flags from a lesson."""
    lines = text.splitlines()
    headings = _scan_headings(lines)
    sections = _build_sections(headings, lines)
    links = _extract_links(text)

    return LessonDocument(
        markdown=text,
        title=headings[0].title if headings else None,
        sections=sections,
        links=links,
        anchors=_unique_anchors(headings),
        has_read_next=has_section_like(sections, READ_NEXT_TITLES),
        has_self_check=has_section_like(sections, SELF_CHECK_TITLES),
    )


def _front_matter_end(lines: list[str]) -> int:
    """Index of the first line after a leading ``---`` front matter block."""
    if not lines or lines[0].strip() != "---":
        return 0
    for index in range(1, len(lines)):
        if lines[index].strip() in ("---", "..."):
            return index + 1
    return 0


def _scan_headings(lines: list[str]) -> list[_Heading]:
    headings: list[_Heading] = []
    fence: str | None = None
    # Candidate setext title. Python-Markdown only accepts the first line of a
    # paragraph block, so an underline after two or more lines is a rule.
    candidate: str | None = None
    in_paragraph = False

    for index in range(_front_matter_end(lines), len(lines)):
        line = lines[index]
        fence_match = _FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group("fence")
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            candidate, in_paragraph = None, False
            continue
        if fence is not None:
            continue

        atx = _ATX_HEADING_RE.match(line)
        if atx:
            title = inline_text(atx.group("title") or "")
            if title:
                headings.append(_Heading(level=len(atx.group("marks")), title=title, line=index))
            candidate, in_paragraph = None, False
            continue

        setext = _SETEXT_UNDERLINE_RE.match(line)
        if setext and candidate is not None:
            level = 1 if setext.group("marks")[0] == "=" else 2
            headings.append(
                _Heading(level=level, title=inline_text(candidate), line=index - 1, setext=True)
            )
            candidate, in_paragraph = None, False
            continue

        is_text = bool(line.strip()) and not line.startswith(("    ", "\t")) and not _BLOCK_START_RE.match(line)
        if is_text and not in_paragraph:
            candidate, in_paragraph = line.strip(), True
        elif is_text:
            candidate = None
        else:
            candidate, in_paragraph = None, bool(line.strip())

    return headings


def _build_sections(headings: list[_Heading], lines: list[str]) -> list[SectionNode]:
    sections: list[SectionNode] = []
    stack: list[SectionNode] = []
    anchors = _unique_anchors(headings)

    for position, heading in enumerate(headings):
        body_start = heading.line + (2 if heading.setext else 1)
        if position + 1 < len(headings):
            body_end = headings[position + 1].line
        else:
            body_end = len(lines)
        body = "\n".join(lines[body_start:body_end]).strip()

        node = SectionNode(
            title=heading.title,
            level=heading.level,
            anchor=anchors[position],
            markdown=body or None,
        )

        while stack and stack[-1].level >= heading.level:
            stack.pop()

        if stack:
            stack[-1].children.append(node)
        else:
            sections.append(node)

        stack.append(node)

    return sections


def _unique_anchors(headings: list[_Heading]) -> list[str]:
    """Anchors in heading order, de-duplicated the way the ``toc`` extension does."""
    seen: set[str] = set()
    anchors: list[str] = []
    for heading in headings:
        anchor = slugify_anchor(heading.title)
        candidate = anchor
        counter = 1
        while candidate in seen:
            candidate = f"{anchor}_{counter}"
            counter += 1
        seen.add(candidate)
        anchors.append(candidate)
    return anchors


def _extract_links(text: str) -> list[LessonLink]:
    soup = markdown_to_soup(text)
    links: list[LessonLink] = []
    for tag in find_content_root(soup).find_all("a", href=True):
        href = str(tag["href"]).strip()
        if not href:
            continue
        links.append(
            LessonLink(
                href=href,
                text=tag.get_text(" ", strip=True),
                kind=classify_href(href),
            )
        )
    return links


def classify_href(href: str) -> LinkKind:
    if href.startswith("#"):
        return LinkKind.ANCHOR
    if is_external_href(href):
        return LinkKind.EXTERNAL
    if is_relative_href(href):
        return LinkKind.RELATIVE
    return LinkKind.OTHER
