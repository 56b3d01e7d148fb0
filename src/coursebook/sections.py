"""Section filtering and utilities."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from coursebook.schemas import SectionNode

_NUMBER_PREFIX_RE = re.compile(r"^\d+(?:\.\d+)*[.)]?\s+")
_PUNCTUATION_RE = re.compile(r"[^\w\s-]")


def normalize_section_title(title: str) -> str:
    """Normalize section titles for comparison."""
    title = title.strip().lower()
    title = _NUMBER_PREFIX_RE.sub("", title)
    title = _PUNCTUATION_RE.sub(" ", title)
    return re.sub(r"\s+", " ", title).strip()


def iter_sections(sections: Iterable[SectionNode]) -> Iterator[SectionNode]:
    """Walk a section tree depth-first."""
    for section in sections:
        yield section
        yield from iter_sections(section.children)


def has_section_like(sections: Iterable[SectionNode], phrases: Iterable[str]) -> bool:
    """Check whether any section title contains one of ``phrases``."""
    normalized_phrases = [normalize_section_title(phrase) for phrase in phrases]
    for section in iter_sections(sections):
        title = normalize_section_title(section.title)
        if any(phrase in title for phrase in normalized_phrases):
            return True
    return False


def filter_sections(
    sections: list[SectionNode],
    *,
    mode: str = "exclude",
    selected: Iterable[str] | None = None,
) -> list[SectionNode]:
    """Filter sections by title using include or exclude mode."""
    selected_titles = {normalize_section_title(title) for title in (selected or []) if title.strip()}
    if not selected_titles:
        return sections

    def _filter(nodes: list[SectionNode]) -> list[SectionNode]:
        result: list[SectionNode] = []
        for node in nodes:
            normalized = normalize_section_title(node.title)
            in_selected = normalized in selected_titles
            if mode == "include":
                if in_selected:
                    result.append(node)
                else:
                    children = _filter(node.children)
                    if children:
                        result.append(node.model_copy(update={"children": children}))
            else:
                if in_selected:
                    continue
                result.append(node.model_copy(update={"children": _filter(node.children)}))
        return result

    return _filter(list(sections))
