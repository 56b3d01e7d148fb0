"""Shared builders for coursebook tests."""

from __future__ import annotations


def lesson_body(title: str) -> str:
    """A lesson that passes every content check."""
    return (
        f"# {title}\n\nBody text.\n\n"
        "## What to read next\n\n- The next lesson.\n\n"
        "## Self-check\n\n1. A question.\n"
    )


def nested_index(blocks: dict[str, list[tuple[str, str]]], title: str = "Course") -> str:
    """Index in the nested-list layout from ``{block: [(lesson title, href), ...]}``."""
    lines = [f"# {title}", ""]
    for position, (block, lessons) in enumerate(blocks.items(), start=1):
        lines.append(f"{position}. **{block}**")
        for number, (lesson_title, href) in enumerate(lessons, start=1):
            lines.append(f"   {number}. [{lesson_title}]({href})")
    return "\n".join(lines) + "\n"
