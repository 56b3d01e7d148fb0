"""Shared markdown rendering utilities."""

from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit

import markdown
from markdown.extensions.toc import slugify_unicode

try:
    from bs4 import BeautifulSoup
    from bs4.element import Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


MARKDOWN_EXTENSIONS = ("extra", "sane_lists", "toc")

# Leading characters that would turn a heading title into a list or quote.
_LEADING_ORDINAL_RE = re.compile(r"^(\d+)([.)])(?=\s)")
_LEADING_MARKER_RE = re.compile(r"^([*+\->#])(?=\s)")


def render_markdown(text: str) -> str:
    """Render markdown to an HTML fragment.

    Headings receive ``id`` attributes from the ``toc`` extension so that
    fragment links can be resolved against them.
    """
    return markdown.markdown(
        text,
        extensions=list(MARKDOWN_EXTENSIONS),
        extension_configs={"toc": {"slugify": slugify_unicode}},
        output_format="html",
    )


def markdown_to_soup(text: str) -> BeautifulSoup:
    """Render markdown and parse the result with BeautifulSoup."""
    return BeautifulSoup(render_markdown(text), "lxml")


def inline_text(text: str) -> str:
    """Strip inline markdown (emphasis, code, links) from a single line."""
    text = _LEADING_ORDINAL_RE.sub(r"\1\\\2", text.strip())
    text = _LEADING_MARKER_RE.sub(r"\\\1", text)
    soup = markdown_to_soup(text)
    return " ".join(soup.get_text(" ", strip=True).split())


def slugify_anchor(value: str) -> str:
    """Normalize a heading title or ``#fragment`` into a comparable anchor."""
    return slugify_unicode(unquote(value), "-")


def find_content_root(soup: BeautifulSoup) -> Tag:
    """Return the element that holds the rendered top-level blocks."""
    if soup.body:
        return soup.body
    return soup


def split_href(href: str) -> tuple[str, str]:
    """Split an href into its decoded path and its fragment."""
    parts = urlsplit(href)
    return unquote(parts.path), parts.fragment


def is_external_href(href: str) -> bool:
    return urlsplit(href).scheme in {"http", "https"}


def is_relative_href(href: str) -> bool:
    """True for links to files inside the checkout (no scheme, no host)."""
    parts = urlsplit(href)
    if parts.scheme or parts.netloc:
        return False
    return bool(parts.path)
