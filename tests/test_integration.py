"""Integration tests that make real network calls."""

from __future__ import annotations

from pathlib import Path

import pytest

from coursebook.http_utils import check_urls
from coursebook.loader import load_course_sync
from coursebook.validation import validate_external_links

from helpers import nested_index


@pytest.mark.integration
@pytest.mark.asyncio
async def test_check_reachable_url() -> None:
    results = await check_urls(["https://www.python.org/"])

    assert results["https://www.python.org/"] == 200


@pytest.mark.integration
@pytest.mark.asyncio
async def test_external_link_validation(make_course) -> None:
    root = make_course(
        nested_index({"Block": [("A", "lessons/01-a.md")]}),
        {
            "lessons/01-a.md": (
                "# A\n\n[python](https://www.python.org/) "
                "[gone](https://www.python.org/this-page-does-not-exist-coursebook)\n"
            )
        },
    )
    course = load_course_sync(Path(root))

    issues = await validate_external_links(course)

    assert [issue.code for issue in issues] == ["external-link"]
    assert "this-page-does-not-exist-coursebook" in issues[0].message
