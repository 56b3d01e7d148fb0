"""Test setup for coursebook."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

FIXTURE_COURSE = Path(__file__).resolve().parent / "fixtures" / "course"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (make real network calls)",
    )


@pytest.fixture
def course_root(tmp_path: Path) -> Path:
    """A writable copy of the four-lesson fixture course."""
    destination = tmp_path / "course"
    shutil.copytree(FIXTURE_COURSE, destination)
    return destination


@pytest.fixture
def make_course(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an index and lesson files into a fresh directory."""

    def _make(index: str, lessons: dict[str, str] | None = None, name: str = "custom") -> Path:
        root = tmp_path / name
        (root / "lessons").mkdir(parents=True)
        (root / "README.md").write_text(index, encoding="utf-8")
        for relative, body in (lessons or {}).items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(body, encoding="utf-8")
        return root

    return _make
