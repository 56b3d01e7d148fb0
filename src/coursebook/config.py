"""Local configuration for coursebook."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_ROOT = "."
DEFAULT_INDEX_NAME = "README.md"
DEFAULT_LESSONS_DIR = "lessons"
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_FETCH_CONCURRENCY = 8
DEFAULT_USER_AGENT = "coursebook/0.1 (+https://github.com/coursebook/coursebook)"
DEFAULT_LOG_LEVEL = "WARNING"

# Course checkout the CLI and the server read from when no root is given.
COURSEBOOK_ROOT = Path(os.getenv("COURSEBOOK_ROOT", DEFAULT_ROOT)).expanduser().resolve()
COURSEBOOK_INDEX_NAME = os.getenv("COURSEBOOK_INDEX_NAME", DEFAULT_INDEX_NAME)
COURSEBOOK_LESSONS_DIR = os.getenv("COURSEBOOK_LESSONS_DIR", DEFAULT_LESSONS_DIR)
COURSEBOOK_FETCH_TIMEOUT_S = float(os.getenv("COURSEBOOK_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
COURSEBOOK_FETCH_MAX_RETRIES = int(os.getenv("COURSEBOOK_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
COURSEBOOK_FETCH_BACKOFF_S = float(os.getenv("COURSEBOOK_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
COURSEBOOK_FETCH_CONCURRENCY = int(os.getenv("COURSEBOOK_FETCH_CONCURRENCY", str(DEFAULT_FETCH_CONCURRENCY)))
COURSEBOOK_USER_AGENT = os.getenv("COURSEBOOK_USER_AGENT", DEFAULT_USER_AGENT)
COURSEBOOK_LOG_LEVEL = os.getenv("COURSEBOOK_LOG_LEVEL", DEFAULT_LOG_LEVEL)
