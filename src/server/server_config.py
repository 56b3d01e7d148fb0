"""Server configuration."""

from __future__ import annotations

import os

DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_PORT = 8000

# Largest lesson body returned inline by the JSON API, in characters.
MAX_DISPLAY_SIZE = int(os.getenv("COURSEBOOK_MAX_DISPLAY_SIZE", "300000"))
