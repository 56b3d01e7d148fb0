"""Logging configuration for coursebook and its server."""

from __future__ import annotations

import logging
import sys

from coursebook.config import COURSEBOOK_LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class ExtraFormatter(logging.Formatter):
    """Formatter that appends ``extra={...}`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {key: value for key, value in vars(record).items() if key not in _RESERVED_ATTRS}
        if not extras:
            return base
        pairs = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{base} {pairs}"


def _is_configured() -> bool:
    return any(isinstance(handler.formatter, ExtraFormatter) for handler in logging.getLogger().handlers)


def configure_logging(level: str | int | None = None) -> None:
    """Install a single stderr handler on the root logger.

    Calling it again only updates the level.
    """
    root = logging.getLogger()
    resolved = level if level is not None else COURSEBOOK_LOG_LEVEL
    if isinstance(resolved, str):
        resolved = resolved.upper()
    root.setLevel(resolved)

    if _is_configured():
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ExtraFormatter(_FORMAT))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a logger, configuring the root handler on first use."""
    if not _is_configured():
        configure_logging()
    return logging.getLogger(name)
