"""Filesystem utilities for reading and writing course files off the event loop."""

from __future__ import annotations

import asyncio
from pathlib import Path


def discover_markdown_files(directory: Path) -> list[Path]:
    """Return every ``*.md`` file below ``directory``, sorted by path.

    Args:
        directory: Directory to walk. A missing directory yields no files.

    Returns:
        Resolved paths of the markdown files found.
    """
    if not directory.is_dir():
        return []
    return sorted(path.resolve() for path in directory.rglob("*.md") if path.is_file())


async def read_text_async(path: Path, encoding: str = "utf-8") -> str:
    """Read text from a file asynchronously using a thread pool.

    Undecodable bytes are replaced rather than raised so that a single bad
    file cannot abort loading a whole course.

    Args:
        path: Path to the file to read.
        encoding: Text encoding to use.

    Returns:
        The file contents as a string.
    """
    return await asyncio.to_thread(path.read_text, encoding=encoding, errors="replace")


async def write_text_async(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write text to a file asynchronously using a thread pool.

    Args:
        path: Path to the file to write.
        content: Text content to write.
        encoding: Text encoding to use.
    """
    await asyncio.to_thread(path.write_text, content, encoding=encoding)


async def mkdir_async(
    path: Path, parents: bool = False, exist_ok: bool = False
) -> None:
    """Create a directory asynchronously using a thread pool.

    Args:
        path: Path to the directory to create.
        parents: If True, create parent directories as needed.
        exist_ok: If True, don't raise an error if directory exists.
    """
    await asyncio.to_thread(path.mkdir, parents=parents, exist_ok=exist_ok)
