"""Course, block, and lesson models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from coursebook.exceptions import LessonNotFoundError
from coursebook.schemas.sections import SectionNode


class LinkKind(str, Enum):
    """Classification of a link found inside a lesson body."""

    RELATIVE = "relative"
    EXTERNAL = "external"
    ANCHOR = "anchor"
    OTHER = "other"


class LessonLink(BaseModel):
    """An outgoing link of a lesson."""

    href: str
    text: str = ""
    kind: LinkKind


class LessonDocument(BaseModel):
    """Parsed body of a lesson file.

    Attributes:
        markdown: The raw markdown text as read from disk.
        title: Text of the first heading, if any.
        sections: Heading outline of the lesson.
        links: Every link found in the rendered body, in document order.
        anchors: Heading anchors that other lessons can link to.
        has_read_next: Whether a "what to read next" section is present.
        has_self_check: Whether a "self-check" section is present.
    """

    markdown: str
    title: str | None = None
    sections: list[SectionNode] = Field(default_factory=list)
    links: list[LessonLink] = Field(default_factory=list)
    anchors: list[str] = Field(default_factory=list)
    has_read_next: bool = False
    has_self_check: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.markdown.strip()

    @property
    def has_heading(self) -> bool:
        return bool(self.sections)


class Lesson(BaseModel):
    """One table-of-contents entry.

    Attributes:
        title: Link text used in the index.
        href: Link target exactly as written in the index.
        path: Target resolved against the course root.
        number: Two-digit index from the filename, None when the filename
            does not follow the ``NN-slug.md`` convention.
        slug: Kebab-case part of the filename.
        block: 1-based position of the owning block.
        position: 1-based position in the whole table of contents.
        document: Parsed body, None until loaded or when the file is missing.
    """

    title: str
    href: str
    path: Path
    number: int | None = None
    slug: str | None = None
    block: int = Field(..., ge=1)
    position: int = Field(..., ge=1)
    document: LessonDocument | None = None

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    @property
    def label(self) -> str:
        if self.number is None:
            return self.title
        return f"{self.number:02d}. {self.title}"


class Block(BaseModel):
    """Thematic group of lessons."""

    position: int = Field(..., ge=1)
    title: str
    lessons: list[Lesson] = Field(default_factory=list)


class Course(BaseModel):
    """A textbook: index document plus ordered blocks of lessons."""

    title: str
    root: Path
    index_path: Path
    lessons_dir: str = "lessons"
    blocks: list[Block] = Field(default_factory=list)

    @property
    def lessons(self) -> list[Lesson]:
        return [lesson for block in self.blocks for lesson in block.lessons]

    @property
    def lesson_count(self) -> int:
        return sum(len(block.lessons) for block in self.blocks)

    def get_lesson(self, number: int) -> Lesson:
        """Return the first lesson with ``number``.

        Raises:
            LessonNotFoundError: If no table-of-contents entry has that number.
        """
        for lesson in self.lessons:
            if lesson.number == number:
                return lesson
        raise LessonNotFoundError(f"Lesson {number} is not in the table of contents")

    def neighbours(self, lesson: Lesson) -> tuple[Lesson | None, Lesson | None]:
        """Return the previous and next lessons in reading order."""
        ordered = self.lessons
        index = lesson.position - 1
        previous = ordered[index - 1] if index > 0 else None
        following = ordered[index + 1] if index + 1 < len(ordered) else None
        return previous, following
