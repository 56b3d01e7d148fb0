"""Pydantic models for the reader API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from coursebook.schemas import Course, Lesson, SectionNode


class LessonSummary(BaseModel):
    """One table-of-contents entry as exposed by the API.

    Attributes
    ----------
    number : int | None
        Lesson number parsed from the filename.
    title : str
        Link text used in the index.
    href : str
        Link target as written in the index.
    exists : bool
        Whether the target file exists.

    """

    number: int | None = Field(default=None, description="Lesson number")
    title: str = Field(..., description="Lesson title")
    href: str = Field(..., description="Link target in the index")
    exists: bool = Field(..., description="Whether the lesson file exists")

    @classmethod
    def from_lesson(cls, lesson: Lesson) -> LessonSummary:
        return cls(number=lesson.number, title=lesson.title, href=lesson.href, exists=lesson.exists)


class BlockSummary(BaseModel):
    """A block and its lessons."""

    position: int = Field(..., description="1-based block position")
    title: str = Field(..., description="Block title")
    lessons: list[LessonSummary] = Field(default_factory=list)


class CourseResponse(BaseModel):
    """Response model for the /api/course endpoint."""

    title: str = Field(..., description="Course title")
    lesson_count: int = Field(..., description="Number of table-of-contents entries")
    blocks: list[BlockSummary] = Field(default_factory=list)

    @classmethod
    def from_course(cls, course: Course) -> CourseResponse:
        return cls(
            title=course.title,
            lesson_count=course.lesson_count,
            blocks=[
                BlockSummary(
                    position=block.position,
                    title=block.title,
                    lessons=[LessonSummary.from_lesson(lesson) for lesson in block.lessons],
                )
                for block in course.blocks
            ],
        )


class LessonResponse(BaseModel):
    """Response model for the /api/lessons/{number} endpoint.

    Attributes
    ----------
    content : str
        Lesson markdown, cropped to ``MAX_DISPLAY_SIZE`` characters.
    truncated : bool
        Whether ``content`` was cropped.

    """

    number: int | None = Field(default=None, description="Lesson number")
    title: str = Field(..., description="Lesson title from the index")
    heading: str | None = Field(default=None, description="First heading of the lesson file")
    block: int = Field(..., description="Position of the owning block")
    previous: int | None = Field(default=None, description="Number of the previous lesson")
    next: int | None = Field(default=None, description="Number of the next lesson")
    sections: list[SectionNode] = Field(default_factory=list, description="Heading outline")
    content: str = Field(..., description="Lesson markdown")
    truncated: bool = Field(default=False, description="Content was cropped")


class ErrorResponse(BaseModel):
    """Error response model.

    Attributes
    ----------
    error : str
        Error message describing what went wrong.

    """

    error: str = Field(..., description="Error message")
