"""Custom exceptions for coursebook."""


class CoursebookError(Exception):
    """Base exception for coursebook operations."""


class IndexNotFoundError(CoursebookError):
    """Course index document does not exist."""


class IndexParseError(CoursebookError):
    """Course index could not be turned into a table of contents."""


class LessonNotFoundError(CoursebookError):
    """Requested lesson is not in the table of contents or has no file."""


class RenderError(CoursebookError):
    """Error during markdown rendering or site output."""


class FetchError(CoursebookError):
    """Error while checking an external link."""
