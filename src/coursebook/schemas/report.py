"""Integrity report models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, computed_field


class Severity(str, Enum):
    """Severity of an integrity issue."""

    ERROR = "error"
    WARNING = "warning"


class Issue(BaseModel):
    """One integrity finding."""

    severity: Severity
    code: str
    message: str
    lesson: int | None = None
    path: Path | None = None


class IntegrityReport(BaseModel):
    """Result of validating a course.

    With ``strict`` enabled, warnings count against ``ok`` as well.
    """

    course_title: str
    blocks_checked: int = 0
    lessons_checked: int = 0
    strict: bool = False
    issues: list[Issue] = Field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity is Severity.WARNING]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ok(self) -> bool:
        if self.strict:
            return not self.issues
        return not self.errors

    def codes(self) -> set[str]:
        return {issue.code for issue in self.issues}
