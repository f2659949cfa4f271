from enum import Enum

from pydantic import BaseModel, field_validator

from coursepilot.core.errors import InvalidGradeError
from coursepilot.schemas.course import EngineModel, normalize_code


class Grade(str, Enum):
    A_PLUS = "A+"
    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    D_PLUS = "D+"
    D = "D"
    D_MINUS = "D-"
    F = "F"

    @property
    def points(self) -> float:
        return _GRADE_POINTS[self]

    @property
    def is_passing(self) -> bool:
        return self.points >= PASSING_POINTS

    @property
    def is_failing(self) -> bool:
        return self is Grade.F

    @property
    def is_excluded_band(self) -> bool:
        """Below the passing threshold but not a failing grade (C- through D-)."""
        return not self.is_passing and not self.is_failing


_GRADE_POINTS = {
    Grade.A_PLUS: 4.0,
    Grade.A: 4.0,
    Grade.A_MINUS: 3.7,
    Grade.B_PLUS: 3.3,
    Grade.B: 3.0,
    Grade.B_MINUS: 2.7,
    Grade.C_PLUS: 2.3,
    Grade.C: 2.0,
    Grade.C_MINUS: 1.7,
    Grade.D_PLUS: 1.3,
    Grade.D: 1.0,
    Grade.D_MINUS: 0.7,
    Grade.F: 0.0,
}

# C is the lowest grade whose credit counts toward the degree
PASSING_POINTS = 2.0


def parse_grade(value: "Grade | str") -> Grade:
    if isinstance(value, Grade):
        return value
    if not isinstance(value, str):
        raise InvalidGradeError(value)
    try:
        return Grade(value.strip().upper())
    except ValueError:
        raise InvalidGradeError(value) from None


def _coerce_grade(value):
    # Leave unknown values to pydantic's enum validation so they surface as ValidationError
    if isinstance(value, str):
        return value.strip().upper()
    return value


class CompletedCourseCreate(BaseModel):
    """A new attempt as submitted by the write path, before retake processing."""

    course_code: str
    grade: Grade
    semester: str | None = None

    @field_validator("course_code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        return normalize_code(value)

    @field_validator("grade", mode="before")
    @classmethod
    def _normalize_grade(cls, value):
        return _coerce_grade(value)


class CompletedCourseRecord(EngineModel):
    course_code: str
    grade: Grade
    semester: str | None = None
    credits: int = 0
    nullified: bool = False
    counts_toward_degree: bool = False

    @field_validator("course_code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        return normalize_code(value)

    @field_validator("grade", mode="before")
    @classmethod
    def _normalize_grade(cls, value):
        return _coerce_grade(value)

    @property
    def earns_credit(self) -> bool:
        return self.counts_toward_degree and not self.nullified


class CreditSummary(EngineModel):
    earned: int
    required_for_degree: int
    gpa: float | None = None
    graded_credits: int = 0
    nullified_attempts: int = 0

    @property
    def remaining(self) -> int:
        return max(self.required_for_degree - self.earned, 0)
