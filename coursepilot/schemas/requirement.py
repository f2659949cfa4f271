from enum import Enum

from pydantic import field_validator

from coursepilot.schemas.course import EngineModel, normalize_code
from coursepilot.schemas.transcript import Grade


class RequirementCategory(str, Enum):
    """Degree requirement categories, listed in the order they are evaluated."""

    REQUIRED = "required"
    MASON_CORE = "mason_core"
    SENIOR_ELECTIVE = "senior_elective"
    NATURAL_SCIENCE = "natural_science"
    CS_RELATED_ELECTIVE = "cs_related_elective"
    UPPER_LEVEL_ELECTIVE = "upper_level_elective"
    GENERAL_ELECTIVE = "general_elective"


class DegreeRequirements(EngineModel):
    required_courses: tuple[str, ...] = ()
    mason_core_courses: frozenset[str] = frozenset()
    senior_courses: frozenset[str] = frozenset()
    natural_science_courses: frozenset[str] = frozenset()
    cs_related_electives: frozenset[str] = frozenset()
    # subject -> course numbers strictly above this count as electives
    subject_thresholds: dict[str, int] = {}
    excluded_courses: frozenset[str] = frozenset()
    general_elective_credit_cap: int = 8

    @field_validator("required_courses", mode="before")
    @classmethod
    def _normalize_required(cls, value):
        return tuple(normalize_code(code) for code in value)

    @field_validator(
        "mason_core_courses",
        "senior_courses",
        "natural_science_courses",
        "cs_related_electives",
        "excluded_courses",
        mode="before",
    )
    @classmethod
    def _normalize_codes(cls, value):
        return frozenset(normalize_code(code) for code in value)

    @field_validator("subject_thresholds", mode="before")
    @classmethod
    def _normalize_subjects(cls, value):
        return {subject.strip().upper(): number for subject, number in value.items()}


class DegreeCreditCheck(EngineModel):
    course_code: str
    grade: Grade | None = None
    category: RequirementCategory | None = None
    counts_toward_degree: bool
