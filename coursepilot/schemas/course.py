import re

from pydantic import BaseModel, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

_CODE_RE = re.compile(r"^([A-Z]+)\s*(\d.*)$")
_NUMBER_RE = re.compile(r"\d{3,4}")


def normalize_code(code: str) -> str:
    """Uppercase a course code and leave a single space between subject and number.

    "cs310", " CS  310 " and "Cs 310" all become "CS 310". Strings that do not
    look like a course code are only uppercased and whitespace-collapsed.
    """
    collapsed = " ".join(code.upper().split())
    match = _CODE_RE.match(collapsed)
    if match:
        return f"{match.group(1)} {match.group(2).strip()}"
    return collapsed


def course_number(code: str) -> int | None:
    match = _NUMBER_RE.search(code)
    return int(match.group(0)) if match else None


class EngineModel(BaseModel):
    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class Course(EngineModel):
    code: str
    subject: str = ""
    title: str = ""
    credits: int = 0
    description: str = ""
    prerequisites: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _fill_subject(cls, data):
        if isinstance(data, dict) and not data.get("subject"):
            code = data.get("code")
            if isinstance(code, str):
                data = {**data, "subject": normalize_code(code).split(" ")[0]}
        return data

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        value = normalize_code(value)
        if not value:
            raise ValueError("course code must not be empty")
        return value

    @field_validator("subject")
    @classmethod
    def _normalize_subject(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("title", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return value or ""

    @field_validator("credits", mode="before")
    @classmethod
    def _credits_default(cls, value):
        return 0 if value is None else value

    @field_validator("credits")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("credits must be non-negative")
        return value

    @field_validator("prerequisites", mode="before")
    @classmethod
    def _normalize_prerequisites(cls, value, info: ValidationInfo):
        if value is None:
            return ()
        own_code = info.data.get("code")
        seen: list[str] = []
        for code in value:
            normalized = normalize_code(code)
            if normalized and normalized != own_code and normalized not in seen:
                seen.append(normalized)
        return tuple(seen)

    @property
    def number(self) -> int | None:
        return course_number(self.code)

    @property
    def level(self) -> int | None:
        number = self.number
        return number // 100 if number is not None else None


class CourseCreate(BaseModel):
    """Loose catalog row as produced by the JSON/CSV loaders."""

    code: str
    subject: str | None = None
    title: str | None = None
    credits: int | None = None
    description: str | None = None
    prerequisites: list[str] | None = None

    def to_course(self) -> Course:
        return Course(**self.model_dump(exclude_none=True))
