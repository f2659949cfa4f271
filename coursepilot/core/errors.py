class CoursePilotError(Exception):
    """Base class for errors raised by the engine's write path and loaders."""


class CourseNotFoundError(CoursePilotError, LookupError):
    """Raised when an attempt is recorded for a course the catalog does not know."""

    def __init__(self, course_code: str):
        super().__init__(f"Course {course_code} does not exist in the course catalog")
        self.course_code = course_code


class InvalidGradeError(CoursePilotError, ValueError):
    """Raised when a grade is not part of the letter-grade scale."""

    def __init__(self, grade: object):
        super().__init__(f"Invalid grade {grade!r}")
        self.grade = grade


class CatalogLoadError(CoursePilotError):
    """Raised when a catalog file exists but cannot be read or parsed."""
