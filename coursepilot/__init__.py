"""Degree requirement and prerequisite engine for CS degree advising."""

__version__ = "0.1.0"

from coursepilot.schemas.course import Course, normalize_code
from coursepilot.schemas.transcript import CompletedCourseCreate, CompletedCourseRecord, Grade
from coursepilot.services.advisor import DegreeAdvisor
from coursepilot.services.catalog import Catalog, get_catalog, install_catalog

__all__ = [
    "__version__",
    "Catalog",
    "CompletedCourseCreate",
    "CompletedCourseRecord",
    "Course",
    "DegreeAdvisor",
    "Grade",
    "get_catalog",
    "install_catalog",
    "normalize_code",
]
