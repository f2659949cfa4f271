from collections.abc import Iterable

from coursepilot.schemas.course import Course, normalize_code
from coursepilot.schemas.prerequisite import UnavailableCourse
from coursepilot.services.catalog import Catalog


def normalize_completed(completed: Iterable[str]) -> frozenset[str]:
    return frozenset(normalize_code(c) for c in completed if c)


def is_available(course: Course, completed: Iterable[str]) -> bool:
    if not course.prerequisites:
        return True
    completed_set = normalize_completed(completed)
    return all(prereq in completed_set for prereq in course.prerequisites)


def missing_prerequisites(course: Course, completed: Iterable[str]) -> list[str]:
    completed_set = normalize_completed(completed)
    return [p for p in course.prerequisites if p not in completed_set]


def available_courses(
    catalog: Catalog,
    completed: Iterable[str],
    exclude_completed: bool = False,
) -> list[Course]:
    completed_set = normalize_completed(completed)
    return [
        course
        for course in catalog.values()
        if not (exclude_completed and course.code in completed_set)
        and is_available(course, completed_set)
    ]


def unavailable_courses(catalog: Catalog, completed: Iterable[str]) -> list[UnavailableCourse]:
    completed_set = normalize_completed(completed)
    unavailable = []
    for course in catalog.values():
        missing = missing_prerequisites(course, completed_set)
        if missing:
            unavailable.append(UnavailableCourse(course=course, missing_prerequisites=missing))
    return unavailable


def next_level_courses(catalog: Catalog, completed: Iterable[str]) -> list[Course]:
    """Courses newly opened up by completed work.

    Not yet completed, with at least one prerequisite, all of which are met.
    """
    completed_set = normalize_completed(completed)
    return [
        course
        for course in catalog.values()
        if course.code not in completed_set
        and course.prerequisites
        and is_available(course, completed_set)
    ]
