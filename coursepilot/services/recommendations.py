import re
from collections.abc import Iterable

from coursepilot.core.config import settings
from coursepilot.schemas.course import Course
from coursepilot.schemas.recommendation import CourseAlternatives, ScoredCourse
from coursepilot.services.availability import (
    is_available,
    missing_prerequisites,
    normalize_completed,
)
from coursepilot.services.catalog import Catalog

MAJOR_WEIGHT = 100
RELATED_WEIGHT = 50
UNLOCK_WEIGHT = 10
LEVEL_MATCH_BONUS = 30
LEVEL_AHEAD_BONUS = 15
LEVEL_BEHIND_PENALTY = 10

# Courses more than this many levels above the student's year are not offered
MAX_LEVELS_AHEAD = 2
# Alternatives must sit within this many course numbers of the target
ALTERNATIVE_NUMBER_DISTANCE = 100

_MAJOR_SUBJECTS: dict[str, list[str]] = {
    "COMPUTER SCIENCE": ["CS", "IT", "CYSE"],
    "CS": ["CS", "IT", "CYSE"],
    "SOFTWARE ENGINEERING": ["CS", "SWE", "IT"],
    "INFORMATION TECHNOLOGY": ["IT", "CS", "CYSE"],
    "IT": ["IT", "CS", "CYSE"],
    "CYBERSECURITY": ["CYSE", "CS", "IT"],
    "CYSE": ["CYSE", "CS", "IT"],
    "ELECTRICAL ENGINEERING": ["ECE", "PHYS", "MATH"],
    "ECE": ["ECE", "PHYS", "MATH"],
    "COMPUTER ENGINEERING": ["ECE", "CS", "PHYS"],
    "MECHANICAL ENGINEERING": ["ME", "PHYS", "MATH"],
    "CIVIL ENGINEERING": ["CE", "PHYS", "MATH"],
    "MATHEMATICS": ["MATH", "STAT", "CS"],
    "MATH": ["MATH", "STAT", "CS"],
    "PHYSICS": ["PHYS", "MATH"],
    "BIOLOGY": ["BIOL", "CHEM"],
    "CHEMISTRY": ["CHEM", "BIOL"],
    "BUSINESS": ["MBUS", "ACCT", "ECON", "FNAN"],
    "ACCOUNTING": ["ACCT", "MBUS", "FNAN"],
    "ECONOMICS": ["ECON", "MBUS", "MATH"],
    "PSYCHOLOGY": ["PSYC", "NEUR"],
    "ENGLISH": ["ENGH", "WRIT"],
}

# General education subjects relevant to every major
_GENERAL_EDUCATION_SUBJECTS = ["ENGH", "HNRS"]

_SUBJECT_TOKEN_RE = re.compile(r"\b[A-Z]{2,4}\b")


def major_subjects(major: str) -> list[str]:
    major_upper = major.upper()
    words = set(re.findall(r"[A-Z]+", major_upper))
    for key, subjects in _MAJOR_SUBJECTS.items():
        # abbreviations must be whole words: "CS" is not a match for "PHYSICS"
        matched = key in words if len(key) <= 4 else key in major_upper
        if matched:
            return list(subjects)
    return _SUBJECT_TOKEN_RE.findall(major)


def related_subjects(major: str) -> list[str]:
    related = major_subjects(major)
    major_upper = major.upper()
    extra = []
    if any(word in major_upper for word in ("ENGINEERING", "COMPUTER", "SCIENCE")):
        extra += ["MATH", "PHYS"]
    extra += _GENERAL_EDUCATION_SUBJECTS
    for subject in extra:
        if subject not in related:
            related.append(subject)
    return related


def level_alignment(level: int | None, year: int) -> int:
    if level is None:
        return 0
    diff = level - year
    if diff in (0, 1):
        return LEVEL_MATCH_BONUS
    if diff == 2:
        return LEVEL_AHEAD_BONUS
    if diff < 0:
        return diff * LEVEL_BEHIND_PENALTY
    return 0


def relevance_score(course: Course, major: str, year: int, catalog: Catalog) -> int:
    score = 0
    if course.subject in major_subjects(major):
        score += MAJOR_WEIGHT
    if course.subject in related_subjects(major):
        score += RELATED_WEIGHT
    score += len(catalog.graph.unlocks(course.code)) * UNLOCK_WEIGHT
    score += level_alignment(course.level, year)
    return score


def score_courses(
    catalog: Catalog,
    completed: Iterable[str],
    major: str,
    year: int,
) -> list[ScoredCourse]:
    """Score every course the student could enroll in now, best first.

    Candidates are not completed, have all prerequisites met and sit no more
    than two levels above the student's year. Ties keep catalog order.
    """
    completed_set = normalize_completed(completed)
    scored = []
    for course in catalog.values():
        if course.code in completed_set or not is_available(course, completed_set):
            continue
        if course.level is not None and course.level - year > MAX_LEVELS_AHEAD:
            continue
        scored.append(
            ScoredCourse(course=course, score=relevance_score(course, major, year, catalog))
        )
    return sorted(scored, key=lambda item: -item.score)


def recommend(
    catalog: Catalog,
    completed: Iterable[str],
    major: str,
    year: int,
    limit: int | None = None,
) -> list[Course]:
    limit = settings.recommendation_limit if limit is None else limit
    return [item.course for item in score_courses(catalog, completed, major, year)[:limit]]


def alternatives(
    catalog: Catalog,
    code: str,
    completed: Iterable[str],
    major: str,
    limit: int | None = None,
) -> CourseAlternatives:
    target = catalog.get(code)
    if target is None:
        return CourseAlternatives()

    limit = settings.alternatives_limit if limit is None else limit
    completed_set = normalize_completed(completed)
    related = related_subjects(major)
    target_number = target.number or 0

    def eligible(course: Course) -> bool:
        if course.code == target.code or course.code in completed_set:
            return False
        if not is_available(course, completed_set):
            return False
        number = course.number
        return number is None or abs(number - target_number) <= ALTERNATIVE_NUMBER_DISTANCE

    same_subject = [
        c for c in catalog.values() if c.subject == target.subject and eligible(c)
    ]
    related_subject = [
        c
        for c in catalog.values()
        if c.subject != target.subject and c.subject in related and eligible(c)
    ]
    path = [
        catalog[code]
        for code in missing_prerequisites(target, completed_set)
        if code in catalog
    ]

    return CourseAlternatives(
        target_course=target,
        same_subject_alternatives=same_subject[:limit],
        related_subject_alternatives=related_subject[:limit],
        prerequisite_alternatives=path[:limit],
    )
