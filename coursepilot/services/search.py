import re

from coursepilot.core.config import settings
from coursepilot.schemas.course import Course
from coursepilot.services.catalog import Catalog

MIN_QUERY_LENGTH = 2
FALLBACK_LIMIT = 20

# "CS 310", "math113", "ECE 446L"
_COURSE_CODE_RE = re.compile(r"\b([A-Z]{2,4})\s*(\d{3,4}[A-Z]?)\b")
_SUBJECT_RE = re.compile(r"^[A-Z]{2,4}$")
_EXPLICIT_SUBJECT_RE = re.compile(r"\b([A-Z]{2,4})\s+(?:courses?|classes?|subjects?)\b", re.IGNORECASE)

KEYWORDS = [
    "data structures", "algorithms", "programming", "database", "networking",
    "operating systems", "software engineering", "web development", "machine learning",
    "artificial intelligence", "computer graphics", "security", "cybersecurity",
    "calculus", "linear algebra", "statistics", "physics", "chemistry", "biology",
]


def extract_course_codes(text: str) -> list[str]:
    codes: list[str] = []
    for subject, number in _COURSE_CODE_RE.findall(text.upper()):
        code = f"{subject} {number}"
        if code not in codes:
            codes.append(code)
    return codes


def extract_subjects(text: str) -> list[str]:
    subjects = [w for w in text.upper().split() if _SUBJECT_RE.match(w)]
    match = _EXPLICIT_SUBJECT_RE.search(text)
    if match:
        subjects.append(match.group(1).upper())
    return list(dict.fromkeys(subjects))


def extract_keywords(text: str) -> list[str]:
    lowered = text.lower()
    return [term for term in KEYWORDS if term in lowered]


def _haystack(course: Course, include_code: bool = False) -> str:
    parts = [course.title, course.description]
    if include_code:
        parts.insert(0, course.code)
    return " ".join(parts).lower()


def search(catalog: Catalog, query: str, limit: int | None = None) -> list[Course]:
    """Find courses relevant to a free-text query.

    Exact course codes rank first, then whole-subject matches, then curated
    keyword hits in title or description. Only when none of those match does a
    plain substring scan over the query and its longer words run.
    """
    limit = settings.search_limit if limit is None else limit
    query = query.strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []

    relevant: list[Course] = []
    seen: set[str] = set()

    def take(courses) -> None:
        for course in courses:
            if course.code not in seen:
                seen.add(course.code)
                relevant.append(course)

    take(c for c in (catalog.get(code) for code in extract_course_codes(query)) if c)

    for subject in extract_subjects(query):
        take(c for c in catalog.values() if c.subject == subject)

    for keyword in extract_keywords(query):
        take(c for c in catalog.values() if keyword in _haystack(c))

    if not relevant and len(query) > 3:
        lowered = query.lower()
        terms = [lowered] + [w for w in lowered.split() if len(w) > 3]
        matches = [
            c
            for c in catalog.values()
            if any(term in _haystack(c, include_code=True) for term in terms)
        ]
        take(matches[:FALLBACK_LIMIT])

    return relevant[:limit]


def search_courses(catalog: Catalog, text: str) -> list[Course]:
    """Plain case-insensitive substring match on code, title and description."""
    needle = text.strip().lower()
    if not needle:
        return []
    return [c for c in catalog.values() if needle in _haystack(c, include_code=True)]
