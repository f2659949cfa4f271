import csv
import json
import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from functools import cached_property
from io import StringIO
from pathlib import Path
from types import MappingProxyType

from pydantic import ValidationError

from coursepilot.core.config import settings
from coursepilot.core.errors import CatalogLoadError
from coursepilot.schemas.course import Course, CourseCreate, normalize_code
from coursepilot.services.graph import PrereqGraph, build_graph

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "cs_catalog.json"

_PREREQ_SPLIT_RE = re.compile(r"[;,]")


class Catalog(Mapping):
    """Immutable, ordered snapshot of the course catalog keyed by normalized code."""

    def __init__(self, courses: Iterable[Course] = ()):
        table: dict[str, Course] = {}
        for course in courses:
            if course.code in table:
                logger.warning("Duplicate catalog entry for %s ignored", course.code)
                continue
            table[course.code] = course
        self._courses = MappingProxyType(table)

    @classmethod
    def from_rows(cls, rows: Iterable[dict]) -> "Catalog":
        courses = []
        for row in rows:
            try:
                courses.append(CourseCreate(**row).to_course())
            except ValidationError as exc:
                logger.warning("Skipping malformed catalog row %r: %s", row.get("code"), exc)
        return cls(courses)

    def __getitem__(self, code: str) -> Course:
        return self._courses[normalize_code(code)]

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and normalize_code(code) in self._courses

    def __iter__(self) -> Iterator[str]:
        return iter(self._courses)

    def __len__(self) -> int:
        return len(self._courses)

    def __repr__(self) -> str:
        return f"Catalog({len(self)} courses)"

    def get(self, code: str, default=None) -> Course | None:
        if not isinstance(code, str):
            return default
        return self._courses.get(normalize_code(code), default)

    @property
    def courses(self) -> tuple[Course, ...]:
        return tuple(self._courses.values())

    @cached_property
    def graph(self) -> PrereqGraph:
        return build_graph(self._courses.values())

    def by_subject(self, subject: str) -> list[Course]:
        normalized = subject.upper().strip()
        return [c for c in self._courses.values() if c.subject == normalized]

    def subject_summary(self) -> dict[str, int]:
        summary: dict[str, int] = {}
        for course in self._courses.values():
            summary[course.subject] = summary.get(course.subject, 0) + 1
        return summary


def parse_catalog_json(content: str) -> list[dict]:
    data = json.loads(content)
    if isinstance(data, dict):
        data = data.get("courses", [])
    if not isinstance(data, list):
        raise ValueError("catalog JSON must be a list of courses")
    return [row for row in data if isinstance(row, dict)]


def parse_catalog_csv(content: str) -> list[dict]:
    reader = csv.DictReader(StringIO(content))
    rows = []
    for row in reader:
        code = row.get("course_code") or row.get("code") or row.get("course")
        if not code:
            continue
        rows.append(
            {
                "code": code.strip(),
                "subject": row.get("subject"),
                "title": row.get("course_title") or row.get("title"),
                "credits": _to_int(row.get("credits")),
                "description": row.get("description"),
                "prerequisites": [
                    p.strip()
                    for p in _PREREQ_SPLIT_RE.split(row.get("prerequisites") or "")
                    if p.strip()
                ],
            }
        )
    return rows


def load_catalog_json(path: str | Path) -> Catalog:
    return _load(Path(path), parse_catalog_json)


def load_catalog_csv(path: str | Path) -> Catalog:
    return _load(Path(path), parse_catalog_csv)


def _load(path: Path, parser) -> Catalog:
    if not path.exists():
        logger.warning("Course catalog not found at: %s", path)
        return Catalog()
    try:
        rows = parser(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise CatalogLoadError(f"Failed to load course catalog {path}: {exc}") from exc
    catalog = Catalog.from_rows(rows)
    logger.info("Loaded %d courses from catalog %s", len(catalog), path)
    return catalog


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(float(value))
    except ValueError:
        return None


# Process-wide snapshot. Replaced wholesale, never mutated, so readers holding
# the previous Catalog keep a consistent view.
_current: Catalog | None = None


def load_default_catalog() -> Catalog:
    path = Path(settings.catalog_path) if settings.catalog_path else DEFAULT_CATALOG_PATH
    if path.suffix.lower() == ".csv":
        return load_catalog_csv(path)
    return load_catalog_json(path)


def get_catalog() -> Catalog:
    global _current
    catalog = _current
    if catalog is None:
        catalog = load_default_catalog()
        _current = catalog
    return catalog


def install_catalog(catalog: Catalog) -> Catalog:
    """Swap in a new catalog snapshot; returns the one it replaced (or an empty one)."""
    global _current
    previous = _current
    _current = catalog
    return previous if previous is not None else Catalog()
