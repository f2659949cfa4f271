from collections.abc import Iterable, Sequence

from coursepilot.schemas.course import Course, normalize_code
from coursepilot.schemas.prerequisite import (
    CourseAvailability,
    PrerequisiteChain,
    UnavailableCourse,
)
from coursepilot.schemas.recommendation import CourseAlternatives, ScoredCourse
from coursepilot.schemas.requirement import DegreeCreditCheck, DegreeRequirements
from coursepilot.schemas.transcript import (
    CompletedCourseCreate,
    CompletedCourseRecord,
    CreditSummary,
    Grade,
)
from coursepilot.services import availability, recommendations, requirements, search, transcripts
from coursepilot.services.catalog import Catalog, get_catalog


class DegreeAdvisor:
    """Read-only query surface over one catalog snapshot and one rule set.

    Unknown course codes never raise here: lookups return None and list
    queries return empty results. Only `record_attempt` rejects them.
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        degree_requirements: DegreeRequirements | None = None,
    ):
        self.catalog = catalog if catalog is not None else get_catalog()
        self.requirements = degree_requirements or requirements.DEFAULT_REQUIREMENTS

    def _resolve(self, codes: Iterable[str]) -> list[Course]:
        return [self.catalog[code] for code in codes if code in self.catalog]

    # ── Catalog ─────────────────────────────────────────────────────────────

    def lookup(self, code: str) -> Course | None:
        return self.catalog.get(code)

    def course_exists(self, code: str) -> bool:
        return code in self.catalog

    def courses_by_subject(self, subject: str) -> list[Course]:
        return self.catalog.by_subject(subject)

    def subject_summary(self) -> dict[str, int]:
        return self.catalog.subject_summary()

    def search(self, query: str, limit: int | None = None) -> list[Course]:
        return search.search(self.catalog, query, limit)

    def search_courses(self, text: str) -> list[Course]:
        return search.search_courses(self.catalog, text)

    # ── Availability ────────────────────────────────────────────────────────

    def is_available(self, code: str, completed: Iterable[str]) -> bool:
        course = self.catalog.get(code)
        return course is not None and availability.is_available(course, completed)

    def missing_prerequisites(self, code: str, completed: Iterable[str]) -> list[str]:
        course = self.catalog.get(code)
        if course is None:
            return []
        return availability.missing_prerequisites(course, completed)

    def check_availability(self, code: str, completed: Iterable[str]) -> CourseAvailability:
        course = self.catalog.get(code)
        if course is None:
            return CourseAvailability(course_code=normalize_code(code), found=False, available=False)
        missing = availability.missing_prerequisites(course, completed)
        return CourseAvailability(
            course_code=course.code,
            found=True,
            available=not missing,
            missing_prerequisites=missing,
        )

    def available_courses(self, completed: Iterable[str], exclude_completed: bool = True) -> list[Course]:
        return availability.available_courses(self.catalog, completed, exclude_completed)

    def unavailable_courses(self, completed: Iterable[str]) -> list[UnavailableCourse]:
        return availability.unavailable_courses(self.catalog, completed)

    def next_level_courses(self, completed: Iterable[str]) -> list[Course]:
        return availability.next_level_courses(self.catalog, completed)

    # ── Prerequisite graph ──────────────────────────────────────────────────

    def prerequisite_chain(self, code: str) -> PrerequisiteChain:
        course = self.catalog.get(code)
        if course is None:
            return PrerequisiteChain()
        graph = self.catalog.graph
        return PrerequisiteChain(
            course=course,
            direct_prerequisites=self._resolve(graph.direct_prerequisites(course.code)),
            indirect_prerequisites=self._resolve(graph.indirect_prerequisites(course.code)),
            unlocked_courses=self._resolve(graph.unlocks(course.code)),
        )

    def unlocks(self, code: str) -> list[Course]:
        return self._resolve(self.catalog.graph.unlocks(code))

    def all_prerequisites(self, code: str) -> list[Course]:
        return self._resolve(self.catalog.graph.prerequisite_closure(code))

    # ── Recommendations ─────────────────────────────────────────────────────

    def recommend(
        self,
        completed: Iterable[str],
        major: str,
        year: int,
        limit: int | None = None,
    ) -> list[Course]:
        return recommendations.recommend(self.catalog, completed, major, year, limit)

    def score_courses(self, completed: Iterable[str], major: str, year: int) -> list[ScoredCourse]:
        return recommendations.score_courses(self.catalog, completed, major, year)

    def alternatives(self, code: str, completed: Iterable[str], major: str) -> CourseAlternatives:
        return recommendations.alternatives(self.catalog, code, completed, major)

    # ── Degree credit ───────────────────────────────────────────────────────

    def counts_toward_degree(self, code: str, grade: Grade | str) -> bool:
        return requirements.counts_toward_degree(code, grade, self.catalog, self.requirements)

    def check_degree_credit(self, code: str, grade: Grade | str | None = None) -> DegreeCreditCheck:
        return requirements.check_degree_credit(code, grade, self.catalog, self.requirements)

    def required_courses(self) -> list[Course]:
        return requirements.required_courses(self.catalog, self.requirements)

    def remaining_required_courses(self, history: Iterable[CompletedCourseRecord]) -> list[Course]:
        return requirements.remaining_required_courses(self.catalog, history, self.requirements)

    # ── Academic history ────────────────────────────────────────────────────

    def record_attempt(
        self,
        history: Sequence[CompletedCourseRecord],
        attempt: CompletedCourseCreate,
    ) -> tuple[CompletedCourseRecord, ...]:
        return transcripts.record_attempt(history, attempt, self.catalog, self.requirements)

    def remove_attempt(
        self,
        history: Sequence[CompletedCourseRecord],
        course_code: str,
        semester: str | None = None,
        grade: Grade | str | None = None,
    ) -> tuple[CompletedCourseRecord, ...]:
        return transcripts.remove_attempt(
            history, course_code, self.catalog, semester, grade, self.requirements
        )

    def credit_summary(
        self,
        history: Iterable[CompletedCourseRecord],
        required_for_degree: int | None = None,
    ) -> CreditSummary:
        return transcripts.summarize_credits(history, required_for_degree)
