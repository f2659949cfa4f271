import logging
from collections.abc import Iterable, Sequence

from coursepilot.core.config import settings
from coursepilot.core.errors import CourseNotFoundError
from coursepilot.schemas.course import normalize_code
from coursepilot.schemas.requirement import DegreeRequirements
from coursepilot.schemas.transcript import (
    CompletedCourseCreate,
    CompletedCourseRecord,
    CreditSummary,
    Grade,
    parse_grade,
)
from coursepilot.services.catalog import Catalog
from coursepilot.services.requirements import DEFAULT_REQUIREMENTS, counts_toward_degree

logger = logging.getLogger(__name__)


def grade_points(grade: Grade | str) -> float:
    return parse_grade(grade).points


def _append_attempt(
    history: Sequence[CompletedCourseRecord],
    course_code: str,
    grade: Grade,
    semester: str | None,
    credits: int,
    earns: bool,
) -> tuple[CompletedCourseRecord, ...]:
    superseded: set[int] = set()
    new_nullified = False

    for index, prior in enumerate(history):
        if prior.course_code != course_code or prior.nullified:
            continue
        if not prior.grade.is_passing and grade.is_passing:
            superseded.add(index)
        elif prior.grade.is_passing and not grade.is_passing:
            earns = False
        elif grade.points >= prior.grade.points:
            superseded.add(index)
        else:
            new_nullified = True
            break

    if new_nullified:
        superseded.clear()
        earns = False

    updated = tuple(
        record.model_copy(update={"nullified": True}) if index in superseded else record
        for index, record in enumerate(history)
    )
    new_record = CompletedCourseRecord(
        course_code=course_code,
        grade=grade,
        semester=semester,
        credits=credits,
        nullified=new_nullified,
        counts_toward_degree=earns,
    )
    logger.debug(
        "Recorded %s %s (%s): counts=%s nullified=%s superseded=%d",
        course_code,
        grade.value,
        semester,
        earns,
        new_nullified,
        len(superseded),
    )
    return updated + (new_record,)


def record_attempt(
    history: Sequence[CompletedCourseRecord],
    attempt: CompletedCourseCreate,
    catalog: Catalog,
    requirements: DegreeRequirements = DEFAULT_REQUIREMENTS,
) -> tuple[CompletedCourseRecord, ...]:
    """Append a new attempt to an academic history, applying the retake policy.

    The new attempt is weighed against every active (non-nullified) attempt of
    the same course:

    - old below passing, new passing: the old attempt is nullified.
    - old passing, new below passing: the old attempt keeps its credit and the
      new one is stored without credit (both stay active).
    - both passing or both below passing: the higher grade point stays and the
      lower is nullified; on a tie the older attempt is nullified.

    If the new attempt loses any comparison it is stored nullified and no
    earlier attempt is touched. Returns a new history; the input is not modified.
    """
    course = catalog.get(attempt.course_code)
    if course is None:
        raise CourseNotFoundError(attempt.course_code)

    earns = counts_toward_degree(course.code, attempt.grade, catalog, requirements)
    return _append_attempt(
        history, course.code, attempt.grade, attempt.semester, course.credits, earns
    )


def rebuild_history(
    attempts: Iterable[CompletedCourseCreate | CompletedCourseRecord],
    catalog: Catalog,
    requirements: DegreeRequirements = DEFAULT_REQUIREMENTS,
) -> tuple[CompletedCourseRecord, ...]:
    """Replay attempts in order, recomputing nullification and credit flags.

    Stored records keep their credits and are replayed even when their course
    has since left the catalog. New attempts go through `record_attempt` and
    must name a catalog course.
    """
    history: tuple[CompletedCourseRecord, ...] = ()
    for attempt in attempts:
        if isinstance(attempt, CompletedCourseRecord):
            earns = counts_toward_degree(attempt.course_code, attempt.grade, catalog, requirements)
            history = _append_attempt(
                history,
                attempt.course_code,
                attempt.grade,
                attempt.semester,
                attempt.credits,
                earns,
            )
        else:
            history = record_attempt(history, attempt, catalog, requirements)
    return history


def remove_attempt(
    history: Sequence[CompletedCourseRecord],
    course_code: str,
    catalog: Catalog,
    semester: str | None = None,
    grade: Grade | str | None = None,
    requirements: DegreeRequirements = DEFAULT_REQUIREMENTS,
) -> tuple[CompletedCourseRecord, ...]:
    """Delete matching attempts and recompute the flags of that course's other attempts.

    `semester` and `grade`, when given, narrow the match. An attempt nullified
    only because of a removed attempt regains its credit. Records of other
    courses are returned untouched and in place.
    """
    target_code = normalize_code(course_code)
    wanted_grade = parse_grade(grade) if grade is not None else None

    def matches(record: CompletedCourseRecord) -> bool:
        if record.course_code != target_code:
            return False
        if semester is not None and record.semester != semester:
            return False
        return wanted_grade is None or record.grade is wanted_grade

    remaining = [record for record in history if not matches(record)]
    if len(remaining) == len(history):
        return tuple(history)

    replayed = iter(
        rebuild_history(
            [r for r in remaining if r.course_code == target_code], catalog, requirements
        )
    )
    return tuple(next(replayed) if r.course_code == target_code else r for r in remaining)


def summarize_credits(
    history: Iterable[CompletedCourseRecord],
    required_for_degree: int | None = None,
) -> CreditSummary:
    """Earned credits and GPA, ignoring nullified attempts.

    Credits are earned only by attempts that count toward the degree; GPA is
    weighted over every active graded attempt, failing grades included.
    """
    earned = 0
    total_points = 0.0
    graded_credits = 0
    nullified = 0
    for record in history:
        if record.nullified:
            nullified += 1
            continue
        if record.earns_credit:
            earned += record.credits
        if not record.credits:
            continue
        total_points += record.grade.points * record.credits
        graded_credits += record.credits

    gpa = round(total_points / graded_credits, 2) if graded_credits else None
    return CreditSummary(
        earned=earned,
        required_for_degree=(
            required_for_degree
            if required_for_degree is not None
            else settings.credits_required_for_degree
        ),
        gpa=gpa,
        graded_credits=graded_credits,
        nullified_attempts=nullified,
    )
