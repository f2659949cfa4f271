from collections.abc import Iterable

from coursepilot.core.config import settings
from coursepilot.schemas.course import Course, course_number, normalize_code
from coursepilot.schemas.requirement import (
    DegreeCreditCheck,
    DegreeRequirements,
    RequirementCategory,
)
from coursepilot.schemas.transcript import CompletedCourseRecord, Grade, parse_grade
from coursepilot.services.catalog import Catalog

# BS Computer Science, 2019-2020 catalog year
DEFAULT_REQUIREMENTS = DegreeRequirements(
    required_courses=[
        "CS 110", "CS 112", "CS 211", "CS 262", "CS 306", "CS 310",
        "CS 321", "CS 330", "CS 367", "CS 471", "CS 483",
        "MATH 113", "MATH 114", "MATH 125", "MATH 203", "MATH 213",
        "STAT 344",
    ],
    mason_core_courses=["ENGH 101", "ENGH 302", "COMM 100", "COMM 101"],
    senior_courses=[
        "CS 425", "CS 440", "CS 450", "CS 451", "CS 455", "CS 463",
        "CS 465", "CS 468", "CS 469", "CS 475", "CS 477", "CS 480",
        "CS 482", "CS 484", "CS 485", "CS 490", "CS 491", "CS 499",
        # accepted in place of one senior CS course
        "MATH 446", "OR 481",
    ],
    natural_science_courses=[
        "BIOL 103", "BIOL 106", "BIOL 107",
        "CHEM 211", "CHEM 213", "CHEM 212", "CHEM 214",
        "GEOL 101", "GEOL 102",
        "PHYS 160", "PHYS 161", "PHYS 260", "PHYS 261",
    ],
    cs_related_electives=[
        "ECE 301", "ECE 331", "ECE 332", "ECE 350", "ECE 446", "ECE 447", "ECE 511",
        "OR 335", "OR 441", "OR 442",
        "PHIL 371", "PHIL 376",
        "STAT 354",
        "SWE 432", "SWE 437", "SWE 443",
        "SYST 371", "SYST 470",
        "ENGH 388",
        # MATH 351 + 352 substitute for STAT 344
        "MATH 351", "MATH 352",
    ],
    subject_thresholds={"MATH": 300, "CS": 300},
    excluded_courses=["MATH 104", "MATH 105", "MATH 108"],
    general_elective_credit_cap=settings.general_elective_credit_cap,
)


def classify_course(
    code: str,
    catalog: Catalog,
    requirements: DegreeRequirements = DEFAULT_REQUIREMENTS,
) -> RequirementCategory | None:
    """Which degree requirement a course falls under, ignoring grade.

    Rules are tried in RequirementCategory order and the first match wins.
    Returns None for excluded or unknown courses.
    """
    normalized = normalize_code(code)

    if normalized in requirements.required_courses:
        return RequirementCategory.REQUIRED
    if normalized in requirements.mason_core_courses:
        return RequirementCategory.MASON_CORE
    if normalized in requirements.senior_courses:
        return RequirementCategory.SENIOR_ELECTIVE
    if normalized in requirements.natural_science_courses:
        return RequirementCategory.NATURAL_SCIENCE
    if normalized in requirements.cs_related_electives:
        return RequirementCategory.CS_RELATED_ELECTIVE

    subject = normalized.split(" ")[0]
    threshold = requirements.subject_thresholds.get(subject)
    number = course_number(normalized)
    if threshold is not None and number is not None and number > threshold:
        return RequirementCategory.UPPER_LEVEL_ELECTIVE

    if normalized in requirements.excluded_courses:
        return None
    if normalized in catalog:
        # Capped by general_elective_credit_cap, which is left to the caller
        return RequirementCategory.GENERAL_ELECTIVE
    return None


def counts_toward_degree(
    code: str,
    grade: Grade | str,
    catalog: Catalog,
    requirements: DegreeRequirements = DEFAULT_REQUIREMENTS,
) -> bool:
    if not parse_grade(grade).is_passing:
        return False
    return classify_course(code, catalog, requirements) is not None


def check_degree_credit(
    code: str,
    grade: Grade | str | None,
    catalog: Catalog,
    requirements: DegreeRequirements = DEFAULT_REQUIREMENTS,
) -> DegreeCreditCheck:
    """Category plus verdict for one course. With no grade, assume a passing one."""
    category = classify_course(code, catalog, requirements)
    parsed = parse_grade(grade) if grade is not None else None
    counts = category is not None and (parsed is None or parsed.is_passing)
    return DegreeCreditCheck(
        course_code=normalize_code(code),
        grade=parsed,
        category=category,
        counts_toward_degree=counts,
    )


def required_courses(
    catalog: Catalog,
    requirements: DegreeRequirements = DEFAULT_REQUIREMENTS,
) -> list[Course]:
    return [catalog[code] for code in requirements.required_courses if code in catalog]


def remaining_required_courses(
    catalog: Catalog,
    history: Iterable[CompletedCourseRecord],
    requirements: DegreeRequirements = DEFAULT_REQUIREMENTS,
) -> list[Course]:
    earned = {record.course_code for record in history if record.earns_credit}
    return [c for c in required_courses(catalog, requirements) if c.code not in earned]
