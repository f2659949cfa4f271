from coursepilot.schemas.course import Course, EngineModel


class CourseAvailability(EngineModel):
    course_code: str
    found: bool
    available: bool
    missing_prerequisites: list[str] = []


class UnavailableCourse(EngineModel):
    course: Course
    missing_prerequisites: list[str]


class PrerequisiteChain(EngineModel):
    """Direct and one-level-removed prerequisites of a course, plus what it unlocks.

    `course` is None when the code is not in the catalog; every list is then empty.
    """

    course: Course | None = None
    direct_prerequisites: list[Course] = []
    indirect_prerequisites: list[Course] = []
    unlocked_courses: list[Course] = []
