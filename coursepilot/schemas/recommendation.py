from coursepilot.schemas.course import Course, EngineModel


class ScoredCourse(EngineModel):
    course: Course
    score: int


class CourseAlternatives(EngineModel):
    target_course: Course | None = None
    same_subject_alternatives: list[Course] = []
    related_subject_alternatives: list[Course] = []
    # Missing prerequisites of the target, i.e. a path toward eligibility
    prerequisite_alternatives: list[Course] = []
