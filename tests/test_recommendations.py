import pytest

from coursepilot.services.catalog import Catalog
from coursepilot.services.recommendations import (
    alternatives,
    level_alignment,
    major_subjects,
    recommend,
    related_subjects,
    relevance_score,
    score_courses,
)

from conftest import make_course

INTRO = {"CS 110", "CS 112", "MATH 113", "MATH 125", "ENGH 101"}


class TestSubjects:
    def test_computer_science(self):
        assert major_subjects("Computer Science") == ["CS", "IT", "CYSE"]
        assert related_subjects("Computer Science") == ["CS", "IT", "CYSE", "MATH", "PHYS", "ENGH", "HNRS"]

    def test_abbreviations_match_whole_words_only(self):
        assert major_subjects("Physics") == ["PHYS", "MATH"]
        assert major_subjects("Cybersecurity") == ["CYSE", "CS", "IT"]
        assert major_subjects("BS in CS") == ["CS", "IT", "CYSE"]

    def test_unknown_major_falls_back_to_codes(self):
        assert major_subjects("Dance DANC") == ["DANC"]
        assert major_subjects("Dance") == []
        assert related_subjects("Dance") == ["ENGH", "HNRS"]


class TestScoring:
    @pytest.mark.parametrize(
        "level, year, expected",
        [(2, 2, 30), (3, 2, 30), (4, 2, 15), (5, 2, 0), (1, 3, -20), (None, 2, 0)],
    )
    def test_level_alignment(self, level, year, expected):
        assert level_alignment(level, year) == expected

    def test_relevance_score_components(self, small_catalog):
        # CS (100) + related (50) + unlocks CS 483 and CS 499 (20) + level 3 at year 2 (30)
        assert relevance_score(small_catalog["CS 310"], "Computer Science", 2, small_catalog) == 200
        # related only (50) + unlocks CS 310 (10) + level 1 at year 2 (-10)
        assert relevance_score(small_catalog["MATH 113"], "Computer Science", 2, small_catalog) == 50

    def test_unlocking_course_ranks_above_equal_candidate(self):
        catalog = Catalog(
            [
                make_course("CS 250"),
                make_course("CS 251"),
                make_course("CS 350", ["CS 251"]),
                make_course("CS 351", ["CS 251"]),
                make_course("CS 352", ["CS 251"]),
            ]
        )
        ranked = [c.code for c in recommend(catalog, set(), "Computer Science", 2)]
        assert ranked == ["CS 251", "CS 250"]

    def test_ties_keep_catalog_order(self):
        catalog = Catalog([make_course("CS 260"), make_course("CS 250"), make_course("CS 255")])
        ranked = [c.code for c in recommend(catalog, set(), "Computer Science", 2)]
        assert ranked == ["CS 260", "CS 250", "CS 255"]


class TestRecommend:
    def test_year_two_after_intro_courses(self, cs_catalog):
        results = recommend(cs_catalog, INTRO, "Computer Science", 2, limit=50)
        assert results
        for course in results:
            assert course.code not in INTRO
            assert course.level is None or course.level <= 4
            assert all(p in INTRO for p in course.prerequisites)
        assert "ECE 511" not in [c.code for c in results]

    def test_limit_and_order(self, cs_catalog):
        scored = score_courses(cs_catalog, INTRO, "Computer Science", 2)
        scores = [item.score for item in scored]
        assert scores == sorted(scores, reverse=True)
        top = recommend(cs_catalog, INTRO, "Computer Science", 2, limit=5)
        assert top == [item.course for item in scored[:5]]
        # CS 211 unlocks the most of the CS courses open to this student
        assert top[0].code == "CS 211"

    def test_completed_courses_are_excluded(self, small_catalog):
        results = recommend(small_catalog, {"CS 112"}, "Computer Science", 1)
        assert "CS 112" not in [c.code for c in results]


class TestAlternatives:
    def test_alternatives_for_blocked_course(self, small_catalog):
        result = alternatives(small_catalog, "cs 330", {"CS 112", "CS 211", "MATH 113"}, "Computer Science")
        assert result.target_course.code == "CS 330"
        assert [c.code for c in result.same_subject_alternatives] == ["CS 310"]
        # MATH 125 is available but more than 100 numbers away from 330
        assert result.related_subject_alternatives == []
        assert [c.code for c in result.prerequisite_alternatives] == ["MATH 125"]

    def test_prerequisite_path_skips_unknown_codes(self, small_catalog):
        result = alternatives(small_catalog, "CS 499", {"CS 112"}, "Computer Science")
        assert [c.code for c in result.prerequisite_alternatives] == ["CS 310"]

    def test_related_subjects_within_range(self, small_catalog):
        result = alternatives(small_catalog, "CS 211", set(), "Computer Science")
        assert [c.code for c in result.same_subject_alternatives] == ["CS 112"]
        assert [c.code for c in result.related_subject_alternatives] == ["MATH 113", "MATH 125"]
        assert [c.code for c in result.prerequisite_alternatives] == ["CS 112"]

    def test_unknown_target(self, small_catalog):
        result = alternatives(small_catalog, "CS 999", set(), "Computer Science")
        assert result.target_course is None
        assert result.same_subject_alternatives == []
        assert result.prerequisite_alternatives == []

    def test_lists_are_capped(self, cs_catalog):
        completed = {
            "CS 105", "CS 110", "CS 112", "CS 211", "CS 222", "CS 262",
            "MATH 113", "MATH 114", "MATH 125", "ENGH 302", "STAT 344",
        }
        result = alternatives(cs_catalog, "CS 310", completed, "Computer Science")
        assert [c.code for c in result.same_subject_alternatives] == [
            "CS 306", "CS 325", "CS 330", "CS 367", "CS 390",
        ]
        assert len(result.related_subject_alternatives) <= 5

        result = alternatives(cs_catalog, "CS 310", completed, "Computer Science", limit=2)
        assert len(result.same_subject_alternatives) == 2
