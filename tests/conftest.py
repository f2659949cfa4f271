import pytest

from coursepilot.schemas.course import Course
from coursepilot.services.catalog import DEFAULT_CATALOG_PATH, Catalog, load_catalog_json


def make_course(code, prerequisites=(), credits=3, title=None, description=""):
    return Course(
        code=code,
        title=title or f"Course {code}",
        credits=credits,
        description=description,
        prerequisites=list(prerequisites),
    )


@pytest.fixture
def small_catalog():
    """A slice of the CS curriculum with a few hand-picked edges."""
    return Catalog(
        [
            make_course("CS 112", title="Introduction to Computer Programming", credits=4),
            make_course("MATH 113", title="Analytic Geometry and Calculus I", credits=4),
            make_course("MATH 125", title="Discrete Mathematics I"),
            make_course("CS 211", ["CS 112"], title="Object-Oriented Programming"),
            make_course(
                "CS 310",
                ["CS 211", "MATH 113"],
                title="Data Structures",
                description="Abstract data types, lists, trees and graphs.",
            ),
            make_course("CS 330", ["CS 211", "MATH 125"], title="Formal Methods and Models"),
            make_course("CS 483", ["MATH 125", "CS 310", "CS 330"], title="Analysis of Algorithms"),
            make_course("CS 499", ["CS 310", "NOPE 999"], title="Special Topics"),
        ]
    )


@pytest.fixture
def cyclic_catalog():
    return Catalog(
        [
            make_course("CS 101", ["CS 102"]),
            make_course("CS 102", ["CS 101"]),
            make_course("CS 201", ["CS 101"]),
        ]
    )


@pytest.fixture(scope="session")
def cs_catalog():
    return load_catalog_json(DEFAULT_CATALOG_PATH)
