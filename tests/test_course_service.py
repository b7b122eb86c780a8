from __future__ import annotations

import pytest

from intake.domain.records import DEFAULT_COURSES
from intake.repositories import build_repository
from intake.services.course_service import CourseService
from intake.services.errors import ValidationError


@pytest.fixture()
def repo(any_env):
    repository = build_repository(any_env)
    repository.seed_courses(DEFAULT_COURSES)
    return repository


def test_list_returns_real_booleans(repo):
    courses = CourseService(repo).list()
    assert len(courses) == 4
    for course in courses:
        assert isinstance(course.to_dict()["isFreeTrial"], bool)
        assert isinstance(course.to_dict()["isCharity"], bool)


def test_bulk_update_overwrites_existing_and_skips_idless(repo):
    svc = CourseService(repo)
    result = svc.bulk_update(
        [
            {"id": 1, "name": "Year 8 - Maths (Higher)", "price": 17.5, "syllabus": "Algebra"},
            {"name": "Brand new"},
            {"id": 42, "name": "Unknown"},
        ]
    )
    assert (result.updated, result.created, result.skipped) == (1, 0, 2)
    course = repo.get_course(1)
    assert course.name == "Year 8 - Maths (Higher)"
    assert course.price == 17.5
    assert course.syllabus == "Algebra"
    assert course.duration == "1 Hour"
    assert len(svc.list()) == 4


def test_bulk_update_can_create_when_enabled(repo):
    svc = CourseService(repo, allow_create=True)
    result = svc.bulk_update([{"name": "Year 11 - Maths", "price": 18, "isFreeTrial": True}])
    assert result.created == 1
    names = [c.name for c in svc.list()]
    assert names[-1] == "Year 11 - Maths"
    assert svc.list()[-1].id == 5


@pytest.mark.parametrize("price", [-1, "abc"])
def test_bad_price_rejects_whole_batch(repo, price):
    svc = CourseService(repo)
    with pytest.raises(ValidationError):
        svc.bulk_update([{"id": 1, "name": "Changed"}, {"id": 2, "price": price}])
    assert repo.get_course(1).name == "Year 8 - Maths"


def test_bulk_update_requires_list(repo):
    with pytest.raises(ValidationError):
        CourseService(repo).bulk_update({"id": 1})
