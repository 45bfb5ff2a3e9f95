"""
Fixtures for course tests.
"""

import pytest
from sqlalchemy.orm import Session

from tests.utils.factories import (
    create_category_factory,
    create_course_factory,
    create_enrollment_factory,
)


@pytest.fixture
def test_category(db_session: Session):
    return create_category_factory(db_session, name="기초 지식", slug="trainer-basic")


@pytest.fixture
def test_course(db_session: Session, test_instructor, test_category):
    """Published paid course with ten 10-minute lessons."""
    return create_course_factory(
        db_session,
        test_instructor,
        title="기초 해부학",
        price=50000,
        category=test_category,
        lesson_count=10,
    )


@pytest.fixture
def test_enrollment(db_session: Session, test_user, test_course):
    return create_enrollment_factory(db_session, test_user, test_course)
