"""
Fixtures for cart and order tests.
"""

import pytest
from sqlalchemy.orm import Session

from tests.utils.factories import create_course_factory


@pytest.fixture
def paid_course(db_session: Session, test_instructor):
    return create_course_factory(
        db_session,
        test_instructor,
        title="퍼스널 트레이닝 실전",
        price=89000,
        original_price=129000,
        lesson_count=3,
    )


@pytest.fixture
def free_course(db_session: Session, test_instructor):
    return create_course_factory(
        db_session, test_instructor, title="무료 스트레칭", is_free=True, lesson_count=1
    )
