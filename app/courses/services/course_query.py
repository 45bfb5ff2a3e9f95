"""Catalog filter translation.

Turns the query-string filters of the public catalog into SQLAlchemy
predicates. Everything here is free of I/O so it can be unit tested without
a database session.
"""

from dataclasses import dataclass

from sqlalchemy import ColumnElement, and_, false, or_, true

from app.auth.models.user import User
from app.core.constants import DEFAULT_COURSE_PAGE_SIZE, LEVEL_LABELS
from app.core.exceptions import ValidationError
from app.courses.models.course import Category, Course, CourseLevel, CourseStatus
from app.instructors.models.instructor_profile import InstructorProfile

LABEL_TO_LEVEL: dict[str, CourseLevel] = {
    label: CourseLevel(value) for value, label in LEVEL_LABELS.items()
}


def level_label(level: CourseLevel) -> str:
    return LEVEL_LABELS[level.value]


def parse_level(value: str) -> CourseLevel:
    """Accept a display label (초급) or an enum name (BEGINNER)."""
    if value in LABEL_TO_LEVEL:
        return LABEL_TO_LEVEL[value]
    try:
        return CourseLevel(value.upper())
    except ValueError:
        raise ValidationError("올바르지 않은 난이도입니다.", field="level") from None


@dataclass(frozen=True)
class CourseFilters:
    category: str | None = None
    level: str | None = None
    is_paid: bool | None = None
    search: str | None = None
    page: int = 1
    limit: int = DEFAULT_COURSE_PAGE_SIZE

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def paid_condition(paid: bool) -> ColumnElement[bool]:
    if paid:
        return and_(Course.price > 0, Course.is_free.is_(false()))
    return or_(Course.price == 0, Course.is_free.is_(true()))


def search_condition(term: str) -> ColumnElement[bool]:
    pattern = f"%{term}%"
    return or_(
        Course.title.ilike(pattern),
        Course.description.ilike(pattern),
        Course.instructor.has(InstructorProfile.user.has(User.name.ilike(pattern))),
    )


def build_course_conditions(filters: CourseFilters) -> list[ColumnElement[bool]]:
    """Predicates for the published catalog, to be combined with AND."""
    conditions: list[ColumnElement[bool]] = [Course.status == CourseStatus.PUBLISHED]

    if filters.category:
        conditions.append(Course.category.has(Category.name == filters.category))

    if filters.level:
        conditions.append(Course.level == parse_level(filters.level))

    if filters.is_paid is not None:
        conditions.append(paid_condition(filters.is_paid))

    search = (filters.search or "").strip()
    if search:
        conditions.append(search_condition(search))

    return conditions
