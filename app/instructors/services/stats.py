"""Roll-ups over an instructor's courses and students.

Pure functions over already loaded rows so they can be unit tested without a
database.
"""

import uuid
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from app.commerce.services.revenue import estimate_course_revenue
from app.core.constants import ACTIVE_STUDENT_WINDOW_DAYS
from app.core.datetime_utils import monthly_counts, to_naive_utc, utcnow
from app.courses.models.enrollment import EnrollmentStatus
from app.courses.services.progress_service import calculate_progress_percentage
from app.instructors.schemas.instructor import (
    CoursePerformance,
    InstructorAnalyticsResponse,
    InstructorStats,
    StudentProgress,
)

HOURS_PER_DAY = 24


class RatedCourse(Protocol):
    enrollment_count: int
    review_count: int
    average_rating: float | None


class AnalyticsCourse(Protocol):
    id: uuid.UUID
    title: str
    price: int
    enrollment_count: int
    average_rating: float | None


class AnalyticsEnrollment(Protocol):
    id: uuid.UUID
    course_id: uuid.UUID
    user_id: uuid.UUID
    status: EnrollmentStatus
    enrolled_at: datetime


def round_one_decimal(value: float) -> float:
    """Round half up to one decimal place (4.25 -> 4.3)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def average_course_rating(ratings: Iterable[float | None]) -> float:
    """Mean of the course ratings, ignoring unrated (0 or missing) courses."""
    rated = [r for r in ratings if r]
    if not rated:
        return 0.0
    return round_one_decimal(sum(rated) / len(rated))


def roll_up_courses(courses: Sequence[RatedCourse]) -> InstructorStats:
    return InstructorStats(
        total_courses=len(courses),
        total_students=sum(c.enrollment_count or 0 for c in courses),
        average_rating=average_course_rating(c.average_rating for c in courses),
        total_reviews=sum(c.review_count or 0 for c in courses),
    )


def window_start(now: datetime | None, window_days: int = ACTIVE_STUDENT_WINDOW_DAYS) -> datetime:
    now = to_naive_utc(now) if now is not None else utcnow()
    return now - timedelta(days=window_days)


def count_active(
    students: Iterable[StudentProgress],
    now: datetime | None = None,
    window_days: int = ACTIVE_STUDENT_WINDOW_DAYS,
) -> int:
    """Enrollments with any activity within the last ``window_days``."""
    since = window_start(now, window_days)
    return sum(1 for s in students if to_naive_utc(s.last_activity_at) >= since)


def completion_rate(statuses: Iterable[EnrollmentStatus]) -> int:
    """Share of COMPLETED enrollments as a whole percentage; 0 without enrollments."""
    statuses = list(statuses)
    completed = sum(1 for s in statuses if s == EnrollmentStatus.COMPLETED)
    return calculate_progress_percentage(completed, len(statuses))


def hourly_activity(
    timestamps: Iterable[datetime],
    now: datetime | None = None,
    window_days: int = ACTIVE_STUDENT_WINDOW_DAYS,
) -> list[int]:
    """Count of timestamps per UTC hour of day (index 0-23) inside the window."""
    since = window_start(now, window_days)
    pattern = [0] * HOURS_PER_DAY
    for ts in timestamps:
        ts = to_naive_utc(ts)
        if ts >= since:
            pattern[ts.hour] += 1
    return pattern


def course_performance(
    course: AnalyticsCourse,
    enrollments: Sequence[AnalyticsEnrollment],
    last_activity: Mapping[uuid.UUID, datetime],
    since: datetime,
) -> CoursePerformance:
    """One course's row; ``enrollments`` must all belong to ``course``."""
    active = sum(
        1
        for e in enrollments
        if e.id in last_activity and to_naive_utc(last_activity[e.id]) >= since
    )
    return CoursePerformance(
        course_id=str(course.id),
        title=course.title,
        price=course.price,
        enrollment_count=course.enrollment_count or 0,
        average_rating=course.average_rating or 0.0,
        completion_rate=completion_rate(e.status for e in enrollments),
        active_students=active,
        total_revenue=estimate_course_revenue([course]),
    )


def build_analytics(
    courses: Sequence[AnalyticsCourse],
    enrollments: Sequence[AnalyticsEnrollment],
    last_activity: Mapping[uuid.UUID, datetime],
    progress_updates: Iterable[datetime],
    now: datetime | None = None,
) -> InstructorAnalyticsResponse:
    """Analytics over every enrollment of the given courses.

    ``last_activity`` maps enrollment id to its latest lesson progress update;
    enrollments without lesson progress never count as active.
    """
    since = window_start(now)
    by_course: dict[uuid.UUID, list[AnalyticsEnrollment]] = defaultdict(list)
    for enrollment in enrollments:
        by_course[enrollment.course_id].append(enrollment)

    performance = [
        course_performance(course, by_course[course.id], last_activity, since)
        for course in courses
    ]

    return InstructorAnalyticsResponse(
        total_students=len({e.user_id for e in enrollments}),
        active_students=sum(p.active_students for p in performance),
        completion_rate=completion_rate(e.status for e in enrollments),
        average_rating=average_course_rating(c.average_rating for c in courses),
        monthly_enrollments=monthly_counts(e.enrolled_at for e in enrollments),
        course_performance=performance,
        learning_pattern=hourly_activity(progress_updates, now),
    )
