import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.auth.schemas.user import UserSummary
from app.courses.models.enrollment import EnrollmentStatus
from app.instructors.schemas.instructor import StudentProgress
from app.instructors.services.stats import (
    average_course_rating,
    build_analytics,
    completion_rate,
    count_active,
    hourly_activity,
    roll_up_courses,
    round_one_decimal,
)

NOW = datetime(2026, 5, 20, 9, 0)


def student(last_activity_at: datetime, progress: int = 0) -> StudentProgress:
    return StudentProgress(
        enrollment_id="e",
        student=UserSummary(id="u", name="김수강"),
        email="student@example.com",
        course_id="c",
        course_title="기초 해부학",
        status=EnrollmentStatus.ACTIVE,
        enrolled_at=last_activity_at,
        total_lessons=10,
        completed_lessons=progress // 10,
        progress_percentage=progress,
        last_activity_at=last_activity_at,
    )


class TestRounding:
    @pytest.mark.parametrize(
        "value, expected", [(4.25, 4.3), (4.24, 4.2), (3.35, 3.4), (5.0, 5.0), (0.05, 0.1)]
    )
    def test_round_one_decimal_half_up(self, value, expected):
        assert round_one_decimal(value) == expected

    def test_average_course_rating_ignores_unrated(self):
        assert average_course_rating([4.5, 0, None, 4.0]) == 4.3
        assert average_course_rating([0, None]) == 0.0
        assert average_course_rating([]) == 0.0


class TestRollUp:
    def test_roll_up_courses(self):
        courses = [
            SimpleNamespace(enrollment_count=12, review_count=3, average_rating=4.8),
            SimpleNamespace(enrollment_count=0, review_count=0, average_rating=0.0),
        ]

        stats = roll_up_courses(courses)

        assert stats.total_courses == 2
        assert stats.total_students == 12
        assert stats.total_reviews == 3
        assert stats.average_rating == 4.8


class TestCountActive:
    def test_counts_activity_inside_window(self):
        students = [
            student(NOW - timedelta(days=1)),
            student(NOW - timedelta(days=7)),
            student(NOW - timedelta(days=8)),
        ]

        assert count_active(students, now=NOW) == 2
        assert count_active(students, now=NOW, window_days=30) == 3


class TestCompletionRate:
    def test_share_of_completed_enrollments(self):
        statuses = [EnrollmentStatus.COMPLETED, EnrollmentStatus.ACTIVE, EnrollmentStatus.ACTIVE]

        assert completion_rate(statuses) == 33
        assert completion_rate([EnrollmentStatus.COMPLETED, EnrollmentStatus.ACTIVE]) == 50
        assert completion_rate([]) == 0


class TestHourlyActivity:
    def test_buckets_recent_updates_by_hour(self):
        updates = [
            NOW.replace(hour=7, minute=5),
            NOW.replace(hour=7, minute=55),
            NOW - timedelta(days=2, hours=9),
            NOW - timedelta(days=8),
        ]

        pattern = hourly_activity(updates, now=NOW)

        assert len(pattern) == 24
        assert pattern[7] == 2
        assert pattern[0] == 1
        assert sum(pattern) == 3

    def test_aware_timestamps_use_utc_hour(self):
        aware = datetime(2026, 5, 20, 8, 30, tzinfo=timezone(timedelta(hours=9)))

        assert hourly_activity([aware], now=NOW)[23] == 1


class TestBuildAnalytics:
    def test_rolls_up_courses_and_enrollments(self):
        pt = SimpleNamespace(
            id=uuid.uuid4(), title="실전 PT", price=50000, enrollment_count=3, average_rating=4.5
        )
        free = SimpleNamespace(
            id=uuid.uuid4(), title="무료 특강", price=0, enrollment_count=1, average_rating=None
        )
        student_id = uuid.uuid4()

        def enrollment(course, status, enrolled_at, user_id=None):
            return SimpleNamespace(
                id=uuid.uuid4(),
                course_id=course.id,
                user_id=user_id or uuid.uuid4(),
                status=status,
                enrolled_at=enrolled_at,
            )

        done = enrollment(pt, EnrollmentStatus.COMPLETED, datetime(2026, 3, 2), student_id)
        busy = enrollment(pt, EnrollmentStatus.ACTIVE, datetime(2026, 5, 1))
        stale = enrollment(pt, EnrollmentStatus.ACTIVE, datetime(2026, 5, 3))
        sampler = enrollment(free, EnrollmentStatus.ACTIVE, datetime(2026, 5, 10), student_id)
        last_activity = {
            done.id: NOW - timedelta(days=20),
            busy.id: NOW - timedelta(days=1),
            stale.id: NOW - timedelta(days=10),
            sampler.id: NOW - timedelta(hours=3),
        }

        analytics = build_analytics(
            [pt, free],
            [done, busy, stale, sampler],
            last_activity,
            [NOW - timedelta(days=1), NOW - timedelta(hours=3)],
            now=NOW,
        )

        assert analytics.total_students == 3
        assert analytics.active_students == 2
        assert analytics.completion_rate == 25
        assert analytics.average_rating == 4.5
        assert analytics.monthly_enrollments == {"2026-05": 3, "2026-03": 1}
        assert sum(analytics.learning_pattern) == 2

        pt_row, free_row = analytics.course_performance
        assert pt_row.course_id == str(pt.id)
        assert pt_row.completion_rate == 33
        assert pt_row.active_students == 1
        assert pt_row.total_revenue == 150000
        assert free_row.completion_rate == 0
        assert free_row.active_students == 1
        assert free_row.average_rating == 0.0
        assert free_row.total_revenue == 0

    def test_without_enrollments(self):
        course = SimpleNamespace(
            id=uuid.uuid4(), title="신규 강의", price=30000, enrollment_count=0, average_rating=0.0
        )

        analytics = build_analytics([course], [], {}, [], now=NOW)

        assert analytics.total_students == 0
        assert analytics.completion_rate == 0
        assert analytics.monthly_enrollments == {}
        assert analytics.learning_pattern == [0] * 24
        assert analytics.course_performance[0].completion_rate == 0
