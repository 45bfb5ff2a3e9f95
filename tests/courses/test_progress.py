import uuid

import pytest

from app.courses.models import EnrollmentStatus, LessonProgress, LessonProgressStatus
from app.courses.services.progress_service import (
    EnrollmentProgress,
    average_percentage,
    calculate_progress_percentage,
    can_get_certificate,
)
from tests.utils.factories import create_course_factory, create_enrollment_factory
from tests.utils.helpers import API, create_auth_headers


class TestProgressArithmetic:
    @pytest.mark.parametrize(
        "completed, total, expected",
        [
            (0, 0, 0),
            (0, 10, 0),
            (9, 10, 90),
            (10, 10, 100),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),  # 12.5 rounds half up
            (15, 10, 100),
        ],
    )
    def test_calculate_progress_percentage(self, completed, total, expected):
        assert calculate_progress_percentage(completed, total) == expected

    def test_average_percentage_rounds_half_up(self):
        assert average_percentage([]) == 0
        assert average_percentage([50, 51]) == 51
        assert average_percentage([10, 20, 30]) == 20

    def test_certificate_threshold(self):
        assert can_get_certificate(90) is True
        assert can_get_certificate(89) is False
        assert EnrollmentProgress(total_lessons=10, completed_lessons=9).can_get_certificate


class TestLessonProgressEndpoints:
    @pytest.mark.asyncio
    async def test_partial_progress_marks_in_progress(
        self, test_client, test_course, test_enrollment, test_user_token
    ):
        lesson = test_course.lessons[0]

        response = await test_client.post(
            f"{API}/progress/lessons/{lesson.id}",
            json={"progress_percentage": 40, "watched_seconds": 120},
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "IN_PROGRESS"
        assert data["progress_percentage"] == 40
        assert data["watched_seconds"] == 120
        assert data["enrollment_id"] == str(test_enrollment.id)

    @pytest.mark.asyncio
    async def test_completed_lesson_stays_completed(
        self, test_client, db_session, test_course, test_enrollment, test_user_token
    ):
        lesson = test_course.lessons[0]
        headers = create_auth_headers(test_user_token)

        await test_client.post(f"{API}/progress/lessons/{lesson.id}/complete", headers=headers)
        response = await test_client.post(
            f"{API}/progress/lessons/{lesson.id}",
            json={"progress_percentage": 10, "watched_seconds": 5},
            headers=headers,
        )

        assert response.json()["status"] == "COMPLETED"
        assert response.json()["progress_percentage"] == 100
        assert db_session.query(LessonProgress).count() == 1

    @pytest.mark.asyncio
    async def test_requires_enrollment(self, test_client, test_course, test_user_token):
        lesson = test_course.lessons[0]

        response = await test_client.post(
            f"{API}/progress/lessons/{lesson.id}/complete",
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_lesson_is_404(self, test_client, test_user_token):
        response = await test_client.post(
            f"{API}/progress/lessons/{uuid.uuid4()}/complete",
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_completing_last_lesson_completes_enrollment(
        self, test_client, db_session, test_user, test_course, test_user_token
    ):
        enrollment = create_enrollment_factory(
            db_session, test_user, test_course, completed_lessons=9
        )
        last = test_course.lessons[-1]

        response = await test_client.post(
            f"{API}/progress/lessons/{last.id}/complete",
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 200
        db_session.refresh(enrollment)
        assert enrollment.status == EnrollmentStatus.COMPLETED
        assert enrollment.completed_at is not None


class TestCourseProgressSummary:
    @pytest.mark.asyncio
    async def test_summary_counts_completed_lessons(
        self, test_client, db_session, test_user, test_course, test_user_token
    ):
        create_enrollment_factory(db_session, test_user, test_course, completed_lessons=9)

        response = await test_client.get(
            f"{API}/progress/courses/{test_course.id}",
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_lessons"] == 10
        assert data["completed_lessons"] == 9
        assert data["progress_percentage"] == 90
        assert data["can_get_certificate"] is True
        assert len(data["lessons"]) == 9
        assert all(p["status"] == LessonProgressStatus.COMPLETED.value for p in data["lessons"])

    @pytest.mark.asyncio
    async def test_summary_404_without_enrollment(
        self, test_client, test_course, test_user_token
    ):
        response = await test_client.get(
            f"{API}/progress/courses/{test_course.id}",
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 404


class TestMyLearning:
    @pytest.mark.asyncio
    async def test_my_courses_and_dashboard(
        self, test_client, db_session, test_user, test_instructor, test_course, test_user_token
    ):
        create_enrollment_factory(db_session, test_user, test_course, completed_lessons=5)
        finished = create_course_factory(
            db_session, test_instructor, title="완강한 강의", lesson_count=2
        )
        create_enrollment_factory(
            db_session,
            test_user,
            finished,
            status=EnrollmentStatus.COMPLETED,
            completed_lessons=2,
        )
        cancelled = create_course_factory(db_session, test_instructor, lesson_count=1)
        create_enrollment_factory(
            db_session, test_user, cancelled, status=EnrollmentStatus.CANCELLED
        )
        headers = create_auth_headers(test_user_token)

        courses = await test_client.get(f"{API}/my/courses", headers=headers)
        dashboard = await test_client.get(f"{API}/my/dashboard", headers=headers)

        assert courses.status_code == 200
        by_title = {c["title"]: c for c in courses.json()}
        assert set(by_title) == {"기초 해부학", "완강한 강의"}
        assert by_title["기초 해부학"]["progress_percentage"] == 50
        assert by_title["기초 해부학"]["instructor_name"] == "이강사"
        assert by_title["완강한 강의"]["can_get_certificate"] is True

        assert dashboard.status_code == 200
        data = dashboard.json()
        assert data["total_enrollments"] == 2
        assert data["completed_courses"] == 1
        assert data["average_progress"] == 75
        assert data["total_watch_time"] == 120
