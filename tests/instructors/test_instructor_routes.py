import uuid
from datetime import timedelta

import pytest

from app.auth.models.user import UserRole
from app.commerce.models.order import OrderStatus
from app.core.datetime_utils import month_key, utcnow
from app.courses.models import CourseStatus, EnrollmentStatus, Lesson
from app.instructors.models.instructor_profile import InstructorProfile, InstructorStatus
from tests.utils.factories import (
    create_course_factory,
    create_enrollment_factory,
    create_instructor_factory,
    create_order_factory,
    create_user_factory,
)
from tests.utils.helpers import API, assert_error_response, create_auth_headers, create_user_token


class TestApply:
    @pytest.mark.asyncio
    async def test_should_submit_pending_application(
        self, test_client, db_session, test_user, test_user_token
    ):
        response = await test_client.post(
            f"{API}/instructors/apply",
            json={"title": "재활 트레이너", "bio": "10년차", "expertise": ["재활"]},
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["user_id"] == str(test_user.id)
        assert data["approved_at"] is None

    @pytest.mark.asyncio
    async def test_should_reject_second_application(
        self, test_client, db_session, test_user, test_user_token
    ):
        create_instructor_factory(db_session, user=test_user, status=InstructorStatus.PENDING)

        response = await test_client.post(
            f"{API}/instructors/apply",
            json={"title": "다시 신청"},
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 409
        assert_error_response(response.json(), "CONFLICT")

    @pytest.mark.asyncio
    async def test_rejected_applicant_may_reapply(
        self, test_client, db_session, test_user, test_user_token
    ):
        profile = create_instructor_factory(
            db_session, user=test_user, status=InstructorStatus.REJECTED
        )

        response = await test_client.post(
            f"{API}/instructors/apply",
            json={"title": "보완 후 재신청"},
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 201
        assert response.json()["id"] == str(profile.id)
        assert response.json()["status"] == "PENDING"
        assert db_session.query(InstructorProfile).count() == 1


class TestPublicProfile:
    @pytest.mark.asyncio
    async def test_should_show_published_courses_and_stats(
        self, test_client, db_session, test_instructor
    ):
        create_course_factory(
            db_session, test_instructor, title="공개 강의", enrollment_count=4,
            review_count=2, average_rating=4.5,
        )
        create_course_factory(
            db_session, test_instructor, title="초안", status=CourseStatus.DRAFT,
            enrollment_count=100,
        )

        response = await test_client.get(f"{API}/instructors/{test_instructor.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["name"] == "이강사"
        assert "email" not in data["user"]
        assert [c["title"] for c in data["courses"]] == ["공개 강의"]
        assert data["stats"] == {
            "total_courses": 1,
            "total_students": 4,
            "average_rating": 4.5,
            "total_reviews": 2,
        }

    @pytest.mark.asyncio
    async def test_pending_profile_is_hidden(self, test_client, db_session):
        pending = create_instructor_factory(db_session, status=InstructorStatus.PENDING)

        response = await test_client.get(f"{API}/instructors/{pending.id}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_profile_is_404(self, test_client):
        response = await test_client.get(f"{API}/instructors/{uuid.uuid4()}")

        assert response.status_code == 404


class TestInstructorAccess:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        ["/instructor/dashboard", "/instructor/revenue", "/instructor/students",
         "/instructor/courses", "/instructor/analytics"],
    )
    async def test_students_are_forbidden(self, test_client, test_user_token, path):
        response = await test_client.get(
            f"{API}{path}", headers=create_auth_headers(test_user_token)
        )

        assert response.status_code == 403
        assert "detail" in response.json()

    @pytest.mark.asyncio
    async def test_pending_instructor_is_forbidden(self, test_client, db_session):
        user = create_user_factory(db_session, role=UserRole.INSTRUCTOR)
        create_instructor_factory(db_session, user=user, status=InstructorStatus.PENDING)

        response = await test_client.get(
            f"{API}/instructor/dashboard", headers=create_auth_headers(create_user_token(user))
        )

        assert response.status_code == 403


class TestDashboard:
    @pytest.mark.asyncio
    async def test_should_roll_up_courses(
        self, test_client, db_session, test_user, test_instructor, test_instructor_token
    ):
        paid = create_course_factory(
            db_session, test_instructor, title="유료", price=50000, enrollment_count=2,
            average_rating=4.0,
        )
        create_course_factory(
            db_session, test_instructor, title="무료", is_free=True, enrollment_count=10
        )
        create_enrollment_factory(db_session, test_user, paid)

        response = await test_client.get(
            f"{API}/instructor/dashboard", headers=create_auth_headers(test_instructor_token)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["stats"]["total_courses"] == 2
        assert data["stats"]["total_students"] == 13
        assert data["stats"]["average_rating"] == 4.0
        assert data["estimated_revenue"] == 150000
        assert len(data["courses"]) == 2
        assert data["recent_enrollments"][0]["student_name"] == "김수강"
        assert data["recent_enrollments"][0]["course_title"] == "유료"


class TestRevenue:
    @pytest.mark.asyncio
    async def test_should_count_only_paid_orders_on_own_courses(
        self, test_client, db_session, test_user, test_instructor, test_instructor_token
    ):
        mine = create_course_factory(db_session, test_instructor, title="내 강의", price=50000)
        other_instructor = create_instructor_factory(db_session)
        theirs = create_course_factory(db_session, other_instructor, price=70000)
        create_order_factory(db_session, test_user, mine, status=OrderStatus.PAID)
        create_order_factory(db_session, test_user, mine, status=OrderStatus.PENDING)
        create_order_factory(db_session, test_user, theirs, status=OrderStatus.PAID)

        response = await test_client.get(
            f"{API}/instructor/revenue", headers=create_auth_headers(test_instructor_token)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_revenue"] == 50000
        assert data["platform_fee"] == pytest.approx(10000.0)
        assert data["net_revenue"] == pytest.approx(40000.0)
        assert data["this_month_revenue"] == 50000
        assert data["last_30_days_revenue"] == 50000
        assert list(data["monthly_revenue"].values()) == [50000]
        assert data["courses"] == [
            {"course_id": str(mine.id), "title": "내 강의", "revenue": 50000, "count": 1,
             "average": 50000}
        ]
        assert data["orders"][0]["buyer_name"] == "김수강"


class TestStudents:
    @pytest.mark.asyncio
    async def test_should_report_progress_and_activity(
        self, test_client, db_session, test_user, test_instructor, test_instructor_token
    ):
        course = create_course_factory(db_session, test_instructor, lesson_count=4)
        create_enrollment_factory(db_session, test_user, course, completed_lessons=4)
        idle = create_user_factory(db_session)
        create_enrollment_factory(
            db_session, idle, course, enrolled_at=utcnow() - timedelta(days=30)
        )

        response = await test_client.get(
            f"{API}/instructor/students", headers=create_auth_headers(test_instructor_token)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_students"] == 2
        assert data["active_students"] == 1
        assert data["completed_students"] == 1
        assert data["average_progress"] == 50
        assert {s["progress_percentage"] for s in data["students"]} == {0, 100}


class TestAnalytics:
    @pytest.mark.asyncio
    async def test_should_report_completion_activity_and_revenue(
        self, test_client, db_session, test_user, test_instructor, test_instructor_token
    ):
        course = create_course_factory(
            db_session, test_instructor, title="실전 PT", price=50000, lesson_count=4
        )
        create_course_factory(db_session, test_instructor, title="무료 특강", is_free=True)
        create_enrollment_factory(
            db_session, test_user, course, status=EnrollmentStatus.COMPLETED, completed_lessons=4
        )
        idle = create_user_factory(db_session)
        create_enrollment_factory(
            db_session, idle, course, enrolled_at=utcnow() - timedelta(days=40)
        )
        other_course = create_course_factory(db_session, create_instructor_factory(db_session))
        create_enrollment_factory(db_session, idle, other_course, completed_lessons=0)

        response = await test_client.get(
            f"{API}/instructor/analytics", headers=create_auth_headers(test_instructor_token)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_students"] == 2
        assert data["active_students"] == 1
        assert data["completion_rate"] == 50
        assert sum(data["monthly_enrollments"].values()) == 2
        assert month_key(utcnow()) in data["monthly_enrollments"]
        assert len(data["learning_pattern"]) == 24
        assert sum(data["learning_pattern"]) == 4

        rows = {row["title"]: row for row in data["course_performance"]}
        assert set(rows) == {"실전 PT", "무료 특강"}
        assert rows["실전 PT"]["completion_rate"] == 50
        assert rows["실전 PT"]["active_students"] == 1
        assert rows["실전 PT"]["total_revenue"] == 100000
        assert rows["무료 특강"]["completion_rate"] == 0
        assert rows["무료 특강"]["total_revenue"] == 0


class TestCourseAuthoring:
    @pytest.mark.asyncio
    async def test_should_create_draft_course(
        self, test_client, test_instructor, test_instructor_token
    ):
        response = await test_client.post(
            f"{API}/instructor/courses",
            json={"title": "새 강의", "description": "설명", "price": 30000, "level": "ADVANCED"},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "DRAFT"
        assert data["level"] == "고급"
        assert data["instructor"]["profile_id"] == str(test_instructor.id)

    @pytest.mark.asyncio
    async def test_should_list_own_courses_including_drafts(
        self, test_client, db_session, test_instructor, test_instructor_token
    ):
        create_course_factory(db_session, test_instructor, status=CourseStatus.DRAFT)
        create_course_factory(db_session, create_instructor_factory(db_session))

        response = await test_client.get(
            f"{API}/instructor/courses", headers=create_auth_headers(test_instructor_token)
        )

        assert response.status_code == 200
        assert [c["status"] for c in response.json()] == ["DRAFT"]

    @pytest.mark.asyncio
    async def test_should_update_own_course(
        self, test_client, db_session, test_instructor, test_instructor_token
    ):
        course = create_course_factory(db_session, test_instructor, status=CourseStatus.DRAFT)

        response = await test_client.patch(
            f"{API}/instructor/courses/{course.id}",
            json={"title": "수정된 제목", "is_free": True},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 200
        assert response.json()["title"] == "수정된 제목"
        assert response.json()["price"] == 0
        assert response.json()["is_paid"] is False

    @pytest.mark.asyncio
    async def test_should_forbid_editing_other_instructors_course(
        self, test_client, db_session, test_instructor_token
    ):
        course = create_course_factory(db_session, create_instructor_factory(db_session))

        response = await test_client.patch(
            f"{API}/instructor/courses/{course.id}",
            json={"title": "탈취"},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 403
        assert_error_response(response.json(), "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_should_append_lesson_and_recompute_duration(
        self, test_client, db_session, test_instructor, test_instructor_token
    ):
        course = create_course_factory(db_session, test_instructor, lesson_count=2)

        response = await test_client.post(
            f"{API}/instructor/courses/{course.id}/lessons",
            json={"title": "심화 레슨", "duration": 25},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 201
        assert response.json()["order"] == 2
        db_session.refresh(course)
        assert course.duration == 45
        assert db_session.query(Lesson).filter(Lesson.course_id == course.id).count() == 3
