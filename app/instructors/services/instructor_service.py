import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from app.auth.models.user import User
from app.auth.schemas.user import UserSummary
from app.commerce.models.order import Order, OrderStatus
from app.commerce.schemas.revenue import RevenueSummary
from app.commerce.services.revenue import PaidOrder, estimate_course_revenue, summarize_orders
from app.core.constants import DASHBOARD_RECENT_LIMIT
from app.core.exceptions import ConflictError, NotFoundError
from app.courses.models import Course, CourseStatus, Enrollment, LessonProgress
from app.courses.services.course_query import level_label
from app.courses.services.course_service import course_to_instructor_row
from app.courses.services.progress_service import ProgressService, average_percentage
from app.instructors.models.instructor_profile import InstructorProfile, InstructorStatus
from app.instructors.schemas.instructor import (
    InstructorAnalyticsResponse,
    InstructorApplyRequest,
    InstructorCourseCard,
    InstructorDashboardResponse,
    InstructorProfileResponse,
    InstructorStudentsResponse,
    InstructorUserInfo,
    RecentEnrollment,
    StudentProgress,
)
from app.instructors.services.stats import (
    build_analytics,
    count_active,
    roll_up_courses,
    window_start,
)

logger = logging.getLogger(__name__)


def course_to_card(course: Course) -> InstructorCourseCard:
    return InstructorCourseCard(
        id=str(course.id),
        title=course.title,
        thumbnail=course.thumbnail,
        price=course.price,
        is_paid=course.is_paid,
        level=level_label(course.level),
        enrollment_count=course.enrollment_count,
        average_rating=course.average_rating or 0.0,
    )


class InstructorService:
    @staticmethod
    def get_public_profile(profile_id: UUID, db: Session) -> InstructorProfileResponse:
        """Approved instructor with stats rolled up over their published courses."""
        profile = (
            db.query(InstructorProfile)
            .options(joinedload(InstructorProfile.user))
            .filter(
                InstructorProfile.id == profile_id,
                InstructorProfile.status == InstructorStatus.APPROVED,
            )
            .first()
        )
        if profile is None:
            raise NotFoundError("강사를 찾을 수 없습니다.", resource="instructor")

        courses = (
            db.query(Course)
            .filter(Course.instructor_id == profile.id, Course.status == CourseStatus.PUBLISHED)
            .order_by(Course.created_at.desc())
            .all()
        )
        return InstructorProfileResponse(
            id=str(profile.id),
            user=InstructorUserInfo.model_validate(profile.user),
            title=profile.title,
            bio=profile.bio,
            expertise=list(profile.expertise or []),
            achievements=list(profile.achievements or []),
            educations=list(profile.educations or []),
            stats=roll_up_courses(courses),
            courses=[course_to_card(c) for c in courses],
        )

    @staticmethod
    def apply(user: User, data: InstructorApplyRequest, db: Session) -> InstructorProfile:
        """Submit an instructor application; a rejected one may be resubmitted."""
        profile = db.query(InstructorProfile).filter(InstructorProfile.user_id == user.id).first()
        if profile is not None and profile.status != InstructorStatus.REJECTED:
            raise ConflictError("이미 강사 신청을 하셨습니다.", resource="instructor_profile")

        if profile is None:
            profile = InstructorProfile(user_id=user.id)
            db.add(profile)
        for field, value in data.model_dump().items():
            setattr(profile, field, value)
        profile.status = InstructorStatus.PENDING
        profile.approved_at = None

        db.commit()
        db.refresh(profile)
        logger.info("Instructor application submitted", extra={"user_id": str(user.id)})
        return profile

    @staticmethod
    def list_courses(profile: InstructorProfile, db: Session) -> list[Course]:
        return (
            db.query(Course)
            .filter(Course.instructor_id == profile.id)
            .order_by(Course.created_at.desc())
            .all()
        )

    @staticmethod
    def get_dashboard(profile: InstructorProfile, db: Session) -> InstructorDashboardResponse:
        courses = InstructorService.list_courses(profile, db)

        recent = (
            db.query(Enrollment)
            .options(joinedload(Enrollment.user), joinedload(Enrollment.course))
            .join(Course, Enrollment.course_id == Course.id)
            .filter(Course.instructor_id == profile.id)
            .order_by(Enrollment.enrolled_at.desc())
            .limit(DASHBOARD_RECENT_LIMIT)
            .all()
        )

        return InstructorDashboardResponse(
            stats=roll_up_courses(courses),
            estimated_revenue=estimate_course_revenue(courses),
            courses=[course_to_instructor_row(c) for c in courses],
            recent_enrollments=[
                RecentEnrollment(
                    enrollment_id=str(e.id),
                    student_name=e.user.name,
                    student_email=e.user.email,
                    course_id=str(e.course_id),
                    course_title=e.course.title,
                    enrolled_at=e.enrolled_at,
                )
                for e in recent
            ],
        )

    @staticmethod
    def get_revenue(profile: InstructorProfile, db: Session) -> RevenueSummary:
        """Revenue from PAID orders on the instructor's courses, newest first."""
        orders = (
            db.query(Order)
            .options(joinedload(Order.course), joinedload(Order.user))
            .join(Course, Order.course_id == Course.id)
            .filter(Course.instructor_id == profile.id, Order.status == OrderStatus.PAID)
            .order_by(Order.created_at.desc())
            .all()
        )
        return summarize_orders([PaidOrder.from_model(o) for o in orders])

    @staticmethod
    def _enrollments(profile: InstructorProfile, db: Session) -> list[Enrollment]:
        return (
            db.query(Enrollment)
            .options(joinedload(Enrollment.user), joinedload(Enrollment.course))
            .join(Course, Enrollment.course_id == Course.id)
            .filter(Course.instructor_id == profile.id)
            .order_by(Enrollment.enrolled_at.desc())
            .all()
        )

    @staticmethod
    def _last_activity(enrollments: list[Enrollment], db: Session) -> dict[UUID, datetime]:
        """Latest lesson progress update per enrollment; enrollments without any are absent."""
        if not enrollments:
            return {}
        return dict(
            db.execute(
                select(LessonProgress.enrollment_id, func.max(LessonProgress.updated_at))
                .where(LessonProgress.enrollment_id.in_([e.id for e in enrollments]))
                .group_by(LessonProgress.enrollment_id)
            ).all()
        )

    @staticmethod
    def get_students(profile: InstructorProfile, db: Session) -> InstructorStudentsResponse:
        enrollments = InstructorService._enrollments(profile, db)
        progress = ProgressService.get_progress_for_enrollments(enrollments, db)
        last_activity = InstructorService._last_activity(enrollments, db)

        students = []
        for enrollment in enrollments:
            result = progress[enrollment.id]
            students.append(
                StudentProgress(
                    enrollment_id=str(enrollment.id),
                    student=UserSummary.model_validate(enrollment.user),
                    email=enrollment.user.email,
                    course_id=str(enrollment.course_id),
                    course_title=enrollment.course.title,
                    status=enrollment.status,
                    enrolled_at=enrollment.enrolled_at,
                    total_lessons=result.total_lessons,
                    completed_lessons=result.completed_lessons,
                    progress_percentage=result.percentage,
                    last_activity_at=last_activity.get(enrollment.id) or enrollment.enrolled_at,
                )
            )

        return InstructorStudentsResponse(
            total_students=len({e.user_id for e in enrollments}),
            active_students=count_active(students),
            completed_students=sum(1 for s in students if s.progress_percentage >= 100),
            average_progress=average_percentage([s.progress_percentage for s in students]),
            students=students,
        )

    @staticmethod
    def get_analytics(
        profile: InstructorProfile, db: Session, now: datetime | None = None
    ) -> InstructorAnalyticsResponse:
        """Completion, activity and revenue analytics over every course of the instructor."""
        courses = InstructorService.list_courses(profile, db)
        enrollments = InstructorService._enrollments(profile, db)

        progress_updates: list[datetime] = []
        if enrollments:
            progress_updates = list(
                db.scalars(
                    select(LessonProgress.updated_at).where(
                        LessonProgress.enrollment_id.in_([e.id for e in enrollments]),
                        LessonProgress.updated_at >= window_start(now),
                    )
                )
            )

        return build_analytics(
            courses,
            enrollments,
            InstructorService._last_activity(enrollments, db),
            progress_updates,
            now=now,
        )
