"""User, course and instructor management for the admin panel."""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from app.admin.schemas.admin import (
    AdminCourseListResponse,
    AdminCourseRow,
    AdminOrderListResponse,
    AdminUserListResponse,
    AdminUserRow,
    AdminUserUpdateRequest,
    InstructorApplicationListResponse,
    InstructorApplicationRow,
    UserStats,
)
from app.auth.models.user import User, UserRole
from app.auth.schemas.user import UserResponse
from app.commerce.models.order import Order, OrderStatus
from app.commerce.services.order_service import order_to_response
from app.core.datetime_utils import utcnow
from app.core.exceptions import NotFoundError, ValidationError
from app.core.schemas import Pagination, page_offset
from app.courses.models import Certificate, Course, CourseStatus, Enrollment, EnrollmentStatus
from app.courses.services.course_service import CourseService, course_to_instructor_row
from app.instructors.models.instructor_profile import InstructorProfile, InstructorStatus

logger = logging.getLogger(__name__)


class AdminService:
    @staticmethod
    def list_users(
        db: Session,
        page: int,
        limit: int,
        search: str | None = None,
        role: UserRole | None = None,
    ) -> AdminUserListResponse:
        # Correlated scalar subqueries to avoid cartesian products
        enrollments_count = (
            select(func.count(Enrollment.id))
            .where(Enrollment.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        completed_count = (
            select(func.count(Enrollment.id))
            .where(Enrollment.user_id == User.id, Enrollment.status == EnrollmentStatus.COMPLETED)
            .correlate(User)
            .scalar_subquery()
        )
        certificates_count = (
            select(func.count(Certificate.id))
            .where(Certificate.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )

        conditions = []
        if role is not None:
            conditions.append(User.role == role)
        if search:
            term = f"%{search.strip()}%"
            conditions.append(
                or_(User.name.ilike(term), User.email.ilike(term), User.nickname.ilike(term))
            )

        total = db.scalar(select(func.count()).select_from(User).where(*conditions)) or 0
        rows = db.execute(
            select(User, enrollments_count, completed_count, certificates_count)
            .where(*conditions)
            .order_by(User.created_at.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
        ).all()

        users = [
            AdminUserRow(
                **UserResponse.model_validate(user).model_dump(),
                stats=UserStats(
                    enrollments_count=enrolled or 0,
                    completed_courses_count=completed or 0,
                    certificates_count=certificates or 0,
                ),
            )
            for user, enrolled, completed, certificates in rows
        ]
        return AdminUserListResponse(
            users=users, pagination=Pagination.from_query(total, page, limit)
        )

    @staticmethod
    def update_user(
        db: Session, user_id: UUID, data: AdminUserUpdateRequest, acting_admin: User
    ) -> User:
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("사용자를 찾을 수 없습니다.", resource="user")

        if user.id == acting_admin.id and (
            (data.role is not None and data.role != UserRole.ADMIN) or data.status is not None
        ):
            raise ValidationError("본인의 권한이나 상태는 변경할 수 없습니다.", field="user_id")

        if data.role is not None:
            user.role = data.role
        if data.status is not None:
            user.status = data.status
        user.updated_at = utcnow()

        db.commit()
        db.refresh(user)
        logger.info(
            "User updated by admin",
            extra={"user_id": str(user.id), "admin_id": str(acting_admin.id)},
        )
        return user

    @staticmethod
    def list_courses(
        db: Session,
        page: int,
        limit: int,
        status: CourseStatus | None = None,
        search: str | None = None,
    ) -> AdminCourseListResponse:
        conditions = []
        if status is not None:
            conditions.append(Course.status == status)
        if search:
            conditions.append(Course.title.ilike(f"%{search.strip()}%"))

        total = db.scalar(select(func.count()).select_from(Course).where(*conditions)) or 0
        courses = (
            db.query(Course)
            .options(
                joinedload(Course.category),
                joinedload(Course.instructor).joinedload(InstructorProfile.user),
            )
            .filter(*conditions)
            .order_by(Course.created_at.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
            .all()
        )
        return AdminCourseListResponse(
            courses=[
                AdminCourseRow(
                    **course_to_instructor_row(c).model_dump(),
                    instructor_name=c.instructor.user.name if c.instructor else None,
                    category=c.category.name if c.category else None,
                )
                for c in courses
            ],
            pagination=Pagination.from_query(total, page, limit),
        )

    @staticmethod
    def set_course_status(db: Session, course_id: UUID, status: CourseStatus) -> Course:
        course = CourseService.get_course(db, course_id)
        CourseService.set_status(course, status)
        db.commit()
        db.refresh(course)
        logger.info(
            "Course status changed", extra={"course_id": str(course_id), "status": status.value}
        )
        return course

    @staticmethod
    def list_instructors(
        db: Session, page: int, limit: int, status: InstructorStatus | None = None
    ) -> InstructorApplicationListResponse:
        conditions = []
        if status is not None:
            conditions.append(InstructorProfile.status == status)

        total = (
            db.scalar(select(func.count()).select_from(InstructorProfile).where(*conditions)) or 0
        )
        profiles = (
            db.query(InstructorProfile)
            .options(joinedload(InstructorProfile.user))
            .filter(*conditions)
            .order_by(InstructorProfile.created_at.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
            .all()
        )
        return InstructorApplicationListResponse(
            instructors=[instructor_to_row(p) for p in profiles],
            pagination=Pagination.from_query(total, page, limit),
        )

    @staticmethod
    def review_instructor(
        db: Session, profile_id: UUID, status: InstructorStatus
    ) -> InstructorProfile:
        """Approve or reject an application; approval promotes the user to INSTRUCTOR."""
        profile = (
            db.query(InstructorProfile)
            .options(joinedload(InstructorProfile.user))
            .filter(InstructorProfile.id == profile_id)
            .first()
        )
        if profile is None:
            raise NotFoundError("강사 정보를 찾을 수 없습니다.", resource="instructor")
        if status == InstructorStatus.PENDING:
            raise ValidationError("승인 또는 거절만 선택할 수 있습니다.", field="status")

        profile.status = status
        if status == InstructorStatus.APPROVED:
            profile.approved_at = utcnow()
            if profile.user.role == UserRole.STUDENT:
                profile.user.role = UserRole.INSTRUCTOR
        else:
            profile.approved_at = None
            if profile.user.role == UserRole.INSTRUCTOR:
                profile.user.role = UserRole.STUDENT

        db.commit()
        db.refresh(profile)
        logger.info(
            "Instructor reviewed", extra={"profile_id": str(profile_id), "status": status.value}
        )
        return profile

    @staticmethod
    def list_orders(
        db: Session, page: int, limit: int, status: OrderStatus | None = None
    ) -> AdminOrderListResponse:
        conditions = []
        if status is not None:
            conditions.append(Order.status == status)

        total = db.scalar(select(func.count()).select_from(Order).where(*conditions)) or 0
        orders = (
            db.query(Order)
            .options(joinedload(Order.course))
            .filter(*conditions)
            .order_by(Order.created_at.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
            .all()
        )
        return AdminOrderListResponse(
            orders=[order_to_response(o) for o in orders],
            pagination=Pagination.from_query(total, page, limit),
        )


def instructor_to_row(profile: InstructorProfile) -> InstructorApplicationRow:
    return InstructorApplicationRow(
        id=profile.id,
        user_id=profile.user_id,
        name=profile.user.name,
        email=profile.user.email,
        title=profile.title,
        bio=profile.bio,
        expertise=list(profile.expertise or []),
        status=profile.status,
        approved_at=profile.approved_at,
        created_at=profile.created_at,
    )