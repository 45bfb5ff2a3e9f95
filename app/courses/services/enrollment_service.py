import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.datetime_utils import utcnow
from app.core.exceptions import ConflictError, ForbiddenError
from app.courses.models import Course, Enrollment, EnrollmentStatus
from app.notifications.models.notification import NotificationType
from app.notifications.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# Statuses that grant access to course content
ENROLLED_STATUSES = (EnrollmentStatus.ACTIVE, EnrollmentStatus.COMPLETED)


class EnrollmentService:
    @staticmethod
    def get_user_enrollment(user_id: UUID, course_id: UUID, db: Session) -> Enrollment | None:
        """Get user's enrollment for a specific course, whatever its status."""
        return (
            db.query(Enrollment)
            .filter(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
            .first()
        )

    @staticmethod
    def is_enrolled(user_id: UUID, course_id: UUID, db: Session) -> bool:
        enrollment = EnrollmentService.get_user_enrollment(user_id, course_id, db)
        return enrollment is not None and enrollment.status in ENROLLED_STATUSES

    @staticmethod
    def require_enrollment(user_id: UUID, course_id: UUID, db: Session) -> Enrollment:
        enrollment = EnrollmentService.get_user_enrollment(user_id, course_id, db)
        if enrollment is None or enrollment.status not in ENROLLED_STATUSES:
            raise ForbiddenError("수강 중인 강의가 아닙니다.")
        return enrollment

    @staticmethod
    def enroll_user(user_id: UUID, course: Course, db: Session, commit: bool = True) -> Enrollment:
        """Enroll a user in a course and bump the course's enrollment counter.

        A cancelled enrollment is reactivated instead of inserting a second row.
        """
        enrollment = EnrollmentService.get_user_enrollment(user_id, course.id, db)
        if enrollment is not None and enrollment.status in ENROLLED_STATUSES:
            raise ConflictError("이미 수강 중인 강의입니다.", resource="enrollment")

        if enrollment is None:
            enrollment = Enrollment(user_id=user_id, course_id=course.id)
            db.add(enrollment)
        else:
            enrollment.status = EnrollmentStatus.ACTIVE
            enrollment.enrolled_at = utcnow()
            enrollment.completed_at = None

        course.enrollment_count = Course.enrollment_count + 1

        NotificationService.create(
            user_id,
            NotificationType.ENROLLMENT_SUCCESS,
            "수강 등록이 완료되었습니다",
            f"{course.title} 수강 등록이 완료되었습니다. 지금 바로 학습을 시작해보세요!",
            db,
            data={"course_id": str(course.id), "course_title": course.title},
            commit=False,
        )

        if commit:
            db.commit()
            db.refresh(enrollment)
        else:
            db.flush()
        logger.info(
            "User enrolled", extra={"user_id": str(user_id), "course_id": str(course.id)}
        )
        return enrollment

    @staticmethod
    def mark_completed(enrollment: Enrollment) -> None:
        if enrollment.status != EnrollmentStatus.COMPLETED:
            enrollment.status = EnrollmentStatus.COMPLETED
            enrollment.completed_at = utcnow()
