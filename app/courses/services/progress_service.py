from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.constants import DASHBOARD_RECENT_LIMIT
from app.core.datetime_utils import utcnow
from app.core.exceptions import NotFoundError
from app.courses.models import (
    Course,
    Enrollment,
    Lesson,
    LessonProgress,
    LessonProgressStatus,
)
from app.courses.schemas.progress import (
    CourseProgressSummary,
    LessonProgressResponse,
    MyCourseItem,
    MyDashboardResponse,
    RecentLessonProgress,
)
from app.courses.services.enrollment_service import ENROLLED_STATUSES, EnrollmentService
from app.instructors.models.instructor_profile import InstructorProfile


def calculate_progress_percentage(completed: int, total: int) -> int:
    """completed/total as a whole percentage, rounding halves up; 0 without lessons."""
    if total <= 0:
        return 0
    completed = min(max(completed, 0), total)
    return (completed * 200 + total) // (2 * total)


def average_percentage(percentages: Sequence[int]) -> int:
    """Whole-number mean, halves rounded up; 0 for no rows."""
    if not percentages:
        return 0
    return (sum(percentages) * 2 + len(percentages)) // (2 * len(percentages))


def can_get_certificate(percentage: int) -> bool:
    return percentage >= settings.CERTIFICATE_ELIGIBLE_PERCENTAGE


@dataclass(frozen=True)
class EnrollmentProgress:
    total_lessons: int
    completed_lessons: int

    @property
    def percentage(self) -> int:
        return calculate_progress_percentage(self.completed_lessons, self.total_lessons)

    @property
    def can_get_certificate(self) -> bool:
        return can_get_certificate(self.percentage)


def lesson_progress_to_response(progress: LessonProgress) -> LessonProgressResponse:
    return LessonProgressResponse(
        id=str(progress.id),
        enrollment_id=str(progress.enrollment_id),
        lesson_id=str(progress.lesson_id),
        status=progress.status,
        progress_percentage=progress.progress_percentage,
        watched_seconds=progress.watched_seconds,
        completed_at=progress.completed_at,
        updated_at=progress.updated_at,
    )


class ProgressService:
    @staticmethod
    def get_enrollment_progress(
        enrollment_id: UUID, course_id: UUID, db: Session
    ) -> EnrollmentProgress:
        """Recount lessons for one enrollment; never persisted."""
        total = (
            db.scalar(
                select(func.count()).select_from(Lesson).where(Lesson.course_id == course_id)
            )
            or 0
        )
        completed = (
            db.scalar(
                select(func.count())
                .select_from(LessonProgress)
                .where(
                    LessonProgress.enrollment_id == enrollment_id,
                    LessonProgress.status == LessonProgressStatus.COMPLETED,
                )
            )
            or 0
        )
        return EnrollmentProgress(total_lessons=total, completed_lessons=completed)

    @staticmethod
    def get_progress_for_enrollments(
        enrollments: list[Enrollment], db: Session
    ) -> dict[UUID, EnrollmentProgress]:
        """Same as get_enrollment_progress for many enrollments in two grouped queries."""
        if not enrollments:
            return {}

        course_ids = {e.course_id for e in enrollments}
        lesson_totals = dict(
            db.execute(
                select(Lesson.course_id, func.count(Lesson.id))
                .where(Lesson.course_id.in_(course_ids))
                .group_by(Lesson.course_id)
            ).all()
        )
        completed_counts = dict(
            db.execute(
                select(LessonProgress.enrollment_id, func.count(LessonProgress.id))
                .where(
                    LessonProgress.enrollment_id.in_([e.id for e in enrollments]),
                    LessonProgress.status == LessonProgressStatus.COMPLETED,
                )
                .group_by(LessonProgress.enrollment_id)
            ).all()
        )
        return {
            e.id: EnrollmentProgress(
                total_lessons=lesson_totals.get(e.course_id, 0),
                completed_lessons=completed_counts.get(e.id, 0),
            )
            for e in enrollments
        }

    @staticmethod
    def update_lesson_progress(
        user_id: UUID,
        lesson_id: UUID,
        progress_percentage: int,
        watched_seconds: int,
        db: Session,
    ) -> LessonProgress:
        """Upsert the caller's progress on a lesson of a course they are enrolled in."""
        lesson = db.query(Lesson).filter(Lesson.id == lesson_id).first()
        if not lesson:
            raise NotFoundError("레슨을 찾을 수 없습니다.", resource="lesson")

        enrollment = EnrollmentService.require_enrollment(user_id, lesson.course_id, db)

        progress = (
            db.query(LessonProgress)
            .filter(
                LessonProgress.enrollment_id == enrollment.id,
                LessonProgress.lesson_id == lesson_id,
            )
            .first()
        )
        if not progress:
            progress = LessonProgress(
                enrollment_id=enrollment.id,
                lesson_id=lesson_id,
                status=LessonProgressStatus.NOT_STARTED,
                progress_percentage=0,
                watched_seconds=0,
            )
            db.add(progress)

        # A completed lesson stays completed when the player reports an earlier position
        if progress.status != LessonProgressStatus.COMPLETED:
            progress.progress_percentage = progress_percentage
            if progress_percentage >= 100:
                progress.status = LessonProgressStatus.COMPLETED
                progress.completed_at = utcnow()
            elif progress_percentage > 0:
                progress.status = LessonProgressStatus.IN_PROGRESS
        progress.watched_seconds = max(progress.watched_seconds or 0, watched_seconds)
        progress.updated_at = utcnow()
        db.flush()

        if progress.status == LessonProgressStatus.COMPLETED:
            ProgressService.check_course_completion(enrollment, db)

        db.commit()
        db.refresh(progress)
        return progress

    @staticmethod
    def mark_lesson_complete(user_id: UUID, lesson_id: UUID, db: Session) -> LessonProgress:
        return ProgressService.update_lesson_progress(user_id, lesson_id, 100, 0, db)

    @staticmethod
    def check_course_completion(enrollment: Enrollment, db: Session) -> None:
        """Move the enrollment to COMPLETED once every lesson is completed."""
        result = ProgressService.get_enrollment_progress(enrollment.id, enrollment.course_id, db)
        if result.total_lessons > 0 and result.completed_lessons >= result.total_lessons:
            EnrollmentService.mark_completed(enrollment)

    @staticmethod
    def get_course_summary(user_id: UUID, course_id: UUID, db: Session) -> CourseProgressSummary:
        enrollment = EnrollmentService.get_user_enrollment(user_id, course_id, db)
        if enrollment is None or enrollment.status not in ENROLLED_STATUSES:
            raise NotFoundError("수강 정보를 찾을 수 없습니다.", resource="enrollment")

        result = ProgressService.get_enrollment_progress(enrollment.id, course_id, db)
        records = (
            db.query(LessonProgress)
            .join(Lesson, LessonProgress.lesson_id == Lesson.id)
            .filter(LessonProgress.enrollment_id == enrollment.id)
            .order_by(Lesson.order)
            .all()
        )
        return CourseProgressSummary(
            course_id=str(course_id),
            enrollment_id=str(enrollment.id),
            total_lessons=result.total_lessons,
            completed_lessons=result.completed_lessons,
            progress_percentage=result.percentage,
            can_get_certificate=result.can_get_certificate,
            lessons=[lesson_progress_to_response(p) for p in records],
        )

    @staticmethod
    def _user_enrollments(user_id: UUID, db: Session) -> list[Enrollment]:
        return (
            db.query(Enrollment)
            .options(
                joinedload(Enrollment.course)
                .joinedload(Course.instructor)
                .joinedload(InstructorProfile.user)
            )
            .filter(Enrollment.user_id == user_id, Enrollment.status.in_(ENROLLED_STATUSES))
            .order_by(Enrollment.enrolled_at.desc())
            .all()
        )

    @staticmethod
    def get_my_courses(user_id: UUID, db: Session) -> list[MyCourseItem]:
        enrollments = ProgressService._user_enrollments(user_id, db)
        progress = ProgressService.get_progress_for_enrollments(enrollments, db)
        last_activity = {}
        if enrollments:
            last_activity = dict(
                db.execute(
                    select(LessonProgress.enrollment_id, func.max(LessonProgress.updated_at))
                    .where(LessonProgress.enrollment_id.in_([e.id for e in enrollments]))
                    .group_by(LessonProgress.enrollment_id)
                ).all()
            )

        items = []
        for enrollment in enrollments:
            course = enrollment.course
            result = progress[enrollment.id]
            items.append(
                MyCourseItem(
                    enrollment_id=str(enrollment.id),
                    course_id=str(course.id),
                    title=course.title,
                    thumbnail=course.thumbnail,
                    instructor_name=course.instructor.user.name if course.instructor else None,
                    enrollment_status=enrollment.status.value,
                    enrolled_at=enrollment.enrolled_at,
                    total_lessons=result.total_lessons,
                    completed_lessons=result.completed_lessons,
                    progress_percentage=result.percentage,
                    last_progress_at=last_activity.get(enrollment.id),
                    can_get_certificate=result.can_get_certificate,
                )
            )
        return items

    @staticmethod
    def get_dashboard(user_id: UUID, db: Session) -> MyDashboardResponse:
        enrollments = ProgressService._user_enrollments(user_id, db)
        progress = ProgressService.get_progress_for_enrollments(enrollments, db)
        percentages = [progress[e.id].percentage for e in enrollments]

        recent = (
            db.query(LessonProgress)
            .options(joinedload(LessonProgress.lesson).joinedload(Lesson.course))
            .join(Enrollment, LessonProgress.enrollment_id == Enrollment.id)
            .filter(Enrollment.user_id == user_id)
            .order_by(LessonProgress.updated_at.desc())
            .limit(DASHBOARD_RECENT_LIMIT)
            .all()
        )

        return MyDashboardResponse(
            total_enrollments=len(enrollments),
            completed_courses=sum(1 for p in percentages if p >= 100),
            average_progress=average_percentage(percentages),
            total_watch_time=sum(e.course.duration or 0 for e in enrollments),
            recent_progress=[
                RecentLessonProgress(
                    lesson_id=str(p.lesson_id),
                    lesson_title=p.lesson.title,
                    course_id=str(p.lesson.course_id),
                    course_title=p.lesson.course.title,
                    status=p.status,
                    progress_percentage=p.progress_percentage,
                    updated_at=p.updated_at,
                )
                for p in recent
            ],
        )
