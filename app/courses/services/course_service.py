import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload, selectinload

from app.auth.models.user import User, UserType
from app.core.constants import DEFAULT_RAIL_LIMIT, RECOMMENDED_CATEGORIES
from app.core.datetime_utils import utcnow
from app.core.exceptions import ForbiddenError, NotFoundError
from app.core.schemas import Pagination
from app.courses.models.course import Category, Course, CourseStatus, Lesson
from app.courses.schemas.course import (
    CategoryResponse,
    CourseCounts,
    CourseCreateRequest,
    CourseDetailResponse,
    CourseInstructorDetail,
    CourseInstructorSummary,
    CourseListItem,
    CourseListResponse,
    CourseUpdateRequest,
    InstructorCourseResponse,
    LessonCreateRequest,
    LessonResponse,
)
from app.courses.services.course_query import (
    CourseFilters,
    build_course_conditions,
    level_label,
)
from app.instructors.models.instructor_profile import InstructorProfile

logger = logging.getLogger(__name__)

# Eager loads shared by every catalog card query
CARD_OPTIONS = (
    joinedload(Course.category),
    joinedload(Course.instructor).joinedload(InstructorProfile.user),
)


def course_to_list_item(course: Course) -> CourseListItem:
    user = course.instructor.user
    return CourseListItem(
        id=str(course.id),
        title=course.title,
        description=course.description,
        thumbnail=course.thumbnail,
        category=course.category.name if course.category else None,
        level=level_label(course.level),
        duration=course.duration or 0,
        price=course.price,
        is_paid=course.is_paid,
        rating=course.average_rating or 0.0,
        instructor=CourseInstructorSummary(id=str(user.id), name=user.name, avatar=user.avatar),
        counts=CourseCounts(enrollments=course.enrollment_count, reviews=course.review_count),
    )


def course_to_instructor_row(course: Course) -> InstructorCourseResponse:
    return InstructorCourseResponse(
        id=str(course.id),
        title=course.title,
        thumbnail=course.thumbnail,
        status=course.status,
        level=level_label(course.level),
        price=course.price,
        is_free=course.is_free,
        is_paid=course.is_paid,
        average_rating=course.average_rating or 0.0,
        review_count=course.review_count,
        enrollment_count=course.enrollment_count,
        created_at=course.created_at,
    )


def course_to_detail(course: Course) -> CourseDetailResponse:
    profile = course.instructor
    user = profile.user
    return CourseDetailResponse(
        id=str(course.id),
        title=course.title,
        description=course.description,
        thumbnail=course.thumbnail,
        category=CategoryResponse.model_validate(course.category) if course.category else None,
        level=level_label(course.level),
        status=course.status,
        duration=course.duration or 0,
        price=course.price,
        original_price=course.original_price,
        is_free=course.is_free,
        is_paid=course.is_paid,
        average_rating=course.average_rating or 0.0,
        instructor=CourseInstructorDetail(
            id=str(user.id),
            profile_id=str(profile.id),
            name=user.name,
            avatar=user.avatar,
            title=profile.title,
            bio=profile.bio,
            expertise=list(profile.expertise or []),
            achievements=list(profile.achievements or []),
        ),
        lessons=[LessonResponse.model_validate(lesson) for lesson in course.lessons],
        counts=CourseCounts(enrollments=course.enrollment_count, reviews=course.review_count),
        created_at=course.created_at,
    )


class CourseService:
    @staticmethod
    def list_courses(db: Session, filters: CourseFilters) -> CourseListResponse:
        conditions = build_course_conditions(filters)

        total = db.scalar(select(func.count()).select_from(Course).where(*conditions)) or 0
        courses = (
            db.execute(
                select(Course)
                .where(*conditions)
                .options(*CARD_OPTIONS)
                .order_by(Course.created_at.desc())
                .offset(filters.skip)
                .limit(filters.limit)
            )
            .unique()
            .scalars()
            .all()
        )

        return CourseListResponse(
            courses=[course_to_list_item(c) for c in courses],
            pagination=Pagination.from_query(total, filters.page, filters.limit),
        )

    @staticmethod
    def popular(db: Session, limit: int = DEFAULT_RAIL_LIMIT) -> list[CourseListItem]:
        courses = (
            db.query(Course)
            .options(*CARD_OPTIONS)
            .filter(Course.status == CourseStatus.PUBLISHED)
            .order_by(Course.enrollment_count.desc(), Course.created_at.desc())
            .limit(limit)
            .all()
        )
        return [course_to_list_item(c) for c in courses]

    @staticmethod
    def recommended(
        db: Session, user_type: str, limit: int = DEFAULT_RAIL_LIMIT
    ) -> list[CourseListItem]:
        categories = RECOMMENDED_CATEGORIES.get(
            user_type.upper(), RECOMMENDED_CATEGORIES[UserType.TRAINER.value]
        )
        courses = (
            db.query(Course)
            .options(*CARD_OPTIONS)
            .filter(
                Course.status == CourseStatus.PUBLISHED,
                Course.category.has(Category.name.in_(categories)),
            )
            .order_by(Course.average_rating.desc(), Course.created_at.desc())
            .limit(limit)
            .all()
        )
        return [course_to_list_item(c) for c in courses]

    @staticmethod
    def get_course(db: Session, course_id: UUID) -> Course:
        course = (
            db.query(Course)
            .options(*CARD_OPTIONS, selectinload(Course.lessons))
            .filter(Course.id == course_id)
            .first()
        )
        if course is None:
            raise NotFoundError("강의를 찾을 수 없습니다.", resource="course")
        return course

    @staticmethod
    def get_published_course(db: Session, course_id: UUID) -> Course:
        course = CourseService.get_course(db, course_id)
        if course.status != CourseStatus.PUBLISHED:
            raise NotFoundError("강의를 찾을 수 없습니다.", resource="course")
        return course

    @staticmethod
    def _ensure_category(db: Session, category_id: UUID | None) -> None:
        if category_id is not None and db.get(Category, category_id) is None:
            raise NotFoundError("카테고리를 찾을 수 없습니다.", resource="category")

    @staticmethod
    def create_course(
        db: Session, instructor: InstructorProfile, data: CourseCreateRequest
    ) -> Course:
        CourseService._ensure_category(db, data.category_id)
        course = Course(
            title=data.title,
            description=data.description,
            thumbnail=data.thumbnail,
            category_id=data.category_id,
            instructor_id=instructor.id,
            level=data.level,
            price=0 if data.is_free else data.price,
            original_price=data.original_price,
            is_free=data.is_free,
            status=CourseStatus.DRAFT,
        )
        db.add(course)
        db.commit()
        db.refresh(course)
        logger.info("Course created", extra={"course_id": str(course.id)})
        return course

    @staticmethod
    def get_editable_course(db: Session, course_id: UUID, user: User) -> Course:
        """Course the caller may edit: the owning instructor or an admin."""
        course = CourseService.get_course(db, course_id)
        if not user.is_admin and course.instructor.user_id != user.id:
            raise ForbiddenError("본인의 강의만 수정할 수 있습니다.")
        return course

    @staticmethod
    def update_course(db: Session, course: Course, data: CourseUpdateRequest) -> Course:
        changes = data.model_dump(exclude_unset=True)
        if "category_id" in changes:
            CourseService._ensure_category(db, changes["category_id"])

        new_status = changes.pop("status", None)
        for field, value in changes.items():
            setattr(course, field, value)
        if course.is_free:
            course.price = 0
        if new_status is not None:
            CourseService.set_status(course, new_status)

        db.commit()
        db.refresh(course)
        return course

    @staticmethod
    def set_status(course: Course, status: CourseStatus) -> None:
        """No guard on the prior state; publishing stamps published_at once."""
        course.status = status
        if status == CourseStatus.PUBLISHED and course.published_at is None:
            course.published_at = utcnow()

    @staticmethod
    def add_lesson(db: Session, course: Course, data: LessonCreateRequest) -> Lesson:
        order = data.order
        if order is None:
            current_max = db.scalar(
                select(func.max(Lesson.order)).where(Lesson.course_id == course.id)
            )
            order = 0 if current_max is None else current_max + 1

        lesson = Lesson(
            course_id=course.id,
            title=data.title,
            description=data.description,
            video_url=data.video_url,
            duration=data.duration,
            order=order,
            is_preview=data.is_preview,
        )
        db.add(lesson)
        db.flush()

        course.duration = (
            db.scalar(
                select(func.coalesce(func.sum(Lesson.duration), 0)).where(
                    Lesson.course_id == course.id
                )
            )
            or 0
        )
        db.commit()
        db.refresh(lesson)
        return lesson
