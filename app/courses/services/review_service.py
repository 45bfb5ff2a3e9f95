import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from app.auth.models.user import User
from app.auth.schemas.user import UserSummary
from app.core.constants import REVIEW_MIN_PROGRESS
from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.core.schemas import Pagination
from app.courses.models import Course, EnrollmentStatus, Review
from app.courses.schemas.review import (
    RatingBucket,
    ReviewCreateRequest,
    ReviewListResponse,
    ReviewResponse,
    ReviewSort,
    ReviewStats,
    ReviewUpdateRequest,
)
from app.courses.services.enrollment_service import EnrollmentService
from app.courses.services.progress_service import ProgressService

logger = logging.getLogger(__name__)


def average_rating(ratings: list[int]) -> float:
    """Mean rating rounded half-up to one decimal; 0.0 without ratings."""
    if not ratings:
        return 0.0
    n = len(ratings)
    return ((sum(ratings) * 20 + n) // (2 * n)) / 10


def summarize_ratings(ratings: list[int]) -> ReviewStats:
    total = len(ratings)
    distribution = []
    for rating in (5, 4, 3, 2, 1):
        count = sum(1 for r in ratings if r == rating)
        percentage = round(count / total * 100, 1) if total else 0.0
        distribution.append(RatingBucket(rating=rating, count=count, percentage=percentage))
    return ReviewStats(
        average_rating=average_rating(ratings), total_reviews=total, distribution=distribution
    )


def review_to_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=str(review.id),
        course_id=str(review.course_id),
        rating=review.rating,
        content=review.content,
        user=UserSummary.model_validate(review.user),
        created_at=review.created_at,
        updated_at=review.updated_at,
    )


SORT_ORDER = {
    "latest": (Review.created_at.desc(),),
    "rating_high": (Review.rating.desc(), Review.created_at.desc()),
    "rating_low": (Review.rating.asc(), Review.created_at.desc()),
}


class ReviewService:
    @staticmethod
    def _course(course_id: UUID, db: Session) -> Course:
        course = db.get(Course, course_id)
        if course is None:
            raise NotFoundError("강의를 찾을 수 없습니다.", resource="course")
        return course

    @staticmethod
    def refresh_course_rating(course: Course, db: Session) -> None:
        """Recompute the denormalized average_rating and review_count of a course."""
        db.flush()
        ratings = list(db.scalars(select(Review.rating).where(Review.course_id == course.id)))
        course.average_rating = average_rating(ratings)
        course.review_count = len(ratings)

    @staticmethod
    def list_reviews(
        course_id: UUID,
        page: int,
        limit: int,
        db: Session,
        rating: int | None = None,
        sort: ReviewSort = "latest",
    ) -> ReviewListResponse:
        ReviewService._course(course_id, db)

        all_ratings = list(db.scalars(select(Review.rating).where(Review.course_id == course_id)))

        conditions = [Review.course_id == course_id]
        if rating is not None:
            conditions.append(Review.rating == rating)

        total = db.scalar(select(func.count()).select_from(Review).where(*conditions)) or 0
        reviews = (
            db.query(Review)
            .options(joinedload(Review.user))
            .filter(*conditions)
            .order_by(*SORT_ORDER[sort])
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return ReviewListResponse(
            reviews=[review_to_response(r) for r in reviews],
            stats=summarize_ratings(all_ratings),
            pagination=Pagination.from_query(total, page, limit),
        )

    @staticmethod
    def create_review(
        user: User, course_id: UUID, data: ReviewCreateRequest, db: Session
    ) -> Review:
        course = ReviewService._course(course_id, db)
        enrollment = EnrollmentService.require_enrollment(user.id, course_id, db)

        if enrollment.status != EnrollmentStatus.COMPLETED:
            result = ProgressService.get_enrollment_progress(enrollment.id, course_id, db)
            if result.percentage < REVIEW_MIN_PROGRESS:
                raise ForbiddenError(
                    f"진도율 {REVIEW_MIN_PROGRESS}% 이상부터 리뷰를 작성할 수 있습니다."
                )

        existing = (
            db.query(Review)
            .filter(Review.user_id == user.id, Review.course_id == course_id)
            .first()
        )
        if existing:
            raise ConflictError("이미 리뷰를 작성한 강의입니다.", resource="review")

        review = Review(
            user_id=user.id, course_id=course_id, rating=data.rating, content=data.content
        )
        db.add(review)
        ReviewService.refresh_course_rating(course, db)
        db.commit()
        db.refresh(review)
        logger.info("Review created", extra={"course_id": str(course_id), "rating": data.rating})
        return review

    @staticmethod
    def _own_review(user: User, review_id: UUID, db: Session) -> Review:
        review = (
            db.query(Review)
            .options(joinedload(Review.user))
            .filter(Review.id == review_id)
            .first()
        )
        if review is None:
            raise NotFoundError("리뷰를 찾을 수 없습니다.", resource="review")
        if review.user_id != user.id and not user.is_admin:
            raise ForbiddenError("본인의 리뷰만 수정할 수 있습니다.")
        return review

    @staticmethod
    def update_review(
        user: User, review_id: UUID, data: ReviewUpdateRequest, db: Session
    ) -> Review:
        review = ReviewService._own_review(user, review_id, db)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None or field == "content":
                setattr(review, field, value)
        ReviewService.refresh_course_rating(review.course, db)
        db.commit()
        db.refresh(review)
        return review

    @staticmethod
    def delete_review(user: User, review_id: UUID, db: Session) -> None:
        review = ReviewService._own_review(user, review_id, db)
        course = review.course
        db.delete(review)
        ReviewService.refresh_course_rating(course, db)
        db.commit()
