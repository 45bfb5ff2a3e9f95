from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.courses.schemas.review import (
    ReviewCreateRequest,
    ReviewListResponse,
    ReviewResponse,
    ReviewSort,
    ReviewUpdateRequest,
)
from app.courses.services.review_service import ReviewService, review_to_response
from app.db.session import get_db

router = APIRouter()


@router.get("/courses/{course_id}/reviews", response_model=ReviewListResponse)
async def list_reviews(
    course_id: UUID,
    rating: int | None = Query(None, ge=1, le=5),
    sort: ReviewSort = Query("latest"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
) -> ReviewListResponse:
    return ReviewService.list_reviews(course_id, page, limit, db, rating=rating, sort=sort)


@router.post(
    "/courses/{course_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    course_id: UUID,
    data: ReviewCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReviewResponse:
    review = ReviewService.create_review(current_user, course_id, data, db)
    return review_to_response(review)


@router.patch("/reviews/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: UUID,
    data: ReviewUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReviewResponse:
    return review_to_response(ReviewService.update_review(current_user, review_id, data, db))


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    ReviewService.delete_review(current_user, review_id, db)
