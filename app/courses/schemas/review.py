from typing import Literal

from pydantic import BaseModel, Field

from app.auth.schemas.user import UserSummary
from app.core.datetime_utils import UTCDatetime
from app.core.schemas import Pagination

ReviewSort = Literal["latest", "rating_high", "rating_low"]


class ReviewCreateRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    content: str | None = Field(None, max_length=2000)


class ReviewUpdateRequest(BaseModel):
    rating: int | None = Field(None, ge=1, le=5)
    content: str | None = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    id: str
    course_id: str
    rating: int
    content: str | None = None
    user: UserSummary
    created_at: UTCDatetime
    updated_at: UTCDatetime


class RatingBucket(BaseModel):
    rating: int
    count: int
    percentage: float


class ReviewStats(BaseModel):
    average_rating: float
    total_reviews: int
    distribution: list[RatingBucket]


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]
    stats: ReviewStats
    pagination: Pagination
