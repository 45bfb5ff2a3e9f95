import uuid

from pydantic import BaseModel

from app.core.datetime_utils import UTCDatetime
from app.courses.schemas.course import CourseListItem


class CartAddRequest(BaseModel):
    course_id: uuid.UUID


class CartItemResponse(BaseModel):
    id: str
    course: CourseListItem
    added_at: UTCDatetime


class CartSummary(BaseModel):
    item_count: int
    total_amount: int  # In KRW


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    summary: CartSummary


class CartClearResponse(BaseModel):
    deleted: int
