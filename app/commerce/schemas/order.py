"""
Pydantic schemas for orders.
"""

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.commerce.models.order import OrderStatus
from app.core.datetime_utils import UTCDatetime


class OrderCreateRequest(BaseModel):
    course_id: uuid.UUID
    payment_method: str | None = Field(None, max_length=50)


class OrderCourseSummary(BaseModel):
    id: str
    title: str
    thumbnail: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return str(v)

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Order response schema."""

    id: str
    order_number: str
    user_id: str
    status: OrderStatus
    amount: int  # In KRW
    original_amount: int
    discount_amount: int
    payment_method: str | None = None
    paid_at: UTCDatetime | None = None
    created_at: UTCDatetime
    course: OrderCourseSummary

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def validate_ids(cls, v: Any) -> str:
        return str(v)

    model_config = ConfigDict(from_attributes=True)


class OrderCreateResponse(BaseModel):
    """Free courses enroll immediately and carry no order."""

    is_free: bool
    order: OrderResponse | None = None
    enrollment_id: str | None = None
    message: str


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus
