from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.datetime_utils import UTCDatetime
from app.core.schemas import Pagination


class NotificationResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    read_at: UTCDatetime | None = None
    created_at: UTCDatetime

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("data", mode="before")
    @classmethod
    def validate_data(cls, v: Any) -> dict[str, Any]:
        return dict(v or {})

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread_count: int
    pagination: Pagination


class NotificationCreateRequest(BaseModel):
    target_user_id: str | None = None
    type: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int
