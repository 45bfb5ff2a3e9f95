from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.auth.models.user import UserRole, UserStatus, UserType
from app.core.datetime_utils import UTCDatetime


class UserResponse(BaseModel):
    """Account as seen by its owner (never carries the password hash)."""

    id: str
    email: str
    name: str
    nickname: str | None = None
    phone: str | None = None
    avatar: str | None = None
    introduction: str | None = None
    experience: str | None = None
    location: str | None = None
    specialties: list[str] = Field(default_factory=list)
    role: UserRole
    user_type: UserType
    status: UserStatus
    last_login_at: UTCDatetime | None = None
    created_at: UTCDatetime

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("specialties", mode="before")
    @classmethod
    def validate_specialties(cls, v: Any) -> list[str]:
        return list(v or [])

    model_config = ConfigDict(from_attributes=True)


class PublicUserResponse(BaseModel):
    """Profile visible to other users."""

    id: str
    name: str
    nickname: str | None = None
    avatar: str | None = None
    introduction: str | None = None
    experience: str | None = None
    location: str | None = None
    specialties: list[str] = Field(default_factory=list)
    role: UserRole
    user_type: UserType
    created_at: UTCDatetime

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("specialties", mode="before")
    @classmethod
    def validate_specialties(cls, v: Any) -> list[str]:
        return list(v or [])

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Compact author / instructor reference embedded in other payloads."""

    id: str
    name: str
    nickname: str | None = None
    avatar: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return str(v)

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=20)
    nickname: str | None = Field(None, min_length=2, max_length=20)
    phone: str | None = Field(None, max_length=30)
    avatar: str | None = Field(None, max_length=500)
    introduction: str | None = None
    experience: str | None = None
    location: str | None = Field(None, max_length=100)
    specialties: list[str] | None = None
    user_type: UserType | None = None
