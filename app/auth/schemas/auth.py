from pydantic import BaseModel, EmailStr, Field

from app.auth.models.user import UserType
from app.auth.schemas.user import UserResponse


class SignUpRequest(BaseModel):
    """Signup request schema"""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=50)
    name: str = Field(..., min_length=2, max_length=20)
    user_type: UserType = UserType.TRAINER
    nickname: str | None = Field(None, min_length=2, max_length=20)
    phone: str | None = Field(None, max_length=30)


class SignInRequest(BaseModel):
    """Signin request schema"""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """
    Token response returned after signup / signin.
    Contains both access and refresh tokens plus user data.
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


class RefreshRequest(BaseModel):
    refresh_token: str


class RefreshResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LogoutRequest(BaseModel):
    refresh_token: str | None = None


class LogoutResponse(BaseModel):
    message: str = "로그아웃되었습니다."
