from typing import Any

from jose import jwt

from app.auth.models.user import User
from app.core.config import settings
from app.core.security import create_access_token

API = settings.API_V1_PREFIX


def assert_token_response_valid(data: dict[str, Any]) -> None:
    assert data["access_token"]
    assert data["refresh_token"]
    assert data["token_type"] == "bearer"
    assert_user_response_valid(data["user"])


def assert_user_response_valid(data: dict[str, Any]) -> None:
    assert "id" in data
    assert "email" in data
    assert "name" in data
    assert "role" in data
    assert "hashed_password" not in data


def assert_error_response(data: dict[str, Any], code: str) -> None:
    """Assert the {"success": false, "error": {...}} envelope of service errors."""
    assert data["success"] is False
    assert data["error"]["code"] == code
    assert data["error"]["message"]


def create_user_token(user: User) -> str:
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role.value})


def create_auth_headers(token: str) -> dict[str, str]:
    """Create Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {token}"}


def decode_jwt_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
