import logging
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.auth.models.user import User, UserRole
from app.core import security
from app.db.session import get_db
from app.instructors.models.instructor_profile import InstructorProfile, InstructorStatus

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

CREDENTIALS_ERROR = "인증 정보를 확인할 수 없습니다."


def _unauthorized(detail: str = CREDENTIALS_ERROR) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Extract the access token from the Authorization header"""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("인증이 필요합니다.")
    return credentials.credentials


def get_validated_token_payload(token: str, expected_type: str = "access") -> dict[str, Any]:
    """Decode a JWT and check its type claim"""
    payload = security.decode_token(token)

    if payload is None:
        raise _unauthorized()

    if payload.get("type") != expected_type:
        raise _unauthorized(f"잘못된 토큰 유형입니다. ({expected_type} 필요)")

    return payload


def subject_to_user_id(payload: dict[str, Any]) -> uuid.UUID:
    try:
        return uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise _unauthorized() from None


async def get_current_user(
    access_token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    """Get current authenticated user from access token"""
    payload = get_validated_token_payload(access_token, expected_type="access")
    user_id = subject_to_user_id(payload)

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _unauthorized("사용자를 찾을 수 없습니다.")

    if not user.is_active:
        raise _unauthorized("비활성화된 계정입니다.")

    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="관리자 권한이 필요합니다.",
        )
    return current_user


def _approved_profile(db: Session, user: User) -> InstructorProfile | None:
    return (
        db.query(InstructorProfile)
        .filter(
            InstructorProfile.user_id == user.id,
            InstructorProfile.status == InstructorStatus.APPROVED,
        )
        .first()
    )


async def require_instructor(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """Approved instructors and admins"""
    if current_user.role == UserRole.ADMIN:
        return current_user
    if current_user.role != UserRole.INSTRUCTOR or _approved_profile(db, current_user) is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="강사 권한이 필요합니다.",
        )
    return current_user


async def get_current_instructor(
    current_user: User = Depends(require_instructor),
    db: Session = Depends(get_db),
) -> InstructorProfile:
    """Approved instructor profile of the caller, for the instructor dashboards"""
    profile = _approved_profile(db, current_user)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="승인된 강사 프로필이 없습니다.",
        )
    return profile


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User | None:
    """Current user when a valid access token is sent, otherwise None"""
    if credentials is None or not credentials.credentials:
        return None
    payload = security.decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        return None
    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        return None
    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        return None
    return user
