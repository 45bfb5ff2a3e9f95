import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.auth.dependencies import (
    get_current_user,
    get_validated_token_payload,
    subject_to_user_id,
)
from app.auth.models.user import User
from app.auth.schemas.auth import (
    LogoutRequest,
    LogoutResponse,
    RefreshRequest,
    RefreshResponse,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from app.auth.schemas.user import UserResponse
from app.auth.services.token_service import token_service
from app.auth.services.user_service import UserService
from app.core.config import settings
from app.core.rate_limit import limiter
from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


async def _issue_tokens(user: User) -> tuple[str, str]:
    access_token, refresh_token = token_service.issue_pair(user)
    try:
        await token_service.store_refresh_token(refresh_token, str(user.id))
    except Exception:
        logger.warning("redis_unavailable_during_token_store", extra={"user_id": str(user.id)})
    return access_token, refresh_token


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: SignUpRequest, db: Session = Depends(get_db)) -> TokenResponse:
    user = UserService.create(db, data)
    access_token, refresh_token = await _issue_tokens(user)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/signin", response_model=TokenResponse)
@limiter.limit(settings.SIGNIN_RATE_LIMIT)
async def signin(
    request: Request,
    credentials: SignInRequest,
    db: Session = Depends(get_db),
) -> TokenResponse:
    user = UserService.authenticate(db, credentials.email, credentials.password)
    access_token, refresh_token = await _issue_tokens(user)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(data: RefreshRequest, db: Session = Depends(get_db)) -> RefreshResponse:
    payload = get_validated_token_payload(data.refresh_token, expected_type="refresh")

    try:
        token_data = await token_service.validate_refresh_token(data.refresh_token)
    except Exception:
        logger.warning("redis_unavailable_during_token_validation")
        token_data = None
    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="만료되었거나 폐기된 토큰입니다.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = subject_to_user_id(payload)
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="사용자를 찾을 수 없습니다.",
        )

    # Rotation: the presented refresh token is single use
    try:
        await token_service.revoke_refresh_token(data.refresh_token)
    except Exception:
        logger.warning("redis_unavailable_during_revoke", extra={"user_id": str(user.id)})

    access_token, refresh_token = await _issue_tokens(user)
    return RefreshResponse(access_token=access_token, refresh_token=refresh_token)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    data: LogoutRequest | None = None,
    current_user: User = Depends(get_current_user),
) -> LogoutResponse:
    try:
        if data and data.refresh_token:
            await token_service.revoke_refresh_token(data.refresh_token)
        else:
            await token_service.revoke_all(str(current_user.id))
    except Exception:
        logger.warning("redis_unavailable_during_logout", extra={"user_id": str(current_user.id)})

    return LogoutResponse()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)
