from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.auth.schemas.user import ProfileUpdateRequest, PublicUserResponse, UserResponse
from app.auth.services.user_service import UserService
from app.db.session import get_db

router = APIRouter()


@router.get("/profile", response_model=UserResponse)
async def get_my_profile(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put("/profile", response_model=UserResponse)
async def update_my_profile(
    data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    user = UserService.update_profile(db, current_user, data)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=PublicUserResponse)
async def get_user_profile(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PublicUserResponse:
    return PublicUserResponse.model_validate(UserService.get_by_id(db, user_id))
