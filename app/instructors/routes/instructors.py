from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.db.session import get_db
from app.instructors.schemas.instructor import (
    InstructorApplicationResponse,
    InstructorApplyRequest,
    InstructorProfileResponse,
)
from app.instructors.services.instructor_service import InstructorService

router = APIRouter()


@router.post(
    "/instructors/apply",
    response_model=InstructorApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply_as_instructor(
    data: InstructorApplyRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InstructorApplicationResponse:
    """Submit an instructor application for admin review."""
    profile = InstructorService.apply(current_user, data, db)
    return InstructorApplicationResponse.model_validate(profile)


@router.get("/instructors/{instructor_id}", response_model=InstructorProfileResponse)
async def get_instructor(
    instructor_id: UUID,
    db: Session = Depends(get_db),
) -> InstructorProfileResponse:
    """Public instructor profile; instructor_id is the profile id."""
    return InstructorService.get_public_profile(instructor_id, db)
