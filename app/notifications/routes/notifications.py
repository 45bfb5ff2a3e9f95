import uuid
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.core.constants import DEFAULT_PAGE_SIZE, MAX_NOTIFICATION_PAGE_SIZE
from app.core.schemas import Pagination
from app.db.session import get_db
from app.notifications.schemas.notification import (
    MarkAllReadResponse,
    NotificationCreateRequest,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from app.notifications.services.notification_service import NotificationService

router = APIRouter()


@router.get("/notifications", response_model=NotificationListResponse)
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationListResponse:
    """List the current user's notifications, newest first."""
    limit = min(limit, MAX_NOTIFICATION_PAGE_SIZE)
    items, total = NotificationService.list_for_user(current_user.id, page, limit, db)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in items],
        unread_count=NotificationService.unread_count(current_user.id, db),
        pagination=Pagination.from_query(total, page, limit),
    )


@router.get("/notifications/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=NotificationService.unread_count(current_user.id, db))


@router.post(
    "/notifications",
    response_model=NotificationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_notification(
    data: NotificationCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationResponse:
    """Create a notification for yourself; admins may target any user."""
    target_id = current_user.id
    if data.target_user_id and data.target_user_id != str(current_user.id):
        if not current_user.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="다른 사용자에게 알림을 보낼 권한이 없습니다.",
            )
        try:
            target_id = uuid.UUID(data.target_user_id)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="잘못된 사용자 ID입니다."
            ) from None
        if db.get(User, target_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="사용자를 찾을 수 없습니다."
            )

    notification = NotificationService.create(
        target_id, data.type, data.title, data.message, db, data=data.data
    )
    return NotificationResponse.model_validate(notification)


@router.patch("/notifications/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=NotificationService.mark_all_read(current_user.id, db))


@router.patch("/notifications/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationResponse:
    notification = NotificationService.mark_read(current_user.id, notification_id, db)
    return NotificationResponse.model_validate(notification)
