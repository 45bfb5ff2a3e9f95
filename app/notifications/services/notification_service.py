import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.core.datetime_utils import utcnow
from app.core.exceptions import NotFoundError
from app.notifications.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)


class NotificationService:
    @staticmethod
    def create(
        user_id: UUID,
        type: NotificationType | str,
        title: str,
        message: str,
        db: Session,
        data: dict[str, Any] | None = None,
        commit: bool = True,
    ) -> Notification:
        """Create a notification; pass commit=False to join the caller's transaction."""
        notification = Notification(
            user_id=user_id,
            type=type.value if isinstance(type, NotificationType) else type,
            title=title,
            message=message,
            data=data or {},
        )
        db.add(notification)
        if commit:
            db.commit()
            db.refresh(notification)
        logger.debug(
            "Notification queued", extra={"user_id": str(user_id), "type": notification.type}
        )
        return notification

    @staticmethod
    def list_for_user(
        user_id: UUID, page: int, limit: int, db: Session
    ) -> tuple[list[Notification], int]:
        total = (
            db.scalar(
                select(func.count())
                .select_from(Notification)
                .where(Notification.user_id == user_id)
            )
            or 0
        )
        items = (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    @staticmethod
    def unread_count(user_id: UUID, db: Session) -> int:
        return (
            db.scalar(
                select(func.count())
                .select_from(Notification)
                .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            )
            or 0
        )

    @staticmethod
    def mark_read(user_id: UUID, notification_id: UUID, db: Session) -> Notification:
        notification = (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )
        if notification is None:
            raise NotFoundError("알림을 찾을 수 없습니다.", resource="notification")
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = utcnow()
            db.commit()
            db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(user_id: UUID, db: Session) -> int:
        result = db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True, read_at=utcnow())
        )
        db.commit()
        return result.rowcount or 0
