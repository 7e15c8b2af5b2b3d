"""Notification service: a per-user inbox of short messages."""

from sqlalchemy.orm import Session

from app import clock
from app.models.notification import Notification


class NotificationService:
    def create_notification(self, db: Session, user_id: int, type: str, title: str, message: str) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            is_read=False,
            created_at=clock.now_ms(),
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    def list_notifications(self, db: Session, user_id: int, unread_only: bool = False) -> list[Notification]:
        """Get a user's notifications, newest first."""
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    def get_notification(self, db: Session, user_id: int, notification_id: int) -> Notification | None:
        return (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    def mark_read(self, db: Session, notification: Notification) -> Notification:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
        return notification

    def mark_all_read(self, db: Session, user_id: int) -> int:
        """Mark every unread notification of the user as read. Returns how many changed."""
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        db.commit()
        return updated

    def delete_notification(self, db: Session, notification: Notification) -> None:
        db.delete(notification)
        db.commit()

    def clear_all(self, db: Session, user_id: int) -> int:
        """Delete every notification of the user. Returns how many went."""
        deleted = db.query(Notification).filter(Notification.user_id == user_id).delete(synchronize_session=False)
        db.commit()
        return deleted


_notification_service: NotificationService | None = None


def get_notification_service() -> NotificationService:
    """Get singleton notification service instance."""
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service
