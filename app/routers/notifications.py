"""Notification API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.schemas.notification import (
    BulkUpdateResponse,
    NotificationCreateRequest,
    NotificationListResponse,
    NotificationResponse,
)
from app.services.auth import PublicUser
from app.services.notification import get_notification_service

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


@router.post("/", response_model=NotificationResponse, status_code=201)
def create_notification(
    body: NotificationCreateRequest,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NotificationResponse:
    notification = get_notification_service().create_notification(
        db, user.id, body.type, body.title, body.message
    )
    return NotificationResponse.model_validate(notification)


@router.get("/", response_model=NotificationListResponse)
def list_notifications(
    unread_only: bool = False,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NotificationListResponse:
    """List the current user's notifications, newest first."""
    notifications = get_notification_service().list_notifications(db, user.id, unread_only=unread_only)
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(n) for n in notifications],
        total=len(notifications),
        unread=sum(1 for n in notifications if not n.is_read),
    )


@router.post("/read-all", response_model=BulkUpdateResponse)
def mark_all_read(
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BulkUpdateResponse:
    return BulkUpdateResponse(count=get_notification_service().mark_all_read(db, user.id))


@router.delete("/", response_model=BulkUpdateResponse)
def clear_all(
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BulkUpdateResponse:
    """Delete every notification of the current user."""
    return BulkUpdateResponse(count=get_notification_service().clear_all(db, user.id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: int,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NotificationResponse:
    service = get_notification_service()
    notification = service.get_notification(db, user.id, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationResponse.model_validate(service.mark_read(db, notification))


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: int,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    service = get_notification_service()
    notification = service.get_notification(db, user.id, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    service.delete_notification(db, notification)
    return {"detail": "Notification deleted"}
