"""Notification router - Inbox endpoints for the current user"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import NotificationActionRequest, NotificationListResponse, NotificationReadRequest
from .service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.get("", response_model=NotificationListResponse)
async def get_notifications(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    include_read: bool = Query(True),
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    """Get notifications for the current user"""
    return service.get_notifications(profile, limit, offset, include_read)


@router.post("")
async def notification_action(
    data: NotificationActionRequest,
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    """Apply a bulk action (mark_all_read) to the current user's notifications"""
    return service.apply_action(data.action, profile)


@router.patch("/{notification_id}")
async def mark_notification_read(
    notification_id: str,
    data: NotificationReadRequest,
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    """Mark a notification as read"""
    return service.mark_as_read(notification_id, profile, data.is_read)


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    """Delete a notification"""
    return service.delete_notification(notification_id, profile)
