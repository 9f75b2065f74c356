"""Notification domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    message: str
    type: str
    is_read: bool
    related_job_id: Optional[str] = None
    related_review_id: Optional[str] = None
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    unread_count: int
    limit: int
    offset: int


class NotificationActionRequest(BaseModel):
    action: str


class NotificationReadRequest(BaseModel):
    is_read: Optional[bool] = None
