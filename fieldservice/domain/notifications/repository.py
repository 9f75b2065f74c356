"""Notification repository - Database operations for notifications"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Notification, Profile


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def add_many(db: Session, rows: list[dict]) -> list[Notification]:
        """Stage notification rows; the caller commits"""
        notifications = [Notification(**row) for row in rows]
        db.add_all(notifications)
        db.flush()
        return notifications

    @staticmethod
    def get_manager_ids(db: Session, company_id: Optional[str]) -> list[str]:
        """Profile IDs of every manager in a company"""
        query = db.query(Profile.id).filter(Profile.role == "manager")
        if company_id:
            query = query.filter(Profile.company_id == company_id)
        return [row.id for row in query.all()]

    @staticmethod
    def get_notification(db: Session, notification_id: str) -> Optional[Notification]:
        return db.query(Notification).filter(Notification.id == notification_id).first()

    @staticmethod
    def get_user_notifications(
        db: Session,
        user_id: str,
        limit: int,
        offset: int,
        include_read: bool = True,
    ) -> tuple[list[Notification], int]:
        """Page of a user's notifications, newest first, plus the filtered total"""
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if not include_read:
            query = query.filter(Notification.is_read.is_(False))

        total = query.count()
        notifications = (
            query.order_by(Notification.created_at.desc()).offset(offset).limit(limit).all()
        )
        return notifications, total

    @staticmethod
    def count_unread(db: Session, user_id: str) -> int:
        return (
            db.query(func.count(Notification.id))
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .scalar()
            or 0
        )

    @staticmethod
    def mark_as_read(db: Session, notification: Notification) -> Notification:
        notification.is_read = True
        db.flush()
        return notification

    @staticmethod
    def mark_all_as_read(db: Session, user_id: str) -> int:
        """Mark every unread notification of a user as read; returns rows touched"""
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        db.flush()
        return updated

    @staticmethod
    def delete_notification(db: Session, notification: Notification) -> None:
        db.delete(notification)
        db.flush()
