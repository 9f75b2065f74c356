"""Notification service - Fan-out and inbox operations"""

import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...database import transaction
from ...errors import NotFoundError, PermissionDeniedError, ValidationError
from ...models import Job, Notification, Profile
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Creates notification rows as a side effect of other state changes"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------

    def fan_out(
        self,
        recipients: Iterable[Optional[str]],
        title: str,
        message: str,
        notification_type: str = "info",
        related_job_id: Optional[str] = None,
        exclude: Optional[str] = None,
    ) -> int:
        """
        Insert one notification per distinct recipient in its own transaction.

        Failures are logged and swallowed: the state change that triggered the
        fan-out has already been committed and must not be reported as failed.
        Returns the number of rows written.
        """
        user_ids = []
        for user_id in recipients:
            if user_id and user_id != exclude and user_id not in user_ids:
                user_ids.append(user_id)

        if not user_ids:
            logger.debug(f"ℹ️ No recipients for '{title}' notification")
            return 0

        rows = [
            {
                "user_id": user_id,
                "title": title,
                "message": message,
                "type": notification_type,
                "related_job_id": related_job_id,
            }
            for user_id in user_ids
        ]
        try:
            with transaction(self.db):
                self.repo.add_many(self.db, rows)
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to insert {len(rows)} '{title}' notification(s): {e}")
            return 0

        logger.info(f"🔔 Sent '{title}' notification to {len(rows)} recipient(s)")
        return len(rows)

    def notify_job_created(self, job: Job) -> int:
        if job.assigned_manager:
            return self.fan_out(
                [job.assigned_manager],
                title="New Job Assigned",
                message=f"You have been assigned to manage job: {job.title}",
                notification_type="job_created",
                related_job_id=job.id,
            )

        managers = self.repo.get_manager_ids(self.db, job.company_id)
        return self.fan_out(
            managers,
            title="New Job Created",
            message=f"A new job has been created: {job.title}",
            notification_type="job_created",
            related_job_id=job.id,
        )

    def notify_status_changed(self, job: Job, status: str, author_id: str) -> int:
        customer_profile_id = job.customer.profile_id if job.customer else None
        sent = self.fan_out(
            [customer_profile_id],
            title="Job Status Updated",
            message=f'Your job "{job.title}" status has been updated to {status}',
            notification_type="job_update",
            related_job_id=job.id,
            exclude=author_id,
        )
        sent += self.fan_out(
            [job.assigned_manager],
            title="Job Status Updated",
            message=f'Job "{job.title}" status has been updated to {status}',
            notification_type="job_update",
            related_job_id=job.id,
            exclude=author_id,
        )
        return sent

    def notify_job_update(self, job: Job, notes: str, author_id: str) -> int:
        customer_profile_id = job.customer.profile_id if job.customer else None
        sent = self.fan_out(
            [customer_profile_id],
            title="Job Update",
            message=f'Update on your job "{job.title}": {notes}',
            notification_type="job_update",
            related_job_id=job.id,
        )
        sent += self.fan_out(
            [job.assigned_manager],
            title="Job Update",
            message=f'Update on job "{job.title}": {notes}',
            notification_type="job_update",
            related_job_id=job.id,
            exclude=author_id,
        )
        return sent

    def notify_assigned(self, job: Job, team_member_profile_id: Optional[str]) -> int:
        return self.fan_out(
            [team_member_profile_id],
            title="New Job Assignment",
            message=f"You have been assigned to job: {job.title}",
            notification_type="job_assigned",
            related_job_id=job.id,
        )

    # ------------------------------------------------------------------
    # Inbox
    # ------------------------------------------------------------------

    def get_notifications(
        self, profile: Profile, limit: int = 10, offset: int = 0, include_read: bool = True
    ) -> dict:
        notifications, total = self.repo.get_user_notifications(
            self.db, profile.id, limit, offset, include_read
        )
        return {
            "notifications": notifications,
            "total": total,
            "unread_count": self.repo.count_unread(self.db, profile.id),
            "limit": limit,
            "offset": offset,
        }

    def _get_owned(self, notification_id: str, profile: Profile) -> Notification:
        notification = self.repo.get_notification(self.db, notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if notification.user_id != profile.id:
            raise PermissionDeniedError("Unauthorized")
        return notification

    def mark_as_read(self, notification_id: str, profile: Profile, is_read: bool) -> dict:
        if is_read is not True:
            raise ValidationError("Invalid request")
        notification = self._get_owned(notification_id, profile)
        with transaction(self.db):
            self.repo.mark_as_read(self.db, notification)
        return {"success": True}

    def apply_action(self, action: str, profile: Profile) -> dict:
        if action != "mark_all_read":
            raise ValidationError("Invalid action")
        with transaction(self.db):
            updated = self.repo.mark_all_as_read(self.db, profile.id)
        logger.info(f"✅ Marked {updated} notification(s) read for profile {profile.id}")
        return {"success": True, "updated": updated}

    def delete_notification(self, notification_id: str, profile: Profile) -> dict:
        notification = self._get_owned(notification_id, profile)
        with transaction(self.db):
            self.repo.delete_notification(self.db, notification)
        return {"success": True}
