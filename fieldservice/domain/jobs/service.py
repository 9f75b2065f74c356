"""Job service - Business logic for the job lifecycle"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...config import JOBS_PAGE_LIMIT_MAX
from ...database import transaction
from ...errors import NotFoundError, PermissionDeniedError, InvalidStateError, ValidationError
from ...models import Job, Profile, utcnow
from ...policy import (
    ADMIN,
    CUSTOMER,
    TEAM,
    authorize,
    check_job_access,
    customer_record_for,
    team_member_record_for,
)
from ...shared.validators import validate_not_past
from ..notifications.service import NotificationService
from .repository import JobRepository
from .schemas import JobCreate, JobUpdateRequest
from .status import INITIAL_STATUS, JobStatus, is_terminal, validate_transition

logger = logging.getLogger(__name__)

# Columns that may be edited but never cleared
NON_NULLABLE_FIELDS = ("title", "service_address", "scheduled_date", "scheduled_time", "status", "priority")


class JobService:
    """Service layer for job business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = JobRepository()
        self.notifications = NotificationService(db)

    def create_job(self, data: JobCreate, actor: Profile) -> Job:
        """Create a job in the scheduled state and notify the responsible managers"""
        authorize(actor, "create", "job", "Insufficient permissions to create jobs")
        logger.info(f"📥 Creating job '{data.title}' for customer {data.customer_id} by {actor.id}")

        customer = self.repo.get_customer(self.db, data.customer_id)
        if not customer:
            raise NotFoundError("Customer not found")

        if not self.repo.get_service_type(self.db, data.service_type_id):
            raise NotFoundError("Service type not found")

        if actor.role == CUSTOMER:
            own = customer_record_for(self.db, actor)
            if not own or own.id != customer.id:
                logger.warning(f"⚠️ Customer {actor.id} tried to create a job for {customer.id}")
                raise PermissionDeniedError("Customers can only create jobs for themselves")

        if data.assigned_manager and not self.repo.get_profile(self.db, data.assigned_manager):
            raise NotFoundError("Assigned manager not found")

        job_data = data.model_dump()
        job_data.update(
            {
                "company_id": customer.company_id,
                "status": INITIAL_STATUS.value,
                "created_by": actor.id,
            }
        )

        with transaction(self.db):
            job = self.repo.create_job(self.db, job_data)

        logger.info(f"✅ Job created: {job.id}")
        self.notifications.notify_job_created(job)
        return self.repo.get_job(self.db, job.id)

    def get_job(self, job_id: str, actor: Profile) -> Job:
        job = self.repo.get_job(self.db, job_id)
        if not job:
            raise NotFoundError("Job not found")
        if not check_job_access(self.db, actor, job_id):
            raise PermissionDeniedError("Access denied")
        return job

    def list_jobs(
        self,
        actor: Profile,
        *,
        limit: int,
        offset: int = 0,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        scheduled_date: Optional[date] = None,
        customer_id: Optional[str] = None,
        team_member_id: Optional[str] = None,
    ) -> dict:
        """
        List jobs visible to the actor.

        Customers are pinned to their own customer record and team members to
        their own assignments, whatever filters they send. Managers only see
        their company; admins see everything.
        """
        authorize(actor, "read", "job")
        limit = min(limit, JOBS_PAGE_LIMIT_MAX)
        company_id = None

        if actor.role == CUSTOMER:
            customer = customer_record_for(self.db, actor)
            if not customer:
                return {"jobs": [], "total": 0, "limit": limit, "offset": offset}
            customer_id = customer.id
            team_member_id = None
        elif actor.role == TEAM:
            team_member = team_member_record_for(self.db, actor)
            if not team_member:
                return {"jobs": [], "total": 0, "limit": limit, "offset": offset}
            team_member_id = team_member.id
        elif actor.role != ADMIN:
            company_id = actor.company_id

        jobs, total = self.repo.list_jobs(
            self.db,
            limit=limit,
            offset=offset,
            status=status,
            priority=priority,
            scheduled_date=scheduled_date,
            customer_id=customer_id,
            company_id=company_id,
            team_member_id=team_member_id,
        )
        return {"jobs": jobs, "total": total, "limit": limit, "offset": offset}

    def update_job(self, job_id: str, data: JobUpdateRequest, actor: Profile) -> Job:
        """Apply an edit; a status change is validated and recorded on the timeline"""
        job = self.repo.get_job(self.db, job_id)
        if not job:
            raise NotFoundError("Job not found")

        authorize(actor, "update", "job", "Insufficient permissions to update jobs")

        changes = data.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be empty")

        new_status = changes.get("status")
        status_changed = new_status is not None and new_status != job.status

        if is_terminal(job.status) and set(changes) - {"status"}:
            raise InvalidStateError(f"Cannot modify a {job.status} job")
        if status_changed:
            validate_transition(job.status, new_status)
        else:
            changes.pop("status", None)

        if "scheduled_date" in changes and changes["scheduled_date"] != job.scheduled_date:
            try:
                validate_not_past(changes["scheduled_date"])
            except ValueError as e:
                raise ValidationError(str(e)) from e

        if changes.get("assigned_manager") and not self.repo.get_profile(
            self.db, changes["assigned_manager"]
        ):
            raise NotFoundError("Assigned manager not found")

        if not changes:
            return job

        changes["updated_at"] = utcnow()
        with transaction(self.db):
            self.repo.update_job(self.db, job, changes)
            if status_changed:
                self.repo.add_status_history(self.db, job.id, actor.id, new_status)

        logger.info(f"✅ Job {job.id} updated by {actor.id}: {sorted(changes)}")
        if status_changed:
            logger.info(f"🔄 Job {job.id} status -> {new_status}")
            self.notifications.notify_status_changed(job, new_status, actor.id)
        return self.repo.get_job(self.db, job.id)

    def delete_job(self, job_id: str, actor: Profile) -> dict:
        authorize(actor, "delete", "job", "Only admins can delete jobs")

        job = self.repo.get_job(self.db, job_id)
        if not job:
            raise NotFoundError("Job not found")
        if job.status == JobStatus.COMPLETED.value:
            raise InvalidStateError("Completed jobs cannot be deleted")

        with transaction(self.db):
            self.repo.delete_job(self.db, job)

        logger.info(f"🗑️ Job {job_id} deleted by {actor.id}")
        return {"message": "Job deleted successfully"}
