"""Job update service - Timeline entries and status changes made in the field"""

import logging

from sqlalchemy.orm import Session

from ...database import transaction
from ...errors import NotFoundError
from ...models import JobUpdate, Profile, utcnow
from ...policy import authorize, check_job_access
from ...shared.validators import to_wkt_point
from ..jobs.status import validate_transition
from ..notifications.service import NotificationService
from .repository import JobUpdateRepository
from .schemas import JobUpdateCreate

logger = logging.getLogger(__name__)


class JobUpdateService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = JobUpdateRepository()
        self.notifications = NotificationService(db)

    def _get_accessible_job(self, job_id: str, actor: Profile):
        # Missing and forbidden look the same so job ids are not leaked
        job = self.repo.get_job(self.db, job_id)
        if not job or not check_job_access(self.db, actor, job_id):
            raise NotFoundError("Job not found or access denied")
        return job

    def list_updates(self, job_id: str, actor: Profile) -> list[JobUpdate]:
        authorize(actor, "read", "job_update")
        self._get_accessible_job(job_id, actor)
        return self.repo.get_updates(self.db, job_id)

    def create_update(self, job_id: str, data: JobUpdateCreate, actor: Profile) -> JobUpdate:
        """
        Append a timeline entry and, when it carries a status, move the job.

        The entry and the status change commit together. Notifications go out
        afterwards and never fail the request.
        """
        authorize(actor, "create", "job_update")
        job = self._get_accessible_job(job_id, actor)

        status_changed = data.status is not None and data.status != job.status
        if status_changed:
            validate_transition(job.status, data.status)

        update_data = {
            "job_id": job_id,
            "updated_by": actor.id,
            "status": data.status,
            "notes": data.notes,
            "location": (
                to_wkt_point(data.location.latitude, data.location.longitude)
                if data.location
                else None
            ),
            "photos": [str(url) for url in data.photos],
        }

        with transaction(self.db):
            update = self.repo.create_update(self.db, update_data)
            if status_changed:
                self.repo.set_job_status(self.db, job, data.status, utcnow())

        logger.info(f"✅ Job update {update.id} posted on job {job_id} by {actor.id}")
        if status_changed:
            logger.info(f"🔄 Job {job_id} status -> {data.status}")

        self.notifications.notify_job_update(job, data.notes, actor.id)
        return self.repo.get_update(self.db, update.id)
