"""Geofence service - Arrival and departure areas around job sites"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...database import transaction
from ...errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from ...models import Job, JobGeofence, Profile
from ...policy import authorize, check_job_access
from .repository import GeofenceRepository
from .schemas import GeofenceCreate, GeofenceUpdate

logger = logging.getLogger(__name__)


class GeofenceService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = GeofenceRepository()

    def _get_job(self, job_id: str) -> Job:
        job = self.repo.get_job(self.db, job_id)
        if not job:
            raise NotFoundError("Job not found")
        return job

    def _get_job_geofence(self, job_id: str, geofence_id: str) -> JobGeofence:
        geofence = self.repo.get_geofence(self.db, geofence_id)
        if not geofence:
            raise NotFoundError("Geofence not found")
        if geofence.job_id != job_id:
            raise ValidationError("Geofence does not belong to the specified job")
        return geofence

    def get_geofence(self, job_id: str, actor: Profile) -> Optional[JobGeofence]:
        """The job's geofence, or None when it has none"""
        authorize(actor, "read", "geofence")
        self._get_job(job_id)
        if not check_job_access(self.db, actor, job_id):
            raise PermissionDeniedError("Access denied")
        return self.repo.get_job_geofence(self.db, job_id)

    def create_geofence(self, job_id: str, data: GeofenceCreate, actor: Profile) -> JobGeofence:
        """
        Attach a geofence to a job.

        Raises:
            PermissionDeniedError: actor is not admin or manager
            NotFoundError: job missing
            ConflictError: the job already has a geofence
            ValidationError: radius missing or not positive
        """
        authorize(actor, "create", "geofence", "Only admins and managers can create geofences")
        self._get_job(job_id)

        if self.repo.get_job_geofence(self.db, job_id):
            raise ConflictError("Geofence already exists for this job")
        if data.radius is None or data.radius <= 0:
            raise ValidationError("Radius is required and must be a positive number")

        try:
            with transaction(self.db):
                geofence = self.repo.create_geofence(
                    self.db,
                    {
                        "job_id": job_id,
                        "radius": data.radius,
                        "notification_on_enter": data.notificationOnEnter,
                        "notification_on_exit": data.notificationOnExit,
                    },
                )
        except IntegrityError as e:
            raise ConflictError("Geofence already exists for this job") from e

        logger.info(f"✅ Geofence {geofence.id} ({data.radius}m) created for job {job_id}")
        return geofence

    def update_geofence(
        self, job_id: str, geofence_id: str, data: GeofenceUpdate, actor: Profile
    ) -> JobGeofence:
        authorize(actor, "update", "geofence", "Only admins and managers can update geofences")
        geofence = self._get_job_geofence(job_id, geofence_id)

        update_data = data.to_columns()
        if "radius" in update_data and update_data["radius"] <= 0:
            raise ValidationError("Radius must be a positive number")

        with transaction(self.db):
            geofence = self.repo.update_geofence(self.db, geofence, update_data)

        logger.info(f"✏️ Geofence {geofence_id} updated")
        return geofence

    def delete_geofence(self, job_id: str, geofence_id: str, actor: Profile) -> None:
        authorize(actor, "delete", "geofence", "Only admins and managers can delete geofences")
        geofence = self._get_job_geofence(job_id, geofence_id)

        with transaction(self.db):
            self.repo.delete_geofence(self.db, geofence)

        logger.info(f"🗑️ Geofence {geofence_id} deleted from job {job_id}")
