"""Geofence repository - Database operations for job geofences"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Job, JobGeofence


class GeofenceRepository:
    @staticmethod
    def get_job(db: Session, job_id: str) -> Optional[Job]:
        return db.query(Job).filter(Job.id == job_id).first()

    @staticmethod
    def get_geofence(db: Session, geofence_id: str) -> Optional[JobGeofence]:
        return db.query(JobGeofence).filter(JobGeofence.id == geofence_id).first()

    @staticmethod
    def get_job_geofence(db: Session, job_id: str) -> Optional[JobGeofence]:
        return db.query(JobGeofence).filter(JobGeofence.job_id == job_id).first()

    @staticmethod
    def create_geofence(db: Session, geofence_data: dict) -> JobGeofence:
        geofence = JobGeofence(**geofence_data)
        db.add(geofence)
        db.flush()
        return geofence

    @staticmethod
    def update_geofence(db: Session, geofence: JobGeofence, update_data: dict) -> JobGeofence:
        for key, value in update_data.items():
            setattr(geofence, key, value)
        db.flush()
        return geofence

    @staticmethod
    def delete_geofence(db: Session, geofence: JobGeofence) -> None:
        db.delete(geofence)
        db.flush()
