"""Job update repository - Database operations for the job timeline"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Job, JobUpdate


class JobUpdateRepository:
    """Repository for job update database operations"""

    @staticmethod
    def get_job(db: Session, job_id: str) -> Optional[Job]:
        return db.query(Job).options(joinedload(Job.customer)).filter(Job.id == job_id).first()

    @staticmethod
    def get_updates(db: Session, job_id: str) -> list[JobUpdate]:
        """Timeline of a job, newest first"""
        return (
            db.query(JobUpdate)
            .options(joinedload(JobUpdate.author))
            .filter(JobUpdate.job_id == job_id)
            .order_by(JobUpdate.created_at.desc())
            .all()
        )

    @staticmethod
    def get_update(db: Session, update_id: str) -> Optional[JobUpdate]:
        return (
            db.query(JobUpdate)
            .options(joinedload(JobUpdate.author))
            .filter(JobUpdate.id == update_id)
            .first()
        )

    @staticmethod
    def create_update(db: Session, update_data: dict) -> JobUpdate:
        update = JobUpdate(**update_data)
        db.add(update)
        db.flush()
        return update

    @staticmethod
    def set_job_status(db: Session, job: Job, status: str, updated_at) -> Job:
        job.status = status
        job.updated_at = updated_at
        db.flush()
        return job
