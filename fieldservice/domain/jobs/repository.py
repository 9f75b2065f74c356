"""Job repository - Database operations for jobs"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Customer, Job, JobAssignment, JobUpdate, Notification, Profile, ServiceType


class JobRepository:
    """Repository for job database operations"""

    @staticmethod
    def get_job(db: Session, job_id: str) -> Optional[Job]:
        return (
            db.query(Job)
            .options(joinedload(Job.customer), joinedload(Job.service_type))
            .filter(Job.id == job_id)
            .first()
        )

    @staticmethod
    def get_customer(db: Session, customer_id: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.id == customer_id).first()

    @staticmethod
    def get_service_type(db: Session, service_type_id: str) -> Optional[ServiceType]:
        return db.query(ServiceType).filter(ServiceType.id == service_type_id).first()

    @staticmethod
    def get_profile(db: Session, profile_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == profile_id).first()

    @staticmethod
    def list_jobs(
        db: Session,
        *,
        limit: int,
        offset: int,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        scheduled_date: Optional[date] = None,
        customer_id: Optional[str] = None,
        company_id: Optional[str] = None,
        team_member_id: Optional[str] = None,
    ) -> tuple[list[Job], int]:
        """Filtered page of jobs, newest first, plus the count before paging"""
        query = db.query(Job)

        if status:
            query = query.filter(Job.status == status)
        if priority:
            query = query.filter(Job.priority == priority)
        if scheduled_date:
            query = query.filter(Job.scheduled_date == scheduled_date)
        if customer_id:
            query = query.filter(Job.customer_id == customer_id)
        if company_id:
            query = query.filter(Job.company_id == company_id)
        if team_member_id:
            query = query.join(JobAssignment, JobAssignment.job_id == Job.id).filter(
                JobAssignment.team_member_id == team_member_id
            )

        total = query.count()
        jobs = (
            query.options(joinedload(Job.customer), joinedload(Job.service_type))
            .order_by(Job.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return jobs, total

    @staticmethod
    def create_job(db: Session, job_data: dict) -> Job:
        job = Job(**job_data)
        db.add(job)
        db.flush()
        return job

    @staticmethod
    def update_job(db: Session, job: Job, changes: dict) -> Job:
        for key, value in changes.items():
            setattr(job, key, value)
        db.flush()
        return job

    @staticmethod
    def add_status_history(db: Session, job_id: str, author_id: str, status: str) -> JobUpdate:
        """Append the timeline row that records a direct status edit"""
        entry = JobUpdate(
            job_id=job_id,
            updated_by=author_id,
            status=status,
            notes=f"Status updated to {status}",
            photos=[],
        )
        db.add(entry)
        db.flush()
        return entry

    @staticmethod
    def delete_job(db: Session, job: Job) -> None:
        """Delete a job; assignments, updates, photos and its geofence go with it"""
        db.query(Notification).filter(Notification.related_job_id == job.id).update(
            {Notification.related_job_id: None}, synchronize_session=False
        )
        db.delete(job)
        db.flush()
