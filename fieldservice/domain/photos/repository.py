"""Photo repository - Database operations for job photos"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Job, JobPhoto


class PhotoRepository:
    @staticmethod
    def get_job(db: Session, job_id: str) -> Optional[Job]:
        return db.query(Job).filter(Job.id == job_id).first()

    @staticmethod
    def get_photos(db: Session, job_id: str, photo_type: Optional[str] = None) -> list[JobPhoto]:
        """Photos of a job, oldest first"""
        query = db.query(JobPhoto).filter(JobPhoto.job_id == job_id)
        if photo_type:
            query = query.filter(JobPhoto.type == photo_type)
        return query.order_by(JobPhoto.created_at.asc()).all()

    @staticmethod
    def create_photo(db: Session, photo_data: dict) -> JobPhoto:
        photo = JobPhoto(**photo_data)
        db.add(photo)
        db.flush()
        return photo

    @staticmethod
    def get_photo(db: Session, job_id: str, photo_id: str) -> Optional[JobPhoto]:
        return (
            db.query(JobPhoto)
            .filter(JobPhoto.id == photo_id, JobPhoto.job_id == job_id)
            .first()
        )

    @staticmethod
    def update_photo(db: Session, photo: JobPhoto, update_data: dict) -> JobPhoto:
        for key, value in update_data.items():
            setattr(photo, key, value)
        db.flush()
        return photo

    @staticmethod
    def delete_photo(db: Session, photo: JobPhoto) -> None:
        db.delete(photo)
        db.flush()
