"""Photo service - Before/after verification photos"""

import logging
import uuid
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import PHOTO_MAX_BYTES
from ...database import transaction
from ...errors import FieldServiceError, NotFoundError, PermissionDeniedError, ValidationError
from ...models import JobPhoto, Profile
from ...policy import PRIVILEGED_ROLES, authorize, check_job_access
from .repository import PhotoRepository
from .schemas import PHOTO_TYPES, JobPhotoResponse, PhotoUpdate
from .storage import ALLOWED_IMAGE_TYPES, PhotoStorage

logger = logging.getLogger(__name__)


class PhotoService:
    def __init__(self, db: Session, storage: PhotoStorage):
        self.db = db
        self.storage = storage
        self.repo = PhotoRepository()

    def _check_access(self, job_id: str, actor: Profile) -> None:
        if not self.repo.get_job(self.db, job_id):
            raise NotFoundError("Job not found")
        if not check_job_access(self.db, actor, job_id):
            raise PermissionDeniedError("Access denied")

    def to_response(self, photo: JobPhoto) -> JobPhotoResponse:
        return JobPhotoResponse(
            id=photo.id,
            job_id=photo.job_id,
            uploaded_by=photo.uploaded_by,
            type=photo.type,
            caption=photo.caption,
            url=self.storage.presigned_url(photo.storage_key),
            created_at=photo.created_at,
        )

    def list_photos(
        self, job_id: str, actor: Profile, photo_type: Optional[str] = None
    ) -> list[JobPhotoResponse]:
        authorize(actor, "read", "job_photo")
        self._check_access(job_id, actor)
        return [self.to_response(p) for p in self.repo.get_photos(self.db, job_id, photo_type)]

    def comparison(self, job_id: str, actor: Profile) -> dict:
        """Before and after photos side by side"""
        authorize(actor, "read", "job_photo")
        self._check_access(job_id, actor)
        photos = self.repo.get_photos(self.db, job_id)
        return {
            "before": [self.to_response(p) for p in photos if p.type == "before"],
            "after": [self.to_response(p) for p in photos if p.type == "after"],
        }

    def upload_photo(
        self,
        job_id: str,
        actor: Profile,
        *,
        contents: bytes,
        content_type: Optional[str],
        photo_type: str,
        caption: Optional[str] = None,
    ) -> JobPhotoResponse:
        authorize(actor, "create", "job_photo", "Insufficient permissions to upload photos")
        self._check_access(job_id, actor)

        if photo_type not in PHOTO_TYPES:
            raise ValidationError(f"Invalid photo type. Use one of: {', '.join(PHOTO_TYPES)}")
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationError("Invalid file type. Please upload an image file.")
        if not contents:
            raise ValidationError("Empty file")
        if len(contents) > PHOTO_MAX_BYTES:
            raise ValidationError(f"File too large. Maximum size is {PHOTO_MAX_BYTES // (1024 * 1024)}MB")

        key = f"jobs/{job_id}/{photo_type}_{uuid.uuid4()}.{ALLOWED_IMAGE_TYPES[content_type]}"
        logger.info(f"📤 Uploading {photo_type} photo for job {job_id}")

        try:
            self.storage.put(key, contents, content_type)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Upload failed for {key}: {e}")
            raise FieldServiceError("Failed to upload photo") from e

        try:
            with transaction(self.db):
                photo = self.repo.create_photo(
                    self.db,
                    {
                        "job_id": job_id,
                        "uploaded_by": actor.id,
                        "storage_key": key,
                        "type": photo_type,
                        "caption": caption,
                    },
                )
        except SQLAlchemyError:
            logger.error(f"❌ Failed to record photo for job {job_id}, removing {key}")
            self._discard_object(key)
            raise

        logger.info(f"✅ Photo {photo.id} stored for job {job_id}")
        return self.to_response(photo)

    def _discard_object(self, key: str) -> None:
        try:
            self.storage.delete(key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Failed to delete object {key}: {e}")

    def _get_photo(self, job_id: str, photo_id: str, actor: Profile) -> JobPhoto:
        self._check_access(job_id, actor)
        photo = self.repo.get_photo(self.db, job_id, photo_id)
        if not photo:
            raise NotFoundError("Photo not found")
        return photo

    def _check_owner(self, photo: JobPhoto, actor: Profile, action: str) -> None:
        """Admins and managers may change any photo, everyone else only their own"""
        if actor.role not in PRIVILEGED_ROLES and photo.uploaded_by != actor.id:
            raise PermissionDeniedError(f"You do not have permission to {action} this photo")

    def get_photo(self, job_id: str, photo_id: str, actor: Profile) -> JobPhotoResponse:
        authorize(actor, "read", "job_photo")
        return self.to_response(self._get_photo(job_id, photo_id, actor))

    def update_photo(
        self, job_id: str, photo_id: str, data: PhotoUpdate, actor: Profile
    ) -> JobPhotoResponse:
        authorize(actor, "update", "job_photo", "You do not have permission to update this photo")
        photo = self._get_photo(job_id, photo_id, actor)
        self._check_owner(photo, actor, "update")

        update_data = data.model_dump(exclude_unset=True)
        if "type" in update_data and update_data["type"] is None:
            raise ValidationError(f"Invalid photo type. Use one of: {', '.join(PHOTO_TYPES)}")
        if "caption" in update_data:
            update_data["caption"] = (update_data["caption"] or "").strip() or None

        with transaction(self.db):
            photo = self.repo.update_photo(self.db, photo, update_data)

        logger.info(f"✏️ Photo {photo_id} updated by {actor.id}")
        return self.to_response(photo)

    def delete_photo(self, job_id: str, photo_id: str, actor: Profile) -> None:
        """Remove the row; a storage failure is logged and does not block it"""
        authorize(actor, "delete", "job_photo", "You do not have permission to delete this photo")
        photo = self._get_photo(job_id, photo_id, actor)
        self._check_owner(photo, actor, "delete")

        key = photo.storage_key
        with transaction(self.db):
            self.repo.delete_photo(self.db, photo)

        self._discard_object(key)
        logger.info(f"🗑️ Photo {photo_id} deleted by {actor.id}")
