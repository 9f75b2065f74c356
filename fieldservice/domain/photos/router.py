"""Photo router - Upload and browse job verification photos"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import PhotoType, PhotoUpdate
from .service import PhotoService
from .storage import PhotoStorage, get_photo_storage

router = APIRouter(prefix="/jobs/{job_id}/photos", tags=["Job Photos"])


def get_photo_service(
    db: Session = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage),
) -> PhotoService:
    """Dependency injection for PhotoService"""
    return PhotoService(db, storage)


@router.get("")
async def list_photos(
    job_id: str,
    type: Optional[PhotoType] = None,
    profile: Profile = Depends(get_current_profile),
    service: PhotoService = Depends(get_photo_service),
):
    """Get a job's photos, optionally of one type"""
    return {"photos": service.list_photos(job_id, profile, type)}


@router.get("/comparison")
async def photo_comparison(
    job_id: str,
    profile: Profile = Depends(get_current_profile),
    service: PhotoService = Depends(get_photo_service),
):
    """Get before and after photos for side-by-side display"""
    return service.comparison(job_id, profile)


@router.post("", status_code=201)
async def upload_photo(
    job_id: str,
    photo: UploadFile = File(...),
    type: str = Form(...),
    caption: Optional[str] = Form(None),
    profile: Profile = Depends(get_current_profile),
    service: PhotoService = Depends(get_photo_service),
):
    """Upload a verification photo to private storage"""
    contents = await photo.read()
    result = service.upload_photo(
        job_id,
        profile,
        contents=contents,
        content_type=photo.content_type,
        photo_type=type,
        caption=caption,
    )
    return {"photo": result}


@router.get("/{photo_id}")
async def get_photo(
    job_id: str,
    photo_id: str,
    profile: Profile = Depends(get_current_profile),
    service: PhotoService = Depends(get_photo_service),
):
    """Get one photo with a fresh presigned URL"""
    return {"photo": service.get_photo(job_id, photo_id, profile)}


@router.put("/{photo_id}")
async def update_photo(
    job_id: str,
    photo_id: str,
    data: PhotoUpdate,
    profile: Profile = Depends(get_current_profile),
    service: PhotoService = Depends(get_photo_service),
):
    """Change a photo's type or caption (admins, managers and the uploader)"""
    return {"photo": service.update_photo(job_id, photo_id, data, profile)}


@router.delete("/{photo_id}")
async def delete_photo(
    job_id: str,
    photo_id: str,
    profile: Profile = Depends(get_current_profile),
    service: PhotoService = Depends(get_photo_service),
):
    service.delete_photo(job_id, photo_id, profile)
    return {"success": True}
