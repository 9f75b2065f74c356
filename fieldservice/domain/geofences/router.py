"""Geofence router - One arrival/departure area per job"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import GeofenceCreate, GeofenceResponse, GeofenceUpdate
from .service import GeofenceService

router = APIRouter(prefix="/jobs/{job_id}/geofence", tags=["Geofences"])


def get_geofence_service(db: Session = Depends(get_db)) -> GeofenceService:
    """Dependency injection for GeofenceService"""
    return GeofenceService(db)


@router.get("")
async def get_geofence(
    job_id: str,
    profile: Profile = Depends(get_current_profile),
    service: GeofenceService = Depends(get_geofence_service),
):
    geofence = service.get_geofence(job_id, profile)
    return {"geofence": GeofenceResponse.from_model(geofence) if geofence else None}


@router.post("", status_code=201)
async def create_geofence(
    job_id: str,
    data: GeofenceCreate,
    profile: Profile = Depends(get_current_profile),
    service: GeofenceService = Depends(get_geofence_service),
):
    """Create the job's geofence (admins and managers)"""
    geofence = service.create_geofence(job_id, data, profile)
    return {"geofence": GeofenceResponse.from_model(geofence)}


@router.put("/{geofence_id}")
async def update_geofence(
    job_id: str,
    geofence_id: str,
    data: GeofenceUpdate,
    profile: Profile = Depends(get_current_profile),
    service: GeofenceService = Depends(get_geofence_service),
):
    geofence = service.update_geofence(job_id, geofence_id, data, profile)
    return {"geofence": GeofenceResponse.from_model(geofence)}


@router.delete("/{geofence_id}")
async def delete_geofence(
    job_id: str,
    geofence_id: str,
    profile: Profile = Depends(get_current_profile),
    service: GeofenceService = Depends(get_geofence_service),
):
    service.delete_geofence(job_id, geofence_id, profile)
    return {"success": True}
