"""Location router - Team location tracking endpoints"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import LocationCreate, LocationResponse, PrivacySettings
from .service import LocationService

router = APIRouter(prefix="/team-locations", tags=["Team Locations"])


def get_location_service(db: Session = Depends(get_db)) -> LocationService:
    """Dependency injection for LocationService"""
    return LocationService(db)


# ============================================================================
# PRIVACY SETTINGS
# ============================================================================


@router.get("/privacy")
async def get_privacy_settings(
    profile: Profile = Depends(get_current_profile),
    service: LocationService = Depends(get_location_service),
):
    """Get the current user's location privacy settings"""
    return {"settings": service.get_privacy(profile)}


@router.put("/privacy")
async def update_privacy_settings(
    data: PrivacySettings,
    profile: Profile = Depends(get_current_profile),
    service: LocationService = Depends(get_location_service),
):
    """Replace the current user's location privacy settings"""
    return {"settings": service.update_privacy(data, profile)}


# ============================================================================
# LOCATIONS
# ============================================================================


@router.post("")
async def record_location(
    data: LocationCreate,
    profile: Profile = Depends(get_current_profile),
    service: LocationService = Depends(get_location_service),
):
    """Record the current user's position"""
    location = service.record_location(data, profile)
    return {"success": True, "data": LocationResponse.model_validate(location)}


@router.get("/history")
async def get_location_history(
    team_member_id: str = Query(..., alias="teamMemberId"),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    profile: Profile = Depends(get_current_profile),
    service: LocationService = Depends(get_location_service),
):
    """Get a team member's samples in a time window, oldest first"""
    locations = service.get_history(team_member_id, profile, start, end)
    return {"locations": [LocationResponse.model_validate(loc) for loc in locations]}


@router.get("")
async def get_locations(
    team_member_id: Optional[str] = Query(None, alias="teamMemberId"),
    company_id: Optional[str] = Query(None, alias="companyId"),
    profile: Profile = Depends(get_current_profile),
    service: LocationService = Depends(get_location_service),
):
    """Get one team member's latest position, or every team member's in a company"""
    if team_member_id:
        location = service.get_latest_location(team_member_id, profile)
        return {"location": LocationResponse.model_validate(location) if location else None}
    return {"locations": service.get_company_locations(profile, company_id)}


@router.delete("")
async def delete_location_history(
    team_member_id: str = Query(..., alias="teamMemberId"),
    profile: Profile = Depends(get_current_profile),
    service: LocationService = Depends(get_location_service),
):
    """Delete a team member's stored location history"""
    deleted = service.delete_history(team_member_id, profile)
    return {"success": True, "deleted": deleted}
