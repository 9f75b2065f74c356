"""Location schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, field_validator

from ...models import Profile
from ...shared.validators import validate_latitude, validate_longitude


class LocationCreate(BaseModel):
    """Schema for a position sample posted by a team member's device"""

    latitude: StrictFloat
    longitude: StrictFloat
    accuracy: Optional[StrictFloat] = None

    @field_validator("latitude")
    @classmethod
    def check_latitude(cls, v):
        return validate_latitude(v)

    @field_validator("longitude")
    @classmethod
    def check_longitude(cls, v):
        return validate_longitude(v)

    @field_validator("accuracy")
    @classmethod
    def check_accuracy(cls, v):
        if v is not None and v < 0:
            raise ValueError("Accuracy must not be negative")
        return v


class LocationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    team_member_id: str
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    timestamp: datetime


class TeamMemberBrief(BaseModel):
    id: str
    name: str
    avatar: Optional[str] = None


class LocationPoint(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    timestamp: datetime


class TeamMemberLocation(BaseModel):
    teamMember: TeamMemberBrief
    location: Optional[LocationPoint] = None


class PrivacySettings(BaseModel):
    """Location privacy settings; every flag must be sent"""

    trackingEnabled: StrictBool
    shareAccuracy: StrictBool
    trackOnlyDuringShift: StrictBool

    @classmethod
    def from_profile(cls, profile: Profile) -> "PrivacySettings":
        return cls(
            trackingEnabled=profile.location_tracking_enabled,
            shareAccuracy=profile.location_share_accuracy,
            trackOnlyDuringShift=profile.location_track_only_during_shift,
        )

    def to_columns(self) -> dict:
        return {
            "location_tracking_enabled": self.trackingEnabled,
            "location_share_accuracy": self.shareAccuracy,
            "location_track_only_during_shift": self.trackOnlyDuringShift,
        }
