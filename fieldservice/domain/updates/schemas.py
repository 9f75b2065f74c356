"""Job update schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import AnyHttpUrl, BaseModel, field_validator

from ...models import JobUpdate
from ...shared.validators import parse_wkt_point, validate_latitude, validate_longitude
from ..jobs.schemas import JobStatusValue


class UpdateLocation(BaseModel):
    latitude: float
    longitude: float

    @field_validator("latitude")
    @classmethod
    def check_latitude(cls, v):
        return validate_latitude(v)

    @field_validator("longitude")
    @classmethod
    def check_longitude(cls, v):
        return validate_longitude(v)


class JobUpdateCreate(BaseModel):
    """Schema for posting a timeline entry; status moves the job along"""

    notes: str
    status: Optional[JobStatusValue] = None
    location: Optional[UpdateLocation] = None
    photos: list[AnyHttpUrl] = []

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        if not v or not v.strip():
            raise ValueError("Notes are required")
        return v


class UpdateAuthor(BaseModel):
    id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class JobUpdateResponse(BaseModel):
    id: str
    job_id: str
    updated_by: str
    status: Optional[str] = None
    notes: str
    location: Optional[UpdateLocation] = None
    photos: list[str]
    created_at: datetime
    author: Optional[UpdateAuthor] = None

    @classmethod
    def from_model(cls, update: JobUpdate) -> "JobUpdateResponse":
        author = update.author
        return cls(
            id=update.id,
            job_id=update.job_id,
            updated_by=update.updated_by,
            status=update.status,
            notes=update.notes,
            location=parse_wkt_point(update.location),
            photos=update.photos or [],
            created_at=update.created_at,
            author=(
                UpdateAuthor(id=author.id, full_name=author.full_name, avatar_url=author.avatar_url)
                if author
                else None
            ),
        )
