"""Geofence schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, StrictBool

from ...models import JobGeofence


class GeofenceCreate(BaseModel):
    radius: Optional[float] = None  # meters
    notificationOnEnter: StrictBool = True
    notificationOnExit: StrictBool = True


class GeofenceUpdate(BaseModel):
    """Only the fields sent are applied"""

    radius: Optional[float] = None
    notificationOnEnter: Optional[StrictBool] = None
    notificationOnExit: Optional[StrictBool] = None

    def to_columns(self) -> dict:
        names = {
            "radius": "radius",
            "notificationOnEnter": "notification_on_enter",
            "notificationOnExit": "notification_on_exit",
        }
        return {
            names[field]: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class GeofenceResponse(BaseModel):
    id: str
    jobId: str
    radius: float
    notificationOnEnter: bool
    notificationOnExit: bool
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_model(cls, geofence: JobGeofence) -> "GeofenceResponse":
        return cls(
            id=geofence.id,
            jobId=geofence.job_id,
            radius=geofence.radius,
            notificationOnEnter=geofence.notification_on_enter,
            notificationOnExit=geofence.notification_on_exit,
            createdAt=geofence.created_at,
            updatedAt=geofence.updated_at,
        )
