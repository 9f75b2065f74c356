"""Job domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import require_uuid, validate_not_past, validate_time_of_day

JobPriority = Literal["low", "medium", "high", "urgent"]
JobStatusValue = Literal["scheduled", "in-progress", "completed", "cancelled", "issue"]


class JobCreate(BaseModel):
    """Schema for creating a new job"""

    title: str
    service_address: str
    scheduled_date: date
    scheduled_time: str
    customer_id: str
    service_type_id: str
    description: Optional[str] = None
    estimated_duration: Optional[int] = None
    priority: JobPriority = "medium"
    special_instructions: Optional[str] = None
    estimated_price: Optional[float] = None
    assigned_manager: Optional[str] = None

    @field_validator("title", "service_address")
    @classmethod
    def validate_required_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Field is required")
        return v.strip()

    @field_validator("scheduled_date")
    @classmethod
    def validate_scheduled_date(cls, v):
        return validate_not_past(v)

    @field_validator("scheduled_time")
    @classmethod
    def validate_scheduled_time(cls, v):
        return validate_time_of_day(v)

    @field_validator("customer_id", "service_type_id", "assigned_manager")
    @classmethod
    def validate_ids(cls, v, info):
        return require_uuid(v, info.field_name)

    @field_validator("estimated_duration")
    @classmethod
    def validate_duration(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Estimated duration must be positive")
        return v


class JobUpdateRequest(BaseModel):
    """Schema for editing a job; only the fields sent are applied"""

    title: Optional[str] = None
    description: Optional[str] = None
    service_address: Optional[str] = None
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None
    estimated_duration: Optional[int] = None
    status: Optional[JobStatusValue] = None
    priority: Optional[JobPriority] = None
    special_instructions: Optional[str] = None
    estimated_price: Optional[float] = None
    final_price: Optional[float] = None
    assigned_manager: Optional[str] = None

    @field_validator("scheduled_time")
    @classmethod
    def validate_scheduled_time(cls, v):
        return validate_time_of_day(v)

    @field_validator("assigned_manager")
    @classmethod
    def validate_manager_id(cls, v):
        return require_uuid(v, "assigned_manager")

    @field_validator("title", "service_address")
    @classmethod
    def validate_text(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Field cannot be blank")
        return v.strip()

    @field_validator("estimated_duration")
    @classmethod
    def validate_duration(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Estimated duration must be positive")
        return v


class CustomerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    business_name: Optional[str] = None
    service_address: Optional[str] = None


class ServiceTypeSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    duration_minutes: Optional[int] = None


class JobResponse(BaseModel):
    """Schema for job response; joined rows are flattened to single objects"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    company_id: str
    customer_id: str
    service_type_id: str
    title: str
    description: Optional[str] = None
    service_address: str
    scheduled_date: date
    scheduled_time: str
    estimated_duration: Optional[int] = None
    status: str
    priority: str
    special_instructions: Optional[str] = None
    estimated_price: Optional[float] = None
    final_price: Optional[float] = None
    created_by: str
    assigned_manager: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    customer: Optional[CustomerSummary] = None
    service_type: Optional[ServiceTypeSummary] = None


class JobEnvelope(BaseModel):
    job: JobResponse


class JobListResponse(BaseModel):
    jobs: list[JobResponse]
    total: int
    limit: int
    offset: int
