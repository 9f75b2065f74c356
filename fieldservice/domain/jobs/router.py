"""Job router - FastAPI endpoints for job operations"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...config import JOBS_PAGE_LIMIT_DEFAULT, JOBS_PAGE_LIMIT_MAX
from ...database import get_db
from ...models import Profile
from .schemas import JobCreate, JobEnvelope, JobListResponse, JobPriority, JobStatusValue, JobUpdateRequest
from .service import JobService

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def get_job_service(db: Session = Depends(get_db)) -> JobService:
    """Dependency injection for JobService"""
    return JobService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.post("", response_model=JobEnvelope, status_code=201)
async def create_job(
    data: JobCreate,
    profile: Profile = Depends(get_current_profile),
    service: JobService = Depends(get_job_service),
):
    """Create a new job"""
    return {"job": service.create_job(data, profile)}


@router.get("", response_model=JobListResponse)
async def list_jobs(
    status: Optional[JobStatusValue] = None,
    priority: Optional[JobPriority] = None,
    scheduled_date: Optional[date] = Query(None, alias="date"),
    customer_id: Optional[str] = None,
    team_member_id: Optional[str] = None,
    limit: int = Query(JOBS_PAGE_LIMIT_DEFAULT, ge=1, le=JOBS_PAGE_LIMIT_MAX),
    offset: int = Query(0, ge=0),
    profile: Profile = Depends(get_current_profile),
    service: JobService = Depends(get_job_service),
):
    """List jobs visible to the current user, newest first"""
    return service.list_jobs(
        profile,
        limit=limit,
        offset=offset,
        status=status,
        priority=priority,
        scheduled_date=scheduled_date,
        customer_id=customer_id,
        team_member_id=team_member_id,
    )


@router.get("/{job_id}", response_model=JobEnvelope)
async def get_job(
    job_id: str,
    profile: Profile = Depends(get_current_profile),
    service: JobService = Depends(get_job_service),
):
    """Get a specific job"""
    return {"job": service.get_job(job_id, profile)}


@router.put("/{job_id}", response_model=JobEnvelope)
async def update_job(
    job_id: str,
    data: JobUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    service: JobService = Depends(get_job_service),
):
    """Edit a job or move it along the status machine"""
    return {"job": service.update_job(job_id, data, profile)}


@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    profile: Profile = Depends(get_current_profile),
    service: JobService = Depends(get_job_service),
):
    """Delete a job that has not been completed"""
    return service.delete_job(job_id, profile)
