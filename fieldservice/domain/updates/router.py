"""Job update router - FastAPI endpoints for the job timeline"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import JobUpdateCreate, JobUpdateResponse
from .service import JobUpdateService

router = APIRouter(prefix="/jobs/{job_id}/updates", tags=["Job Updates"])


def get_job_update_service(db: Session = Depends(get_db)) -> JobUpdateService:
    """Dependency injection for JobUpdateService"""
    return JobUpdateService(db)


@router.get("")
async def list_updates(
    job_id: str,
    profile: Profile = Depends(get_current_profile),
    service: JobUpdateService = Depends(get_job_update_service),
):
    """Get a job's timeline, newest first"""
    updates = service.list_updates(job_id, profile)
    return {"updates": [JobUpdateResponse.from_model(u) for u in updates]}


@router.post("", status_code=201)
async def create_update(
    job_id: str,
    data: JobUpdateCreate,
    profile: Profile = Depends(get_current_profile),
    service: JobUpdateService = Depends(get_job_update_service),
):
    """Post a timeline entry, optionally changing the job's status"""
    update = service.create_update(job_id, data, profile)
    return {"update": JobUpdateResponse.from_model(update)}
