"""Assignment router - Job assignments and the team member directory"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import AssignmentCreate, AssignmentResponse, TeamMemberResponse
from .service import AssignmentService

router = APIRouter(prefix="/jobs/{job_id}/assignments", tags=["Assignments"])
team_members_router = APIRouter(prefix="/team-members", tags=["Team Members"])


def get_assignment_service(db: Session = Depends(get_db)) -> AssignmentService:
    """Dependency injection for AssignmentService"""
    return AssignmentService(db)


@router.get("")
async def list_assignments(
    job_id: str,
    profile: Profile = Depends(get_current_profile),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Get the team members assigned to a job"""
    assignments = service.list_assignments(job_id, profile)
    return {"assignments": [AssignmentResponse.from_model(a) for a in assignments]}


@router.post("", status_code=201)
async def create_assignment(
    job_id: str,
    data: AssignmentCreate,
    profile: Profile = Depends(get_current_profile),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Assign a team member to a job"""
    assignment = service.assign(job_id, data, profile)
    return {"assignment": AssignmentResponse.from_model(assignment)}


@team_members_router.get("")
async def list_team_members(
    profile: Profile = Depends(get_current_profile),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Get all active team members of the current user's company"""
    team_members = service.list_team_members(profile)
    return {"teamMembers": [TeamMemberResponse.from_model(tm) for tm in team_members]}
