"""Assignment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...models import JobAssignment, TeamMember
from ...shared.validators import require_uuid

AssignmentRole = Literal["cleaner", "lead", "supervisor"]


class AssignmentCreate(BaseModel):
    """Schema for assigning a team member to a job"""

    team_member_id: str
    role: AssignmentRole = "cleaner"

    @field_validator("team_member_id")
    @classmethod
    def validate_team_member_id(cls, v):
        return require_uuid(v, "team_member_id")


class TeamMemberResponse(BaseModel):
    """Team member with the profile fields pulled up to the top level"""

    id: str
    company_id: str
    profile_id: str
    employee_id: Optional[str] = None
    is_active: bool
    performance_rating: Optional[float] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_model(cls, team_member: TeamMember) -> "TeamMemberResponse":
        profile = team_member.profile
        return cls(
            id=team_member.id,
            company_id=team_member.company_id,
            profile_id=team_member.profile_id,
            employee_id=team_member.employee_id,
            is_active=team_member.is_active,
            performance_rating=team_member.performance_rating,
            full_name=profile.full_name if profile else None,
            email=profile.email if profile else None,
            phone=profile.phone if profile else None,
            avatar_url=profile.avatar_url if profile else None,
        )


class AssignmentResponse(BaseModel):
    id: str
    job_id: str
    team_member_id: str
    role: str
    assigned_by: Optional[str] = None
    assigned_at: datetime
    team_member: Optional[TeamMemberResponse] = None

    @classmethod
    def from_model(cls, assignment: JobAssignment) -> "AssignmentResponse":
        return cls(
            id=assignment.id,
            job_id=assignment.job_id,
            team_member_id=assignment.team_member_id,
            role=assignment.role,
            assigned_by=assignment.assigned_by,
            assigned_at=assignment.assigned_at,
            team_member=(
                TeamMemberResponse.from_model(assignment.team_member)
                if assignment.team_member
                else None
            ),
        )
