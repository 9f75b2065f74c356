"""Assignment service - Linking team members to jobs"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...database import transaction
from ...errors import ConflictError, InvalidStateError, NotFoundError, PermissionDeniedError
from ...models import JobAssignment, Profile, TeamMember
from ...policy import ADMIN, authorize, check_job_access
from ..jobs.status import is_terminal
from ..notifications.service import NotificationService
from .repository import AssignmentRepository
from .schemas import AssignmentCreate

logger = logging.getLogger(__name__)


class AssignmentService:
    """Service layer for assignment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AssignmentRepository()
        self.notifications = NotificationService(db)

    def list_assignments(self, job_id: str, actor: Profile) -> list[JobAssignment]:
        authorize(actor, "read", "assignment")
        if not self.repo.get_job(self.db, job_id):
            raise NotFoundError("Job not found")
        if not check_job_access(self.db, actor, job_id):
            raise PermissionDeniedError("Access denied")
        return self.repo.get_assignments(self.db, job_id)

    def assign(self, job_id: str, data: AssignmentCreate, actor: Profile) -> JobAssignment:
        """
        Assign a team member to a job.

        Raises:
            PermissionDeniedError: actor is not admin or manager
            NotFoundError: job or active team member missing, or either belongs to
                another company
            InvalidStateError: job is completed or cancelled
            ConflictError: the team member is already on the job
        """
        authorize(actor, "create", "assignment", "Insufficient permissions to assign team members")

        job = self.repo.get_job(self.db, job_id)
        if not job or (actor.role != ADMIN and actor.company_id != job.company_id):
            raise NotFoundError("Job not found")

        team_member = self.repo.get_team_member(self.db, data.team_member_id)
        if (
            not team_member
            or not team_member.is_active
            or team_member.company_id != job.company_id
        ):
            raise NotFoundError("Team member not found or inactive")

        if is_terminal(job.status):
            raise InvalidStateError(f"Cannot assign team members to a {job.status} job")

        if self.repo.get_assignment(self.db, job_id, team_member.id):
            raise ConflictError("Team member is already assigned to this job")

        logger.info(f"📥 Assigning team member {team_member.id} to job {job_id} as {data.role}")
        try:
            with transaction(self.db):
                assignment = self.repo.create_assignment(
                    self.db,
                    {
                        "job_id": job_id,
                        "team_member_id": team_member.id,
                        "role": data.role,
                        "assigned_by": actor.id,
                    },
                )
        except IntegrityError as e:
            logger.warning(f"⚠️ Concurrent duplicate assignment for job {job_id}: {e.orig}")
            raise ConflictError("Team member is already assigned to this job") from e

        logger.info(f"✅ Assignment created: {assignment.id}")
        self.notifications.notify_assigned(job, team_member.profile_id)
        return self.repo.get_assignment_by_id(self.db, assignment.id)

    def list_team_members(self, actor: Profile) -> list[TeamMember]:
        """Active team members of the actor's company; admins without a company see all"""
        authorize(actor, "list", "team_member")
        return self.repo.get_active_team_members(self.db, actor.company_id)
