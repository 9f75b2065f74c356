"""
Role-based authorization.

One capability table maps (action, resource) to the roles allowed to perform
it, and check_job_access decides whether a profile may see a given job.
Every service goes through these two functions.
"""

import logging

from sqlalchemy.orm import Session

from .errors import PermissionDeniedError
from .models import Customer, Job, JobAssignment, Profile, TeamMember

logger = logging.getLogger(__name__)

ADMIN = "admin"
MANAGER = "manager"
CUSTOMER = "customer"
TEAM = "team"

ROLES = (ADMIN, MANAGER, CUSTOMER, TEAM)
PRIVILEGED_ROLES = frozenset({ADMIN, MANAGER})

CAPABILITIES: dict[tuple[str, str], frozenset[str]] = {
    ("create", "job"): frozenset({ADMIN, MANAGER, CUSTOMER}),
    ("read", "job"): frozenset(ROLES),
    ("update", "job"): frozenset({ADMIN, MANAGER}),
    ("delete", "job"): frozenset({ADMIN}),
    ("create", "assignment"): frozenset({ADMIN, MANAGER}),
    ("read", "assignment"): frozenset(ROLES),
    ("create", "job_update"): frozenset({ADMIN, MANAGER, TEAM}),
    ("read", "job_update"): frozenset(ROLES),
    ("create", "job_photo"): frozenset({ADMIN, MANAGER, TEAM}),
    ("read", "job_photo"): frozenset(ROLES),
    ("update", "job_photo"): frozenset({ADMIN, MANAGER, TEAM}),
    ("delete", "job_photo"): frozenset({ADMIN, MANAGER, TEAM}),
    ("create", "geofence"): frozenset({ADMIN, MANAGER}),
    ("read", "geofence"): frozenset(ROLES),
    ("update", "geofence"): frozenset({ADMIN, MANAGER}),
    ("delete", "geofence"): frozenset({ADMIN, MANAGER}),
    ("list", "team_member"): frozenset({ADMIN, MANAGER}),
    ("create", "location"): frozenset({TEAM, MANAGER}),
    ("read", "location"): frozenset({ADMIN, MANAGER, TEAM}),
}


def is_allowed(role: str, action: str, resource: str) -> bool:
    return role in CAPABILITIES.get((action, resource), frozenset())


def authorize(profile: Profile, action: str, resource: str, message: str | None = None) -> None:
    """Raise PermissionDeniedError unless the profile's role may do action on resource"""
    if not is_allowed(profile.role, action, resource):
        logger.warning(f"⚠️ Profile {profile.id} ({profile.role}) denied {action} on {resource}")
        raise PermissionDeniedError(message or "Insufficient permissions")


def is_privileged(profile: Profile) -> bool:
    return profile.role in PRIVILEGED_ROLES


def customer_record_for(db: Session, profile: Profile) -> Customer | None:
    return db.query(Customer).filter(Customer.profile_id == profile.id).first()


def team_member_record_for(db: Session, profile: Profile) -> TeamMember | None:
    return db.query(TeamMember).filter(TeamMember.profile_id == profile.id).first()


def check_job_access(db: Session, profile: Profile, job_id: str) -> bool:
    """
    Decide whether a profile may read or write data scoped to a job.

    admin/manager: always. customer: only jobs of the customer record they own.
    team: only jobs they hold an assignment on. Anything else: never.
    """
    if profile.role in PRIVILEGED_ROLES:
        return True

    if profile.role == CUSTOMER:
        customer = customer_record_for(db, profile)
        if not customer:
            return False
        return (
            db.query(Job.id).filter(Job.id == job_id, Job.customer_id == customer.id).first()
            is not None
        )

    if profile.role == TEAM:
        team_member = team_member_record_for(db, profile)
        if not team_member:
            return False
        return (
            db.query(JobAssignment.id)
            .filter(
                JobAssignment.job_id == job_id,
                JobAssignment.team_member_id == team_member.id,
            )
            .first()
            is not None
        )

    return False
