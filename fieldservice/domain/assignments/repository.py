"""Assignment repository - Database operations for job assignments"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Job, JobAssignment, Profile, TeamMember


class AssignmentRepository:
    """Repository for assignment and team member database operations"""

    @staticmethod
    def get_job(db: Session, job_id: str) -> Optional[Job]:
        return db.query(Job).filter(Job.id == job_id).first()

    @staticmethod
    def get_team_member(db: Session, team_member_id: str) -> Optional[TeamMember]:
        return (
            db.query(TeamMember)
            .options(joinedload(TeamMember.profile))
            .filter(TeamMember.id == team_member_id)
            .first()
        )

    @staticmethod
    def get_assignment(db: Session, job_id: str, team_member_id: str) -> Optional[JobAssignment]:
        return (
            db.query(JobAssignment)
            .filter(JobAssignment.job_id == job_id, JobAssignment.team_member_id == team_member_id)
            .first()
        )

    @staticmethod
    def get_assignment_by_id(db: Session, assignment_id: str) -> Optional[JobAssignment]:
        return (
            db.query(JobAssignment)
            .options(joinedload(JobAssignment.team_member).joinedload(TeamMember.profile))
            .filter(JobAssignment.id == assignment_id)
            .first()
        )

    @staticmethod
    def get_assignments(db: Session, job_id: str) -> list[JobAssignment]:
        return (
            db.query(JobAssignment)
            .options(joinedload(JobAssignment.team_member).joinedload(TeamMember.profile))
            .filter(JobAssignment.job_id == job_id)
            .order_by(JobAssignment.assigned_at.asc())
            .all()
        )

    @staticmethod
    def create_assignment(db: Session, assignment_data: dict) -> JobAssignment:
        assignment = JobAssignment(**assignment_data)
        db.add(assignment)
        db.flush()
        return assignment

    @staticmethod
    def get_active_team_members(db: Session, company_id: Optional[str]) -> list[TeamMember]:
        """Active team members ordered by name; every company when company_id is None"""
        query = (
            db.query(TeamMember)
            .join(Profile, Profile.id == TeamMember.profile_id)
            .options(joinedload(TeamMember.profile))
            .filter(TeamMember.is_active.is_(True))
        )
        if company_id:
            query = query.filter(TeamMember.company_id == company_id)
        return query.order_by(Profile.full_name.asc()).all()
