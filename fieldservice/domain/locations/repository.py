"""Location repository - Database operations for team locations"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Profile, TeamLocation, TeamMember


class LocationRepository:
    """Repository for location samples and privacy settings"""

    @staticmethod
    def add_location(db: Session, location_data: dict) -> TeamLocation:
        location = TeamLocation(**location_data)
        db.add(location)
        db.flush()
        return location

    @staticmethod
    def get_team_member(db: Session, team_member_id: str) -> Optional[TeamMember]:
        return (
            db.query(TeamMember)
            .options(joinedload(TeamMember.profile))
            .filter(TeamMember.id == team_member_id)
            .first()
        )

    @staticmethod
    def get_company_team_members(db: Session, company_id: str) -> list[TeamMember]:
        return (
            db.query(TeamMember)
            .options(joinedload(TeamMember.profile))
            .filter(TeamMember.company_id == company_id)
            .order_by(TeamMember.created_at.asc())
            .all()
        )

    @staticmethod
    def get_latest_location(db: Session, team_member_id: str) -> Optional[TeamLocation]:
        return (
            db.query(TeamLocation)
            .filter(TeamLocation.team_member_id == team_member_id)
            .order_by(TeamLocation.timestamp.desc())
            .first()
        )

    @staticmethod
    def get_latest_locations(db: Session, team_member_ids: list[str]) -> dict[str, TeamLocation]:
        """Latest sample per team member, keyed by team member id"""
        if not team_member_ids:
            return {}

        latest = (
            db.query(
                TeamLocation.team_member_id.label("team_member_id"),
                func.max(TeamLocation.timestamp).label("max_timestamp"),
            )
            .filter(TeamLocation.team_member_id.in_(team_member_ids))
            .group_by(TeamLocation.team_member_id)
            .subquery()
        )
        rows = (
            db.query(TeamLocation)
            .join(
                latest,
                (TeamLocation.team_member_id == latest.c.team_member_id)
                & (TeamLocation.timestamp == latest.c.max_timestamp),
            )
            .all()
        )
        return {row.team_member_id: row for row in rows}

    @staticmethod
    def get_history(
        db: Session,
        team_member_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[TeamLocation]:
        query = db.query(TeamLocation).filter(TeamLocation.team_member_id == team_member_id)
        if start:
            query = query.filter(TeamLocation.timestamp >= start)
        if end:
            query = query.filter(TeamLocation.timestamp <= end)
        return query.order_by(TeamLocation.timestamp.asc()).all()

    @staticmethod
    def delete_history(db: Session, team_member_id: str) -> int:
        deleted = (
            db.query(TeamLocation)
            .filter(TeamLocation.team_member_id == team_member_id)
            .delete(synchronize_session=False)
        )
        db.flush()
        return deleted

    @staticmethod
    def delete_older_than(db: Session, cutoff: datetime) -> int:
        """Remove samples recorded before cutoff; returns rows removed"""
        deleted = (
            db.query(TeamLocation)
            .filter(TeamLocation.timestamp < cutoff)
            .delete(synchronize_session=False)
        )
        db.flush()
        return deleted

    @staticmethod
    def update_privacy(db: Session, profile: Profile, settings: dict) -> Profile:
        for key, value in settings.items():
            setattr(profile, key, value)
        db.flush()
        return profile
