"""Location service - Recording and reading team member positions"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...database import transaction
from ...errors import NotFoundError, PermissionDeniedError, ValidationError
from ...models import Profile, TeamLocation, TeamMember, utcnow
from ...policy import ADMIN, TEAM, authorize, is_privileged, team_member_record_for
from .repository import LocationRepository
from .schemas import LocationCreate, LocationPoint, PrivacySettings, TeamMemberBrief, TeamMemberLocation

logger = logging.getLogger(__name__)


class LocationService:
    """Service layer for location tracking"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = LocationRepository()

    def record_location(self, data: LocationCreate, actor: Profile) -> TeamLocation:
        """Append a sample for the actor's own team member record"""
        authorize(actor, "create", "location", "Only team members and managers can update locations")

        team_member = team_member_record_for(self.db, actor)
        if not team_member:
            raise NotFoundError("Team member record not found")

        with transaction(self.db):
            location = self.repo.add_location(
                self.db,
                {
                    "team_member_id": team_member.id,
                    "latitude": data.latitude,
                    "longitude": data.longitude,
                    "accuracy": data.accuracy,
                    "timestamp": utcnow(),
                },
            )

        logger.debug(f"📍 Location recorded for team member {team_member.id}")
        return location

    def _get_readable_member(self, team_member_id: str, actor: Profile) -> TeamMember:
        authorize(actor, "read", "location")
        team_member = self.repo.get_team_member(self.db, team_member_id)
        if not team_member:
            raise NotFoundError("Team member not found")
        if actor.role != ADMIN and team_member.company_id != actor.company_id:
            raise PermissionDeniedError("You can only view team members from your company")
        return team_member

    def get_latest_location(self, team_member_id: str, actor: Profile) -> Optional[TeamLocation]:
        self._get_readable_member(team_member_id, actor)
        return self.repo.get_latest_location(self.db, team_member_id)

    def get_company_locations(
        self, actor: Profile, company_id: Optional[str] = None
    ) -> list[TeamMemberLocation]:
        """One entry per team member of the company, with their latest sample or None"""
        authorize(actor, "read", "location")
        company_id = company_id or actor.company_id
        if not company_id:
            raise ValidationError("Company ID is required")
        if actor.role != ADMIN and company_id != actor.company_id:
            raise PermissionDeniedError("You can only view team members from your company")

        team_members = self.repo.get_company_team_members(self.db, company_id)
        latest = self.repo.get_latest_locations(self.db, [tm.id for tm in team_members])

        entries = []
        for team_member in team_members:
            profile = team_member.profile
            location = latest.get(team_member.id)
            entries.append(
                TeamMemberLocation(
                    teamMember=TeamMemberBrief(
                        id=team_member.id,
                        name=(profile.full_name if profile else None) or "Unknown",
                        avatar=profile.avatar_url if profile else None,
                    ),
                    location=LocationPoint.model_validate(location) if location else None,
                )
            )
        return entries

    def get_history(
        self,
        team_member_id: str,
        actor: Profile,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[TeamLocation]:
        if start and end and start > end:
            raise ValidationError("start must be before end")
        self._get_readable_member(team_member_id, actor)
        return self.repo.get_history(self.db, team_member_id, start, end)

    def delete_history(self, team_member_id: str, actor: Profile) -> int:
        """Erase a team member's trail; team members may only erase their own"""
        team_member = self.repo.get_team_member(self.db, team_member_id)
        if not team_member:
            raise NotFoundError("Team member not found")

        if not is_privileged(actor):
            if actor.role != TEAM or team_member.profile_id != actor.id:
                raise PermissionDeniedError("You can only delete your own location data")

        with transaction(self.db):
            deleted = self.repo.delete_history(self.db, team_member_id)

        logger.info(f"🗑️ Deleted {deleted} location sample(s) for team member {team_member_id}")
        return deleted

    def purge_older_than(self, days: int) -> int:
        cutoff = utcnow() - timedelta(days=days)
        with transaction(self.db):
            deleted = self.repo.delete_older_than(self.db, cutoff)
        logger.info(f"🧹 Purged {deleted} location sample(s) older than {days} days")
        return deleted

    def get_privacy(self, actor: Profile) -> PrivacySettings:
        return PrivacySettings.from_profile(actor)

    def update_privacy(self, settings: PrivacySettings, actor: Profile) -> PrivacySettings:
        with transaction(self.db):
            self.repo.update_privacy(self.db, actor, settings.to_columns())
        logger.info(f"🔒 Privacy settings updated for profile {actor.id}")
        return PrivacySettings.from_profile(actor)
