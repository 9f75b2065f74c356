"""Assignments domain - Team members on jobs"""

from .router import router, team_members_router
from .service import AssignmentService

__all__ = ["router", "team_members_router", "AssignmentService"]
