"""Locations domain - Team member position tracking"""

from .router import router
from .service import LocationService

__all__ = ["router", "LocationService"]
