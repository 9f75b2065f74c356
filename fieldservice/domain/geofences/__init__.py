from .router import router
from .service import GeofenceService

__all__ = ["router", "GeofenceService"]
