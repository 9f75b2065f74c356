from .router import router
from .service import JobUpdateService

__all__ = ["router", "JobUpdateService"]
