from .router import router
from .service import PhotoService

__all__ = ["router", "PhotoService"]
