"""Jobs domain - Job records and the status machine"""

from .router import router
from .service import JobService

__all__ = ["router", "JobService"]
