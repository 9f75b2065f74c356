"""Notifications domain - Fan-out on job events and the user inbox"""

from .router import router
from .service import NotificationService

__all__ = ["router", "NotificationService"]
