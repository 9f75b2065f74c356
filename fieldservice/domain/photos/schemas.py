"""Photo schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

PhotoType = Literal["before", "after", "issue", "other"]
PHOTO_TYPES = ("before", "after", "issue", "other")


class JobPhotoResponse(BaseModel):
    id: str
    job_id: str
    uploaded_by: str
    type: str
    caption: Optional[str] = None
    url: str
    created_at: datetime


class PhotoUpdate(BaseModel):
    """Editable photo metadata; only the fields sent are applied"""

    type: Optional[PhotoType] = None
    caption: Optional[str] = None
