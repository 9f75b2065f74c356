"""Device-side location tracking: sampling and upload"""

from .sampler import LocationSampler, Position, PositionSourceError
from .uploader import LocationUploader, LocationUploadError

__all__ = [
    "LocationSampler",
    "Position",
    "PositionSourceError",
    "LocationUploader",
    "LocationUploadError",
]
