"""Shared validation utilities"""

import re
import uuid
from datetime import date
from typing import Optional

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def require_uuid(value: Optional[str], field: str = "id") -> Optional[str]:
    """
    Validate an identifier field.

    Raises:
        ValueError: If the value is present but not a UUID
    """
    if value is None:
        return value
    if not validate_uuid(value):
        raise ValueError(f"Invalid {field}")
    return str(uuid.UUID(value))


def validate_not_past(value: Optional[date], today: Optional[date] = None) -> Optional[date]:
    """
    Validate that a scheduled date is today or later.

    Raises:
        ValueError: If the date is before today
    """
    if value is None:
        return value
    today = today or date.today()
    if value < today:
        raise ValueError("Scheduled date cannot be in the past")
    return value


def validate_time_of_day(value: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a time of day to HH:MM.

    Raises:
        ValueError: If the value is not HH:MM or HH:MM:SS
    """
    if value is None:
        return value
    value = value.strip()
    if not TIME_PATTERN.match(value):
        raise ValueError("Scheduled time must be in HH:MM format")
    return value[:5]


def validate_latitude(value: float) -> float:
    if not -90.0 <= value <= 90.0:
        raise ValueError("Latitude must be between -90 and 90")
    return value


def validate_longitude(value: float) -> float:
    if not -180.0 <= value <= 180.0:
        raise ValueError("Longitude must be between -180 and 180")
    return value


def to_wkt_point(latitude: float, longitude: float) -> str:
    """Geographic point in WKT; longitude comes first"""
    return f"POINT({longitude} {latitude})"


def parse_wkt_point(value: Optional[str]) -> Optional[dict]:
    """Inverse of to_wkt_point; returns None for anything unparsable"""
    if not value:
        return None
    match = re.match(r"^POINT\(\s*(-?[\d.eE+-]+)\s+(-?[\d.eE+-]+)\s*\)$", value.strip())
    if not match:
        return None
    longitude, latitude = float(match.group(1)), float(match.group(2))
    return {"latitude": latitude, "longitude": longitude}
