from datetime import date, timedelta

import pytest

from fieldservice.shared.geo import haversine_distance
from fieldservice.shared.validators import (
    parse_wkt_point,
    require_uuid,
    to_wkt_point,
    validate_latitude,
    validate_longitude,
    validate_not_past,
    validate_time_of_day,
)


def test_haversine_known_distance():
    # London to Paris is roughly 344 km
    distance = haversine_distance(51.5074, -0.1278, 48.8566, 2.3522)
    assert 340_000 < distance < 348_000


def test_haversine_zero_for_same_point():
    assert haversine_distance(10.0, 10.0, 10.0, 10.0) == 0


def test_not_past_accepts_today_rejects_yesterday():
    today = date(2026, 5, 1)
    assert validate_not_past(today, today=today) == today
    with pytest.raises(ValueError):
        validate_not_past(today - timedelta(days=1), today=today)


@pytest.mark.parametrize("value,expected", [("09:30", "09:30"), ("23:59:59", "23:59"), (" 07:05 ", "07:05")])
def test_time_of_day_normalizes(value, expected):
    assert validate_time_of_day(value) == expected


@pytest.mark.parametrize("value", ["24:00", "9:30", "noon", "12:60"])
def test_time_of_day_rejects(value):
    with pytest.raises(ValueError):
        validate_time_of_day(value)


def test_coordinate_ranges():
    assert validate_latitude(-90.0) == -90.0
    assert validate_longitude(180.0) == 180.0
    with pytest.raises(ValueError):
        validate_latitude(90.1)
    with pytest.raises(ValueError):
        validate_longitude(-180.5)


def test_wkt_point_puts_longitude_first():
    assert to_wkt_point(40.5, -73.25) == "POINT(-73.25 40.5)"
    assert parse_wkt_point("POINT(-73.25 40.5)") == {"latitude": 40.5, "longitude": -73.25}
    assert parse_wkt_point("garbage") is None


def test_require_uuid():
    assert require_uuid(None) is None
    with pytest.raises(ValueError, match="Invalid customer_id"):
        require_uuid("abc", "customer_id")
