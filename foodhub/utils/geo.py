"""
Great-circle distance and delivery time helpers
"""
import math
from numbers import Real
from typing import Optional, Tuple

from foodhub.config import settings
from foodhub.exceptions import ValidationError

# Keeps points exactly on the radius inside the box despite float rounding
BOX_MARGIN_DEGREES = 1e-6


def validate_coordinates(latitude, longitude) -> None:
    """Raise ValidationError unless latitude/longitude are finite numbers in range"""
    for value in (latitude, longitude):
        if isinstance(value, bool) or not isinstance(value, Real) or math.isnan(value):
            raise ValidationError(
                "Latitude and longitude must be numbers",
                details={"latitude": latitude, "longitude": longitude}
            )

    if latitude < -90 or latitude > 90:
        raise ValidationError("Latitude must be between -90 and 90 degrees", details={"latitude": latitude})

    if longitude < -180 or longitude > 180:
        raise ValidationError("Longitude must be between -180 and 180 degrees", details={"longitude": longitude})


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    earth_radius_meters: float = settings.EARTH_RADIUS_METERS
) -> float:
    """Great-circle distance between two points, in meters"""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return earth_radius_meters * c


def estimate_delivery_minutes(
    distance_meters: float,
    base_minutes: float = settings.ETA_BASE_MINUTES,
    minutes_per_km: float = settings.ETA_MINUTES_PER_KM
) -> int:
    """Fixed base time plus a fixed per-km rate, rounded half up to whole minutes"""
    distance_km = distance_meters / 1000
    return int(math.floor(base_minutes + distance_km * minutes_per_km + 0.5))


def bounding_box(
    latitude: float,
    longitude: float,
    radius_meters: float,
    earth_radius_meters: float = settings.EARTH_RADIUS_METERS
) -> Tuple[float, float, Optional[float], Optional[float]]:
    """
    Smallest lat/lon box that contains every point within ``radius_meters``.

    Returns (min_lat, max_lat, min_lon, max_lon). The longitude bounds are
    None when the circle reaches a pole or crosses the antimeridian, in which
    case every longitude has to be considered.
    """
    angular_radius = radius_meters / earth_radius_meters
    lat_delta = math.degrees(angular_radius) + BOX_MARGIN_DEGREES
    min_lat = max(latitude - lat_delta, -90.0)
    max_lat = min(latitude + lat_delta, 90.0)

    if angular_radius >= math.pi / 2:
        return min_lat, max_lat, None, None

    cos_lat = math.cos(math.radians(latitude))
    sin_radius = math.sin(angular_radius)
    if sin_radius >= cos_lat:
        return min_lat, max_lat, None, None

    lon_delta = math.degrees(math.asin(sin_radius / cos_lat)) + BOX_MARGIN_DEGREES
    min_lon = longitude - lon_delta
    max_lon = longitude + lon_delta
    if min_lon < -180 or max_lon > 180:
        return min_lat, max_lat, None, None
    return min_lat, max_lat, min_lon, max_lon
