import math

from worktime.errors import ValidationFailed
from worktime.models import CompanyLocation

EARTH_RADIUS_M = 6_371_000


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def check_location(
    latitude: float | None, longitude: float | None, target: CompanyLocation
) -> dict:
    # 0.0 is a real coordinate, only absent values are rejected
    if latitude is None or longitude is None:
        raise ValidationFailed("Wymagane są współrzędne latitude i longitude")
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise ValidationFailed("Nieprawidłowe współrzędne")

    distance = haversine_distance(
        latitude, longitude, target.latitude, target.longitude
    )
    return {
        "isWithin": distance <= target.radius,
        "distance": round(distance),
        "radius": target.radius,
    }
