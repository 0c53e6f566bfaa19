# src/core/geo/distance.py
import math

from src.common.constants import EARTH_RADIUS_KM
from src.core.geo.models import GeoPoint


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Вычисляет расстояние между двумя точками (в км) по формуле Haversine.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) *
         math.sin(dlng / 2) ** 2)

    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def distance_between(first: GeoPoint, second: GeoPoint) -> float:
    """Расстояние между двумя GeoPoint в км."""
    return haversine_distance(first.latitude, first.longitude, second.latitude, second.longitude)
