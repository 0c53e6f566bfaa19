# src/core/geo/__init__.py
"""
Геометрия маршрутов.
Декодирование encoded polyline и расстояния по большой окружности.
"""

from src.core.geo.models import GeoPoint
from src.core.geo.polyline import DecodeError, decode_polyline, encode_polyline
from src.core.geo.distance import haversine_distance, distance_between

__all__ = [
    "GeoPoint",
    "DecodeError",
    "decode_polyline",
    "encode_polyline",
    "haversine_distance",
    "distance_between",
]
