# src/core/__init__.py
"""
Доменный слой (Core Domain).
Чистая логика матчинга, независимая от инфраструктуры.
"""

from src.core.geo import GeoPoint, DecodeError, decode_polyline, haversine_distance
from src.core.matching import MatchQuery, MatchingService, NoMatchError

__all__ = [
    "GeoPoint",
    "DecodeError",
    "decode_polyline",
    "haversine_distance",
    "MatchQuery",
    "MatchingService",
    "NoMatchError",
]
