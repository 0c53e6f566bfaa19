# src/core/geo/models.py
"""
Геометрические примитивы движка матчинга.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    """Точка в градусах (широта, долгота). Диапазон не проверяется."""
    latitude: float
    longitude: float

    def as_tuple(self) -> tuple[float, float]:
        """Возвращает пару (lat, lng)."""
        return self.latitude, self.longitude
