# src/core/matching/route_matcher.py
"""
Проверка, проходит ли маршрут поездки рядом с точками пассажира.

Маршрут подходит, если рядом с ним есть и точка посадки, и точка высадки,
причём посадка встречается раньше высадки по ходу движения.

Длинные маршруты не просматриваются целиком: берётся около 20 равномерно
распределённых точек. Из-за этого совпадение, попавшее между выборками,
может быть пропущено.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from src.common.constants import EXHAUSTIVE_SCAN_MAX_POINTS, ROUTE_SAMPLE_COUNT
from src.core.geo.distance import distance_between
from src.core.geo.models import GeoPoint


@dataclass(frozen=True)
class RouteMatch:
    """Результат проверки одного маршрута."""
    matched: bool
    origin_index: Optional[int] = None
    destination_index: Optional[int] = None
    stride: int = 1


def compute_stride(
    point_count: int,
    *,
    exhaustive_max_points: int = EXHAUSTIVE_SCAN_MAX_POINTS,
    sample_count: int = ROUTE_SAMPLE_COUNT,
) -> int:
    """
    Шаг выборки точек маршрута.

    До exhaustive_max_points точек — шаг 1 (полный просмотр),
    иначе point_count // sample_count, но не меньше 1.
    """
    if point_count <= exhaustive_max_points:
        return 1
    return max(1, point_count // sample_count)


def match_route(
    points: Sequence[GeoPoint],
    origin: GeoPoint,
    destination: GeoPoint,
    radius_km: float,
    *,
    exhaustive_max_points: int = EXHAUSTIVE_SCAN_MAX_POINTS,
    sample_count: int = ROUTE_SAMPLE_COUNT,
) -> RouteMatch:
    """
    Проверяет маршрут против точек пассажира.

    Args:
        points: Декодированный маршрут (может быть пустым)
        origin: Точка посадки пассажира
        destination: Точка высадки пассажира
        radius_km: Допустимое расстояние до маршрута в км

    Returns:
        RouteMatch; индексы — первые выборочные точки в радиусе
    """
    stride = compute_stride(
        len(points),
        exhaustive_max_points=exhaustive_max_points,
        sample_count=sample_count,
    )

    origin_index: Optional[int] = None
    destination_index: Optional[int] = None

    for index in range(0, len(points), stride):
        point = points[index]

        if origin_index is None and distance_between(point, origin) <= radius_km:
            origin_index = index

        if destination_index is None and distance_between(point, destination) <= radius_km:
            destination_index = index

        if origin_index is not None and destination_index is not None:
            break

    matched = (
        origin_index is not None
        and destination_index is not None
        and origin_index < destination_index
    )

    return RouteMatch(
        matched=matched,
        origin_index=origin_index,
        destination_index=destination_index,
        stride=stride,
    )


def is_route_match(
    points: Sequence[GeoPoint],
    origin: GeoPoint,
    destination: GeoPoint,
    radius_km: float,
) -> bool:
    """Только решение, без индексов."""
    return match_route(points, origin, destination, radius_km).matched
