# src/core/matching/service.py
"""
Сервис поиска попутных поездок.
Декодирует маршруты поездок и отбирает те, что проходят рядом
с точками посадки и высадки пассажира в правильном порядке.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence, TypeVar

from src.common.constants import TypeMsg
from src.common.logger import log_info, log_warning
from src.core.geo.models import GeoPoint
from src.core.geo.polyline import DecodeError, decode_polyline
from src.core.matching.errors import NoMatchError
from src.core.matching.route_matcher import match_route
from src.core.matching.time_window import filter_by_departure, resolve_search_window
from src.shared.models.ride import MatchRideRequest

if TYPE_CHECKING:
    from src.config.loader import MatchingSettings


class Candidate(Protocol):
    """Поездка-кандидат: движок читает только id и route."""
    id: Any
    route: str


C = TypeVar("C", bound=Candidate)


@dataclass(frozen=True)
class MatchQuery:
    """Запрос пассажира: посадка, высадка и радиус в км."""
    origin: GeoPoint
    destination: GeoPoint
    radius_km: float

    @classmethod
    def create(
        cls,
        origin_lat: float,
        origin_lng: float,
        destination_lat: float,
        destination_lng: float,
        radius_km: Optional[float] = None,
        default_radius_km: Optional[float] = None,
    ) -> "MatchQuery":
        """
        Собирает запрос. Радиус берётся только положительный,
        иначе default_radius_km (по умолчанию — из конфига).
        """
        if default_radius_km is None:
            default_radius_km = _matching_settings().DEFAULT_RADIUS_KM

        if radius_km is None or radius_km <= 0:
            radius_km = default_radius_km

        return cls(
            origin=GeoPoint(origin_lat, origin_lng),
            destination=GeoPoint(destination_lat, destination_lng),
            radius_km=radius_km,
        )


def _matching_settings() -> MatchingSettings:
    """Секция matching из конфига (ленивый импорт)."""
    from src.config import settings
    return settings.matching


class MatchingService:
    """
    Сервис матчинга пассажира с поездками.

    Не хранит состояния между вызовами: один экземпляр можно
    использовать из нескольких потоков одновременно.
    """

    def __init__(
        self,
        default_radius_km: float | None = None,
        exhaustive_max_points: int | None = None,
        sample_count: int | None = None,
    ) -> None:
        """
        Инициализация сервиса.

        Args:
            default_radius_km: Радиус, если в запросе нет положительного (из конфига если None)
            exhaustive_max_points: Порог полного просмотра маршрута (из конфига если None)
            sample_count: Число выборочных точек длинного маршрута (из конфига если None)
        """
        if default_radius_km is None or exhaustive_max_points is None or sample_count is None:
            matching = _matching_settings()
            if default_radius_km is None:
                default_radius_km = matching.DEFAULT_RADIUS_KM
            if exhaustive_max_points is None:
                exhaustive_max_points = matching.EXHAUSTIVE_SCAN_MAX_POINTS
            if sample_count is None:
                sample_count = matching.ROUTE_SAMPLE_COUNT

        self._default_radius_km = default_radius_km
        self._exhaustive_max_points = exhaustive_max_points
        self._sample_count = sample_count

    @property
    def default_radius_km(self) -> float:
        return self._default_radius_km

    def build_query(self, request: MatchRideRequest) -> MatchQuery:
        """Строит MatchQuery из DTO запроса."""
        return MatchQuery.create(
            request.origin_lat,
            request.origin_lng,
            request.destination_lat,
            request.destination_lng,
            radius_km=request.effective_radius(self._default_radius_km),
            default_radius_km=self._default_radius_km,
        )

    def find_matches(self, query: MatchQuery, candidates: Sequence[C]) -> list[C]:
        """
        Отбирает подходящие поездки.

        Поездка с повреждённым маршрутом пропускается с предупреждением,
        остальные проверяются дальше. Порядок входа сохраняется.

        Args:
            query: Запрос пассажира
            candidates: Поездки, уже отфильтрованные по времени

        Returns:
            Подходящие поездки (возможно, пустой список)
        """
        matched: list[C] = []

        for candidate in candidates:
            try:
                points = decode_polyline(candidate.route)
            except DecodeError as e:
                log_warning(
                    f"Не удалось декодировать маршрут поездки {candidate.id}: {e}",
                    extra={"ride_id": candidate.id, "error_index": e.index},
                )
                continue

            result = match_route(
                points,
                query.origin,
                query.destination,
                query.radius_km,
                exhaustive_max_points=self._exhaustive_max_points,
                sample_count=self._sample_count,
            )

            if result.matched:
                log_info(
                    f"Поездка {candidate.id} подходит: точки {result.origin_index} -> "
                    f"{result.destination_index} (шаг {result.stride})",
                    type_msg=TypeMsg.DEBUG,
                    extra={"ride_id": candidate.id},
                )
                matched.append(candidate)

        return matched

    def match_rides(self, query: MatchQuery, candidates: Sequence[C]) -> list[C]:
        """
        То же, что find_matches, но пустой результат — исключение.

        Raises:
            NoMatchError: ни одна поездка не подошла
        """
        matched = self.find_matches(query, candidates)

        log_info(
            f"Найдено {len(matched)} из {len(candidates)} поездок в радиусе {query.radius_km} км",
            type_msg=TypeMsg.DEBUG,
        )

        if not matched:
            raise NoMatchError(checked=len(candidates))

        return matched

    def match_request(
        self,
        request: MatchRideRequest,
        rides: Sequence[C],
        *,
        now: Optional[datetime] = None,
        apply_time_window: bool = True,
    ) -> list[C]:
        """
        Полный сценарий: окно по времени, затем матчинг по маршруту.

        Raises:
            InvalidSearchWindowError: окно задано в обратном порядке
            NoMatchError: ни одна поездка не подошла
        """
        query = self.build_query(request)

        if apply_time_window:
            window = resolve_search_window(request.from_datetime, request.to_datetime, now=now)
            rides = filter_by_departure(rides, window)

        return self.match_rides(query, rides)
