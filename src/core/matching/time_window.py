# src/core/matching/time_window.py
"""
Окно поиска поездок по времени отправления.

Пассажир передаёт from/to в свободной форме: только дату или дату со
временем. Здесь они приводятся к закрытому интервалу [start, end].
Наивные from/to и время поездки считаются заданными в поясе now;
наивный now считается UTC. Границы окна возвращаются в шкале now.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Iterable, Optional, TypeVar

from src.core.matching.errors import InvalidSearchWindowError


T = TypeVar("T")


@dataclass(frozen=True)
class SearchWindow:
    """Интервал отправления [start, end] включительно."""
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        """Попадает ли момент в окно."""
        moment = _as_zone_of(moment, self.start)
        return self.start <= moment <= self.end


def _as_zone_of(value: datetime, reference: datetime) -> datetime:
    """
    Переводит value в шкалу reference.

    Наивное value получает пояс reference. Aware value при наивном
    reference переводится в UTC и теряет tzinfo.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.astimezone(reference.tzinfo)


def _now_in_zone_of(now: datetime, value: datetime) -> datetime:
    """Текущий момент в поясе value (наивный now считается UTC)."""
    if value.tzinfo is None:
        return now
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(value.tzinfo)


def _is_date_only(value: datetime) -> bool:
    return value.hour == 0 and value.minute == 0 and value.second == 0


def _start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min, tzinfo=value.tzinfo)


def _end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)


def resolve_search_window(
    from_dt: Optional[datetime] = None,
    to_dt: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> SearchWindow:
    """
    Вычисляет окно поиска.

    Правила для начала:
    - from не задан — now;
    - задана только дата: сегодня — now, другой день — начало этого дня;
    - задано время в прошлом — now, иначе само значение.

    Правила для конца:
    - to не задан — конец дня начала окна;
    - задана только дата — конец этого дня, иначе само значение.

    Raises:
        InvalidSearchWindowError: конец окна раньше начала
    """
    if now is None:
        now = datetime.now(timezone.utc)

    # Правила применяются в поясе запроса, сравнение идёт в шкале now
    if from_dt is None:
        start = now
    else:
        if from_dt.tzinfo is None:
            from_dt = from_dt.replace(tzinfo=now.tzinfo)
        local_now = _now_in_zone_of(now, from_dt)
        if _is_date_only(from_dt):
            if from_dt.date() == local_now.date():
                start = local_now
            else:
                start = _start_of_day(from_dt)
        elif from_dt < local_now:
            start = local_now
        else:
            start = from_dt

    if to_dt is None:
        end = _end_of_day(start)
    else:
        if to_dt.tzinfo is None:
            to_dt = to_dt.replace(tzinfo=now.tzinfo)
        end = _end_of_day(to_dt) if _is_date_only(to_dt) else to_dt

    start = _as_zone_of(start, now)
    end = _as_zone_of(end, now)

    if end < start:
        raise InvalidSearchWindowError("'to_datetime' must be after 'from_datetime'")

    return SearchWindow(start=start, end=end)


def filter_by_departure(candidates: Iterable[T], window: SearchWindow) -> list[T]:
    """
    Оставляет поездки, отправляющиеся внутри окна. Порядок сохраняется.

    Поездки без departure_at не отбрасываются: фильтрацию по времени
    обычно уже сделал слой хранения.
    """
    result = []
    for candidate in candidates:
        departure_at = getattr(candidate, "departure_at", None)
        if departure_at is None or window.contains(departure_at):
            result.append(candidate)
    return result
