# src/shared/models/ride.py
"""
DTO поездок и запроса на матчинг.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RideDTO(BaseModel):
    """Поездка водителя, как её отдаёт слой хранения."""

    id: int = Field(..., description="ID поездки")
    driver_id: Optional[int] = Field(None, description="ID водителя")

    origin: str = Field("", max_length=255, description="Адрес отправления")
    origin_lat: Optional[float] = Field(None, description="Широта отправления")
    origin_lng: Optional[float] = Field(None, description="Долгота отправления")

    destination: str = Field("", max_length=255, description="Адрес назначения")
    destination_lat: Optional[float] = Field(None, description="Широта назначения")
    destination_lng: Optional[float] = Field(None, description="Долгота назначения")

    departure_at: Optional[datetime] = Field(None, description="Время отправления")
    seats_available: int = Field(1, ge=1, le=7, description="Свободные места")

    # Encoded polyline маршрута от отправления к назначению
    route: str = Field("", description="Маршрут (encoded polyline)")

    distance: Optional[float] = Field(None, ge=0.0, description="Длина маршрута")
    distance_type: Optional[str] = Field(None, description="Единица длины")
    duration: Optional[str] = Field(None, description="Длительность")
    price: Optional[float] = Field(None, ge=0.0, description="Цена за место")

    model_config = ConfigDict(from_attributes=True, frozen=True)


class MatchRideRequest(BaseModel):
    """Запрос пассажира на поиск попутных поездок."""

    origin_lat: float = Field(..., description="Широта посадки")
    origin_lng: float = Field(..., description="Долгота посадки")
    destination_lat: float = Field(..., description="Широта высадки")
    destination_lng: float = Field(..., description="Долгота высадки")

    from_datetime: Optional[datetime] = Field(None, description="Начало окна отправления")
    to_datetime: Optional[datetime] = Field(None, description="Конец окна отправления")

    # Радиус в км; учитывается только положительное значение
    radius: Optional[float] = Field(None, description="Радиус поиска, км")

    def effective_radius(self, default: float) -> float:
        """Радиус запроса, если он положительный, иначе default."""
        if self.radius is not None and self.radius > 0:
            return self.radius
        return default


class MatchRideResponse(BaseModel):
    """Результат матчинга."""

    data: list[RideDTO] = Field(default_factory=list)
    total: int = 0

    @classmethod
    def create(cls, rides: list[RideDTO]) -> "MatchRideResponse":
        """Собирает ответ из списка найденных поездок."""
        return cls(data=rides, total=len(rides))
