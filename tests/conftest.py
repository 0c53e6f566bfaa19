# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

# Переменные окружения выставляются до импорта src.config
os.environ.setdefault("ENVIRONMENT", "test")

from src.core.geo import GeoPoint, encode_polyline
from src.shared.models import RideDTO


# Каноничный пример из документации Google Polyline
CANONICAL_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
CANONICAL_POINTS = [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]

# Шаг ~1.1 км по широте: соседние точки заведомо дальше 0.5 км
ROUTE_STEP_DEG = 0.01


def make_straight_route(
    count: int,
    *,
    start_lat: float = 50.0,
    lng: float = 30.0,
    step: float = ROUTE_STEP_DEG,
) -> list[GeoPoint]:
    """Маршрут строго на север с равным шагом."""
    return [GeoPoint(round(start_lat + i * step, 5), lng) for i in range(count)]


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "тестовый конфиг",
        "PROJECT_NAME": "carpool_matching_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "debug",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "json",
        "LOG_MAX_BYTES": 1048576,
        "DEFAULT_RADIUS_KM": 1.5,
        "EXHAUSTIVE_SCAN_MAX_POINTS": 40,
        "ROUTE_SAMPLE_COUNT": 10,
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ МАРШРУТОВ И ПОЕЗДОК
# =============================================================================

@pytest.fixture
def straight_route():
    """Фабрика прямых маршрутов (см. make_straight_route)."""
    return make_straight_route


@pytest.fixture
def short_route() -> list[GeoPoint]:
    """Маршрут из 10 точек (полный просмотр)."""
    return make_straight_route(10)


@pytest.fixture
def canonical_polyline() -> tuple[str, list[tuple[float, float]]]:
    """Каноничная строка и её точки."""
    return CANONICAL_POLYLINE, CANONICAL_POINTS


@pytest.fixture
def now() -> datetime:
    """Фиксированное текущее время."""
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def ride_factory(now: datetime):
    """Фабрика поездок с маршрутом."""
    def _make(ride_id: int, route: str | list[GeoPoint], **kwargs: Any) -> RideDTO:
        encoded = route if isinstance(route, str) else encode_polyline(route)
        data = {
            "id": ride_id,
            "driver_id": 1000 + ride_id,
            "origin": "Kyiv",
            "destination": "Boryspil",
            "departure_at": now.replace(hour=18),
            "seats_available": 3,
            "route": encoded,
        }
        data.update(kwargs)
        return RideDTO(**data)
    return _make
