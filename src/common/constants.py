# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class LogFormat(str, Enum):
    """Форматы вывода логов."""
    COLORED = "colored"
    JSON = "json"


# Радиус поиска по умолчанию (км), если клиент не передал положительное значение
DEFAULT_MATCH_RADIUS_KM: float = 0.5

# Маршруты до этой длины проверяются полностью
EXHAUSTIVE_SCAN_MAX_POINTS: int = 50

# Сколько точек берём из длинного маршрута
ROUTE_SAMPLE_COUNT: int = 20

# Средний радиус Земли (км)
EARTH_RADIUS_KM: float = 6371.0

# Масштаб координат в encoded polyline
POLYLINE_PRECISION: float = 1e5
