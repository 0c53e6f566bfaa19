# src/core/geo/polyline.py
"""
Декодер маршрутов в формате encoded polyline.

Формат: символы со смещением 63, 5-битные группы с битом продолжения 0x20,
zig-zag знак, координаты умножены на 1e5. Совместим со стандартными
энкодерами (Google Directions API и др.).
"""

from __future__ import annotations

from typing import Iterable

from src.common.constants import POLYLINE_PRECISION
from src.core.geo.models import GeoPoint


_CHAR_OFFSET = 63
_CONTINUATION_BIT = 0x20
_CHUNK_MASK = 0x1F
_MIN_CHUNK = -32
_MAX_CHUNK = 95


class DecodeError(ValueError):
    """Строка маршрута повреждена или обрезана."""

    def __init__(self, message: str, index: int) -> None:
        super().__init__(f"{message} (позиция {index})")
        self.index = index


def _decode_value(encoded: str, index: int) -> tuple[int, int]:
    """
    Читает одно varint-значение начиная с index.

    Returns:
        (дельта со знаком, индекс следующего символа)

    Raises:
        DecodeError: строка закончилась внутри значения или символ вне диапазона
    """
    length = len(encoded)
    shift = 0
    result = 0

    while True:
        if index >= length:
            raise DecodeError("Неожиданный конец строки маршрута", index)

        chunk = ord(encoded[index]) - _CHAR_OFFSET
        if chunk < _MIN_CHUNK or chunk > _MAX_CHUNK:
            raise DecodeError("Недопустимый символ в строке маршрута", index)

        index += 1
        result |= (chunk & _CHUNK_MASK) << shift
        shift += 5
        if chunk < _CONTINUATION_BIT:
            break

    if result & 1:
        return ~(result >> 1), index
    return result >> 1, index


def decode_polyline(encoded: str) -> list[GeoPoint]:
    """
    Декодирует маршрут в упорядоченный список точек.

    Args:
        encoded: Строка encoded polyline

    Returns:
        Точки в порядке кодирования (от начала маршрута к концу).
        Пустая строка даёт пустой список.

    Raises:
        DecodeError: строка повреждена
    """
    points: list[GeoPoint] = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        delta_lat, index = _decode_value(encoded, index)
        delta_lng, index = _decode_value(encoded, index)

        lat += delta_lat
        lng += delta_lng

        points.append(GeoPoint(
            latitude=lat / POLYLINE_PRECISION,
            longitude=lng / POLYLINE_PRECISION,
        ))

    return points


def _round_half_away(value: float) -> int:
    # Как в эталонном энкодере: round() в Python банковский
    if value < 0:
        return -int(-value + 0.5)
    return int(value + 0.5)


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1

    chunks = []
    while value >= _CONTINUATION_BIT:
        chunks.append(chr((_CONTINUATION_BIT | (value & _CHUNK_MASK)) + _CHAR_OFFSET))
        value >>= 5
    chunks.append(chr(value + _CHAR_OFFSET))
    return "".join(chunks)


def encode_polyline(points: Iterable[GeoPoint | tuple[float, float]]) -> str:
    """
    Кодирует последовательность точек в encoded polyline.

    Принимает GeoPoint или пары (lat, lng).
    """
    parts = []
    prev_lat = 0
    prev_lng = 0

    for point in points:
        if isinstance(point, GeoPoint):
            latitude, longitude = point.as_tuple()
        else:
            latitude, longitude = point

        lat = _round_half_away(latitude * POLYLINE_PRECISION)
        lng = _round_half_away(longitude * POLYLINE_PRECISION)

        parts.append(_encode_value(lat - prev_lat))
        parts.append(_encode_value(lng - prev_lng))

        prev_lat, prev_lng = lat, lng

    return "".join(parts)
