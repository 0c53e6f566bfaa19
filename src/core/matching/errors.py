# src/core/matching/errors.py
"""
Исключения домена матчинга.
"""

from __future__ import annotations


class MatchingError(Exception):
    """Базовое исключение матчинга."""


class NoMatchError(MatchingError):
    """Ни одна поездка не подошла под запрос пассажира."""

    def __init__(self, message: str = "No matching rides found", checked: int = 0) -> None:
        super().__init__(message)
        self.checked = checked


class InvalidSearchWindowError(MatchingError, ValueError):
    """Конец окна поиска раньше начала."""
