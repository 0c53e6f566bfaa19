# src/shared/models/__init__.py
"""
Общие DTO и Pydantic-модели для обмена с вызывающим слоем.
"""

from src.shared.models.ride import (
    RideDTO,
    MatchRideRequest,
    MatchRideResponse,
)

__all__ = [
    "RideDTO",
    "MatchRideRequest",
    "MatchRideResponse",
]
