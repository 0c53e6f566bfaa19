# src/config/loader.py
"""
Загрузка настроек движка матчинга.
Базовые значения лежат в config/config.json.
Отдельные значения переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.common.constants import (
    DEFAULT_MATCH_RADIUS_KM,
    EXHAUSTIVE_SCAN_MAX_POINTS,
    ROUTE_SAMPLE_COUNT,
    LogFormat,
)


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Корень репозитория (на уровень выше src/)."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Путь к config/config.json."""
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Читает config.json как плоский словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "carpool_matching"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = LogFormat.COLORED.value
    LOG_MAX_BYTES: int = 10485760

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Приводит уровень к верхнему регистру."""
        return str(v).upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Допускаются только известные форматы."""
        allowed = {item.value for item in LogFormat}
        if v not in allowed:
            raise ValueError(f"LOG_FORMAT должен быть одним из {sorted(allowed)}")
        return v


class MatchingSettings(BaseModel):
    """Настройки матчинга поездок по маршруту."""
    DEFAULT_RADIUS_KM: float = Field(DEFAULT_MATCH_RADIUS_KM, gt=0)
    EXHAUSTIVE_SCAN_MAX_POINTS: int = Field(EXHAUSTIVE_SCAN_MAX_POINTS, ge=1)
    ROUTE_SAMPLE_COUNT: int = Field(ROUTE_SAMPLE_COUNT, ge=1)


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Настройки приложения, разложенные по секциям.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    system: SystemSettings = Field(default_factory=SystemSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)

    @classmethod
    def from_dict(cls, config_data: dict[str, Any]) -> "Settings":
        """
        Создаёт объект Settings из плоского словаря config.json.
        LOG_LEVEL, LOG_FORMAT и ENVIRONMENT переопределяются из окружения.
        """
        # Ключи, начинающиеся с _comment_, — комментарии
        filtered_data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        return cls(
            system=SystemSettings(
                PROJECT_NAME=filtered_data.get("PROJECT_NAME", "carpool_matching"),
                VERSION=filtered_data.get("VERSION", "1.0.0"),
                DEBUG=filtered_data.get("DEBUG", False),
                ENVIRONMENT=os.getenv("ENVIRONMENT", filtered_data.get("ENVIRONMENT", "development")),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=os.getenv("LOG_LEVEL", filtered_data.get("LOG_LEVEL", "INFO")),
                LOG_TO_FILE=filtered_data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=filtered_data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_FORMAT=os.getenv("LOG_FORMAT", filtered_data.get("LOG_FORMAT", LogFormat.COLORED.value)),
                LOG_MAX_BYTES=filtered_data.get("LOG_MAX_BYTES", 10485760),
            ),
            matching=MatchingSettings(
                DEFAULT_RADIUS_KM=filtered_data.get("DEFAULT_RADIUS_KM", DEFAULT_MATCH_RADIUS_KM),
                EXHAUSTIVE_SCAN_MAX_POINTS=filtered_data.get("EXHAUSTIVE_SCAN_MAX_POINTS", EXHAUSTIVE_SCAN_MAX_POINTS),
                ROUTE_SAMPLE_COUNT=filtered_data.get("ROUTE_SAMPLE_COUNT", ROUTE_SAMPLE_COUNT),
            ),
        )

    @classmethod
    def from_config_json(cls) -> "Settings":
        """Создаёт объект Settings из config.json."""
        return cls.from_dict(load_config_json())


@lru_cache()
def get_settings() -> Settings:
    """
    Настройки процесса (кэшируются после первого вызова).
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Модульный синглтон: from src.config import settings
settings = get_settings()
