# src/shared/__init__.py
"""
Общий код для вызывающего слоя и движка матчинга.

Модули:
- models: DTO поездок и запроса на матчинг (Pydantic)
"""

__all__: list[str] = []
