#!/usr/bin/env python3
# main.py
"""
Точка входа: матчинг поездок из JSON-файлов.

    python main.py match --query query.json --rides rides.json

query.json — объект MatchRideRequest, rides.json — список RideDTO.
Коды выхода: 0 — найдены поездки, 1 — ничего не найдено,
2 — некорректные входные данные.
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Sequence

from pydantic import TypeAdapter, ValidationError

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info, setup_logging
from src.config import settings
from src.core.matching import InvalidSearchWindowError, MatchingService, NoMatchError
from src.shared.models import MatchRideRequest, MatchRideResponse, RideDTO


EXIT_OK = 0
EXIT_NO_MATCH = 1
EXIT_BAD_INPUT = 2

_rides_adapter = TypeAdapter(list[RideDTO])


def build_parser() -> argparse.ArgumentParser:
    """Парсер аргументов командной строки."""
    parser = argparse.ArgumentParser(
        prog="main.py",
        description=f"{settings.system.PROJECT_NAME} v{settings.system.VERSION}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    match_parser = subparsers.add_parser("match", help="Найти поездки по маршруту")
    match_parser.add_argument("--query", required=True, type=Path, help="JSON с запросом пассажира")
    match_parser.add_argument("--rides", required=True, type=Path, help="JSON со списком поездок")
    match_parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="Текущее время в ISO 8601 (для воспроизводимости)",
    )
    match_parser.add_argument(
        "--no-time-filter",
        action="store_true",
        help="Не фильтровать поездки по окну отправления",
    )
    return parser


def load_request(path: Path) -> MatchRideRequest:
    """Загружает запрос пассажира."""
    return MatchRideRequest.model_validate_json(path.read_text(encoding="utf-8"))


def load_rides(path: Path) -> list[RideDTO]:
    """Загружает список поездок."""
    return _rides_adapter.validate_json(path.read_text(encoding="utf-8"))


def run_match(args: argparse.Namespace) -> int:
    """Выполняет команду match."""
    try:
        request = load_request(args.query)
        rides = load_rides(args.rides)
    except (OSError, ValidationError) as e:
        log_error(f"Некорректные входные данные: {e}")
        return EXIT_BAD_INPUT

    log_info(f"Загружено {len(rides)} поездок", type_msg=TypeMsg.DEBUG)

    service = MatchingService()
    try:
        matched = service.match_request(
            request,
            rides,
            now=args.now,
            apply_time_window=not args.no_time_filter,
        )
    except InvalidSearchWindowError as e:
        log_error(str(e))
        return EXIT_BAD_INPUT
    except NoMatchError:
        print(json.dumps({"error": "No matching rides found"}))
        return EXIT_NO_MATCH

    print(MatchRideResponse.create(matched).model_dump_json())
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Главная функция запуска."""
    setup_logging()

    args = build_parser().parse_args(argv)

    if args.command == "match":
        return run_match(args)

    return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
