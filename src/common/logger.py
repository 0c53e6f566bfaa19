# src/common/logger.py
"""
Логирование движка матчинга.

Консоль (stderr, цветной текст или JSON) плюс необязательный файл с ротацией
по размеру. Хелперы log_* синхронные: движок не использует event loop.
"""

from __future__ import annotations

import inspect
import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, NamedTuple

from src.common.constants import LogFormat, TypeMsg


DEFAULT_LOGGER_NAME = "carpool_matching"

# Файловые хендлеры общие для всех логгеров процесса
_GLOBAL_FILE_HANDLER: logging.Handler | None = None
_GLOBAL_ERROR_HANDLER: logging.Handler | None = None

_LOGGING_INITIALIZED: bool = False

_loggers: dict[str, logging.Logger] = {}

_CALLER_KEYS = ("caller_function", "caller_module", "caller_file", "caller_line")


class _LogOptions(NamedTuple):
    level: str = "DEBUG"
    fmt: str = LogFormat.COLORED.value
    to_file: bool = False
    file_path: str = "logs/app.log"
    max_bytes: int = 10485760


# =============================================================================
# ФОРМАТТЕРЫ
# =============================================================================

class JsonFormatter(logging.Formatter):
    """Одна запись — одна JSON-строка."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            payload["extra"] = extra_data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Читаемый цветной вывод для разработки."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    GRAY = "\033[90m"

    def _origin(self, record: logging.LogRecord) -> str:
        extra_data = getattr(record, "extra_data", None) or {}
        function, module, filename, line = (extra_data.get(key) for key in _CALLER_KEYS)
        if not function:
            return ""
        return f" {self.GRAY}[{module}.{function}() {filename}:{line}]{self.RESET}"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.GRAY)
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        text = f"{stamp} {color}[{record.levelname}]{self.RESET}{self._origin(record)} {record.getMessage()}"

        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


class ConsoleHandler(logging.StreamHandler):
    """
    Консольный вывод в текущий sys.stderr.

    stdout занят ответом CLI. Поток берётся в момент записи, поэтому
    подмена sys.stderr (pytest, перенаправление) подхватывается сразу.
    """

    def __init__(self) -> None:
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr


def _make_formatter(log_format: str) -> logging.Formatter:
    return JsonFormatter() if log_format == LogFormat.JSON.value else ColoredFormatter()


# =============================================================================
# ФАЙЛ С РОТАЦИЕЙ
# =============================================================================

class DateBasedRotatingFileHandler(RotatingFileHandler):
    """
    Пишет в <log_dir>/<logger_name>.log.

    Когда файл дорастает до max_bytes, он переименовывается в
    <logger_name>_<дата_время>.log, и запись продолжается в новый файл.
    Число архивов не ограничивается.
    """

    def __init__(self, log_dir: str, max_bytes: int, logger_name: str = "app", encoding: str = "utf-8"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.logger_name = logger_name
        super().__init__(
            filename=str(self.log_dir / f"{logger_name}.log"),
            maxBytes=max_bytes,
            backupCount=0,
            encoding=encoding,
        )

    def shouldRollover(self, record: logging.LogRecord) -> bool:
        if self.maxBytes <= 0:
            return False
        if self.stream is None:
            self.stream = self._open()
        self.stream.seek(0, os.SEEK_END)
        return self.stream.tell() >= self.maxBytes

    def archive_path(self) -> Path:
        """Имя архива для текущего момента."""
        stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        return self.log_dir / f"{self.logger_name}_{stamp}.log"

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None

        current = Path(self.baseFilename)
        if current.exists():
            try:
                current.rename(self.archive_path())
            except OSError:
                # файл занят другим процессом: пишем дальше в него же
                pass

        self.stream = self._open()


# =============================================================================
# ЛОГГЕРЫ
# =============================================================================

def _read_log_options() -> _LogOptions:
    """Параметры логирования из конфига или значения по умолчанию."""
    # Ленивый импорт: логгер нужен и до загрузки конфига
    try:
        from src.config import settings
        section = settings.logging
    except Exception:
        return _LogOptions()

    defaults = _LogOptions()
    level = section.LOG_LEVEL if isinstance(section.LOG_LEVEL, str) else defaults.level
    fmt = section.LOG_FORMAT if isinstance(section.LOG_FORMAT, str) else defaults.fmt
    file_path = section.LOG_FILE_PATH if isinstance(section.LOG_FILE_PATH, str) else defaults.file_path
    return _LogOptions(
        level=level,
        fmt=fmt,
        to_file=section.LOG_TO_FILE is True,
        file_path=file_path,
        max_bytes=section.LOG_MAX_BYTES,
    )


def _file_handlers(options: _LogOptions) -> tuple[logging.Handler, logging.Handler]:
    """Общий файл логов и отдельный файл ошибок (создаются один раз)."""
    global _GLOBAL_FILE_HANDLER, _GLOBAL_ERROR_HANDLER

    log_path = Path(options.file_path)

    if _GLOBAL_FILE_HANDLER is None:
        _GLOBAL_FILE_HANDLER = DateBasedRotatingFileHandler(
            log_dir=str(log_path.parent),
            max_bytes=options.max_bytes,
            logger_name=log_path.stem,
        )
        _GLOBAL_FILE_HANDLER.setFormatter(_make_formatter(options.fmt))

    if _GLOBAL_ERROR_HANDLER is None:
        _GLOBAL_ERROR_HANDLER = DateBasedRotatingFileHandler(
            log_dir=str(log_path.parent),
            max_bytes=options.max_bytes,
            logger_name="error",
        )
        _GLOBAL_ERROR_HANDLER.setLevel(logging.ERROR)
        _GLOBAL_ERROR_HANDLER.setFormatter(_make_formatter(options.fmt))

    return _GLOBAL_FILE_HANDLER, _GLOBAL_ERROR_HANDLER


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Логгер с консольным (и, если включено, файловым) выводом.

    Результат кэшируется по имени, поэтому хендлеры не дублируются.
    """
    cached = _loggers.get(name)
    if cached is not None:
        return cached

    options = _read_log_options()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, options.level.upper(), logging.DEBUG))
    logger.propagate = False

    if not logger.handlers:
        console = ConsoleHandler()
        console.setFormatter(_make_formatter(options.fmt))
        logger.addHandler(console)

        if options.to_file:
            for handler in _file_handlers(options):
                logger.addHandler(handler)

    _loggers[name] = logger
    return logger


def setup_logging() -> None:
    """Готовит основной логгер. Повторные вызовы ничего не делают."""
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED:
        return
    _LOGGING_INITIALIZED = True

    get_logger(DEFAULT_LOGGER_NAME)
    logging.getLogger("pydantic").setLevel(logging.WARNING)


# =============================================================================
# ХЕЛПЕРЫ
# =============================================================================

def _get_caller_info() -> dict[str, Any]:
    """
    Откуда вызвали log_*: функция, модуль, файл и строка.

    Кадры этого модуля пропускаются, так что log_warning -> log_info
    указывает на код приложения, а не на сам логгер.
    """
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        while caller is not None and caller.f_globals.get("__name__") == __name__:
            caller = caller.f_back
        if caller is None:
            return {}

        module = inspect.getmodule(caller)
        filename = caller.f_code.co_filename
        return {
            "caller_function": caller.f_code.co_name,
            "caller_module": module.__name__ if module else "unknown",
            "caller_file": os.path.basename(filename) if filename else "unknown",
            "caller_line": caller.f_lineno,
        }
    finally:
        del frame
        del caller


def _record_extra(extra: dict[str, Any] | None) -> dict[str, Any]:
    return {"extra_data": {**_get_caller_info(), **(extra or {})}}


def log_info(
    message: str,
    *,
    type_msg: TypeMsg = TypeMsg.INFO,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    """
    Пишет сообщение с уровнем type_msg (по умолчанию INFO).

    Args:
        message: Текст сообщения
        type_msg: Уровень
        logger_name: Имя логгера
        extra: Поля, которые попадут в extra_data записи
    """
    logger = get_logger(logger_name)
    record_extra = _record_extra(extra)

    match type_msg:
        case TypeMsg.DEBUG:
            logger.debug(message, extra=record_extra)
        case TypeMsg.WARNING:
            logger.warning(message, extra=record_extra)
        case TypeMsg.ERROR:
            logger.error(message, extra=record_extra)
        case TypeMsg.CRITICAL:
            logger.critical(message, extra=record_extra)
        case _:
            logger.info(message, extra=record_extra)


def log_debug(message: str, logger_name: str = DEFAULT_LOGGER_NAME, extra: dict[str, Any] | None = None) -> None:
    log_info(message, type_msg=TypeMsg.DEBUG, logger_name=logger_name, extra=extra)


def log_warning(message: str, logger_name: str = DEFAULT_LOGGER_NAME, extra: dict[str, Any] | None = None) -> None:
    log_info(message, type_msg=TypeMsg.WARNING, logger_name=logger_name, extra=extra)


def log_error(
    message: str,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
    exc_info: bool = False,
) -> None:
    """Пишет ERROR; exc_info=True добавляет трейсбек текущего исключения."""
    get_logger(logger_name).error(message, extra=_record_extra(extra), exc_info=exc_info)
