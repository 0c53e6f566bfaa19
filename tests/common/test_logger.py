# tests/common/test_logger.py
"""
Unit тесты для модуля логирования (src/common/logger.py).
"""

import json
import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest

import src.common.logger as logger_module
from src.common.logger import (
    DEFAULT_LOGGER_NAME,
    ColoredFormatter,
    ConsoleHandler,
    DateBasedRotatingFileHandler,
    JsonFormatter,
    _get_caller_info,
    _loggers,
    get_logger,
    log_debug,
    log_error,
    log_info,
    log_warning,
    setup_logging,
)
from src.common.constants import TypeMsg


def _make_record(level: int = logging.INFO, msg: str = "Test message", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


class TestJsonFormatter:
    """Тесты для JsonFormatter."""

    def test_format_basic_record(self) -> None:
        """Тест форматирования базовой записи."""
        result = json.loads(JsonFormatter().format(_make_record()))

        assert result["level"] == "INFO"
        assert result["message"] == "Test message"
        assert result["module"] == "test_module"
        assert result["function"] == "test_function"
        assert result["line"] == 10
        assert result["timestamp"].endswith("Z")

    def test_format_with_extra_data(self) -> None:
        """Тест форматирования записи с дополнительными данными."""
        record = _make_record(logging.WARNING, "Warning message")
        record.extra_data = {"ride_id": 123, "error_index": 5}

        result = json.loads(JsonFormatter().format(record))

        assert result["extra"] == {"ride_id": 123, "error_index": 5}

    def test_format_with_exception(self) -> None:
        """Тест форматирования записи с исключением."""
        try:
            raise ValueError("Test exception")
        except ValueError:
            exc_info = sys.exc_info()

        result = JsonFormatter().format(_make_record(logging.ERROR, "Error occurred", exc_info))

        assert '"exception"' in result
        assert "ValueError" in result
        assert "Test exception" in result

    def test_non_ascii_kept(self) -> None:
        """Кириллица не экранируется."""
        result = JsonFormatter().format(_make_record(msg="Поездка 7 подходит"))

        assert "Поездка 7 подходит" in result


class TestColoredFormatter:
    """Тесты для ColoredFormatter."""

    def test_format_basic_record(self) -> None:
        """Тест цветного форматирования базовой записи."""
        result = ColoredFormatter().format(_make_record())

        assert "INFO" in result
        assert "Test message" in result
        assert "\033[" in result

    def test_format_with_caller_info(self) -> None:
        """Тест форматирования с информацией о вызывающей функции."""
        record = _make_record(logging.DEBUG, "Debug message")
        record.extra_data = {
            "caller_function": "match_rides",
            "caller_module": "src.core.matching.service",
            "caller_file": "service.py",
            "caller_line": 42,
        }

        result = ColoredFormatter().format(record)

        assert "src.core.matching.service.match_rides()" in result
        assert "service.py:42" in result


class TestGetLogger:
    """Тесты для get_logger."""

    def setup_method(self) -> None:
        """Очистка кэша логгеров перед каждым тестом."""
        _loggers.clear()
        for logger in logging.Logger.manager.loggerDict.values():
            if isinstance(logger, logging.Logger):
                logger.handlers.clear()

    def teardown_method(self) -> None:
        """Сбрасываем глобальные файловые хендлеры."""
        for handler in (logger_module._GLOBAL_FILE_HANDLER, logger_module._GLOBAL_ERROR_HANDLER):
            if handler is not None:
                handler.close()
        logger_module._GLOBAL_FILE_HANDLER = None
        logger_module._GLOBAL_ERROR_HANDLER = None
        _loggers.clear()

    def test_get_logger_creates_new_logger(self) -> None:
        """Тест создания нового логгера."""
        logger = get_logger("test_logger")

        assert logger.name == "test_logger"
        assert len(logger.handlers) >= 1
        assert logger.propagate is False

    def test_console_handler_writes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Консольные логи идут в stderr, stdout остаётся чистым."""
        logger = get_logger("test_stderr")

        assert isinstance(logger.handlers[0], ConsoleHandler)
        logger.warning("В stderr")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "В stderr" in captured.err

    def test_get_logger_returns_cached_logger(self) -> None:
        """Тест возврата кэшированного логгера."""
        assert get_logger("test_logger") is get_logger("test_logger")

    @patch("src.config.settings")
    def test_get_logger_uses_settings(self, mock_settings: Mock, tmp_path: Path) -> None:
        """Тест использования настроек из конфига."""
        mock_settings.logging.LOG_LEVEL = "WARNING"
        mock_settings.logging.LOG_FORMAT = "json"
        mock_settings.logging.LOG_TO_FILE = True
        mock_settings.logging.LOG_FILE_PATH = str(tmp_path / "logs" / "test.log")
        mock_settings.logging.LOG_MAX_BYTES = 10485760

        logger = get_logger("test_with_settings")

        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)
        assert any(isinstance(h, DateBasedRotatingFileHandler) for h in logger.handlers)
        assert (tmp_path / "logs").is_dir()

    def test_get_logger_handles_missing_settings(self) -> None:
        """Тест работы при отсутствии настроек."""
        with patch.dict("sys.modules", {"src.config": None}):
            logger = get_logger("test_no_settings")

            assert logger.level == logging.DEBUG
            assert isinstance(logger.handlers[0].formatter, ColoredFormatter)


class TestDateBasedRotatingFileHandler:
    """Тесты ротации файлов логов."""

    def test_rollover_archives_file(self, tmp_path: Path) -> None:
        """При превышении размера файл переименовывается в архив."""
        handler = DateBasedRotatingFileHandler(log_dir=str(tmp_path), max_bytes=10, logger_name="rot")
        handler.setFormatter(logging.Formatter("%(message)s"))
        try:
            handler.emit(_make_record(msg="x" * 20))
            handler.emit(_make_record(msg="second"))
        finally:
            handler.close()

        archives = list(tmp_path.glob("rot_*.log"))
        assert len(archives) == 1
        assert (tmp_path / "rot.log").read_text(encoding="utf-8").strip() == "second"

    def test_no_rollover_when_unlimited(self, tmp_path: Path) -> None:
        """max_bytes=0 — без ротации."""
        handler = DateBasedRotatingFileHandler(log_dir=str(tmp_path), max_bytes=0, logger_name="flat")
        try:
            assert handler.shouldRollover(_make_record()) is False
        finally:
            handler.close()


class TestSetupLogging:
    """Тесты для setup_logging."""

    def setup_method(self) -> None:
        """Очистка перед тестом."""
        _loggers.clear()
        logger_module._LOGGING_INITIALIZED = False

    def test_setup_logging_initializes_system(self) -> None:
        """Тест инициализации системы логирования."""
        setup_logging()

        assert DEFAULT_LOGGER_NAME in _loggers

    def test_setup_logging_is_idempotent(self) -> None:
        """Повторный вызов ничего не меняет."""
        setup_logging()
        _loggers.clear()
        setup_logging()

        assert DEFAULT_LOGGER_NAME not in _loggers


class TestGetCallerInfo:
    """Тесты для _get_caller_info."""

    def test_get_caller_info_returns_dict(self) -> None:
        """Тест возврата словаря с информацией о вызывающей функции."""
        assert isinstance(_get_caller_info(), dict)

    def test_log_info_reports_real_caller(self) -> None:
        """В extra попадает функция, вызвавшая log_*."""
        def calling_function() -> None:
            log_warning("Warning message")

        with patch.object(logging.Logger, "warning") as mock_warning:
            calling_function()

        extra_data = mock_warning.call_args.kwargs["extra"]["extra_data"]
        assert extra_data["caller_function"] == "calling_function"
        assert extra_data["caller_file"] == "test_logger.py"


class TestLogFunctions:
    """Тесты для функций логирования."""

    def setup_method(self) -> None:
        """Очистка перед тестом."""
        _loggers.clear()

    def test_log_info_basic(self) -> None:
        """Тест базового логирования INFO."""
        with patch.object(logging.Logger, "info") as mock_info:
            log_info("Test message")

            mock_info.assert_called_once()
            assert "Test message" in mock_info.call_args[0]

    @pytest.mark.parametrize(
        ("type_msg", "method"),
        [
            (TypeMsg.DEBUG, "debug"),
            (TypeMsg.WARNING, "warning"),
            (TypeMsg.ERROR, "error"),
            (TypeMsg.CRITICAL, "critical"),
        ],
    )
    def test_log_info_with_type_msg(self, type_msg: TypeMsg, method: str) -> None:
        """Тест логирования с разными типами сообщений."""
        with patch.object(logging.Logger, method) as mock_method:
            log_info("Message", type_msg=type_msg)

            mock_method.assert_called_once()

    def test_log_info_with_extra(self) -> None:
        """Тест логирования с дополнительными данными."""
        with patch.object(logging.Logger, "info") as mock_info:
            log_info("Test message", extra={"ride_id": 123})

            extra_data = mock_info.call_args.kwargs["extra"]["extra_data"]
            assert extra_data["ride_id"] == 123

    def test_log_debug(self) -> None:
        """Тест функции log_debug."""
        with patch.object(logging.Logger, "debug") as mock_debug:
            log_debug("Debug message")

            mock_debug.assert_called_once()

    def test_log_warning(self) -> None:
        """Тест функции log_warning."""
        with patch.object(logging.Logger, "warning") as mock_warning:
            log_warning("Warning message")

            mock_warning.assert_called_once()

    def test_log_error_with_exc_info(self) -> None:
        """Тест логирования ошибки с трейсбеком."""
        with patch.object(logging.Logger, "error") as mock_error:
            log_error("Error message", exc_info=True)

            mock_error.assert_called_once()
            assert mock_error.call_args.kwargs.get("exc_info") is True

    def test_log_info_with_custom_logger_name(self) -> None:
        """Тест логирования с пользовательским именем логгера."""
        with patch("src.common.logger.get_logger") as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            log_info("Test message", logger_name="custom_logger")

            mock_get_logger.assert_called_once_with("custom_logger")
            mock_logger.info.assert_called_once()
