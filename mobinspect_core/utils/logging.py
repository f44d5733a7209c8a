# mobinspect_core/utils/logging.py
"""
Logging configuration for the inspection engine.
Library modules only emit records; applications call setup_logging() once.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "mobinspect_core"

# Module-level logger cache
_loggers: dict = {}
_handlers: list = []
_initialized: bool = False


class InspectLogFormatter(logging.Formatter):
    """Formatter with millisecond timestamps and optional thread name."""

    def __init__(self, include_thread: bool = True):
        self.include_thread = include_thread
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level = record.levelname.ljust(8)
        name = record.name

        if self.include_thread:
            thread = record.threadName[:12].ljust(12)
            prefix = f"[{timestamp}] [{level}] [{thread}] {name}: "
        else:
            prefix = f"[{timestamp}] [{level}] {name}: "

        message = record.getMessage()

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return prefix + message


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(
    console_level: Union[int, str] = logging.INFO,
    file_level: Union[int, str] = logging.DEBUG,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Initialize engine logging. Subsequent calls are no-ops.

    Args:
        console_level: Logging level for stderr output
        file_level: Logging level for file output
        log_file: Optional path to a log file

    Returns:
        The package root logger
    """
    global _initialized

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _initialized:
        return root_logger

    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_coerce_level(console_level))
    console_handler.setFormatter(InspectLogFormatter(include_thread=False))
    root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(_coerce_level(file_level))
            file_handler.setFormatter(InspectLogFormatter(include_thread=True))
            root_logger.addHandler(file_handler)
            _handlers.append(file_handler)
        except OSError as e:
            root_logger.warning(f"Could not create log file: {e}")

    _initialized = True
    root_logger.debug(f"Logging initialized. Log file: {log_file}")
    return root_logger


def reset_logging() -> None:
    """Detach handlers installed by setup_logging()."""
    global _initialized

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    while _handlers:
        handler = _handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
    _initialized = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the package namespace.

    Args:
        name: Logger name (usually __name__)
    """
    if name not in _loggers:
        if name.startswith(ROOT_LOGGER_NAME):
            _loggers[name] = logging.getLogger(name)
        else:
            _loggers[name] = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    return _loggers[name]
