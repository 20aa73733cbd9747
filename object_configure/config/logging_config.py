"""
Logging configuration module.

Provides centralized logging setup for the ``object_configure`` logger tree:
- Console output with colors
- File logging with rotation
- JSON structured logging
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "object_configure"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """
    Colored log formatter for console output.

    Adds ANSI color codes based on log level.
    """

    COLORS = {
        "TRACE": "\033[34m",      # Blue
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "NOTICE": "\033[32m",     # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
    ) -> None:
        """
        Initialize the colored formatter.

        Args:
            fmt: Log format string.
            datefmt: Date format string.
            use_colors: Whether to use color codes.
        """
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record with optional colors.

        The record is copied so other handlers still see the plain level name.
        """
        if self.use_colors and record.levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = (
                f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
            )
        return super().format(record)


class ConfigureJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with the fields configured objects care about.

    Adds the class namespace when the record carries one.
    """

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """
        Add custom fields to the JSON log record.

        Args:
            log_record: Dictionary to populate.
            record: Original log record.
            message_dict: Message dictionary.
        """
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        if hasattr(record, "namespace"):
            log_record["namespace"] = record.namespace


def json_formatter() -> ConfigureJsonFormatter:
    """Return the JSON formatter used by console, file and handle sinks."""
    return ConfigureJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    use_colors: bool = True,
) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file (None for console only).
        json_format: Use JSON format for logs.
        use_colors: Use colored console output.

    Returns:
        Configured package logger.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)

    if json_format:
        console_formatter: Union[ConfigureJsonFormatter, ColoredFormatter] = json_formatter()
    else:
        console_formatter = ColoredFormatter(
            fmt=DEFAULT_FORMAT,
            datefmt=DEFAULT_DATEFMT,
            use_colors=use_colors and sys.stderr.isatty(),
        )

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(numeric_level)

            if json_format:
                file_formatter: Union[ConfigureJsonFormatter, logging.Formatter] = json_formatter()
            else:
                file_formatter = logging.Formatter(fmt=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Failed to configure file handler: {e}")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance under the package logger tree.

    Args:
        name: Logger name (typically module name).

    Returns:
        Logger instance.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class NamespaceLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that tags every record with a configuration namespace.
    """

    def process(
        self, msg: str, kwargs: Dict[str, Any]
    ) -> Tuple[str, Dict[str, Any]]:
        """
        Process log message with extra context.

        Args:
            msg: Log message.
            kwargs: Additional keyword arguments.

        Returns:
            Processed message and kwargs.
        """
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return f"[{self.extra['namespace']}] {msg}", kwargs


def get_namespace_logger(name: str, namespace: str) -> NamespaceLoggerAdapter:
    """
    Get a logger whose records carry a configuration namespace.

    Args:
        name: Logger name.
        namespace: Namespace derived from the configured class.

    Returns:
        Logger adapter with namespace context.
    """
    return NamespaceLoggerAdapter(get_logger(name), {"namespace": namespace})
