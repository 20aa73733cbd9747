"""
Logger handle injected into configured objects.

A LogHandle wraps a private ``logging.Logger`` and routes records to the
sinks named in its configuration: an in-memory list, a file, syslog, or
an existing logger, callable or logger-like object. With no sink it
forwards to the ``object_configure.handle`` logger so the application's
own logging setup applies.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import socket
import warnings
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from object_configure.config.logging_config import (
    DEFAULT_DATEFMT,
    DEFAULT_FORMAT,
    get_logger,
    json_formatter,
)
from object_configure.config.settings import HANDLE_LEVELS, HandleConfig, get_settings
from object_configure.core.exceptions import LoggerConfigError
from object_configure.utils.validators import parse_bool, validate_choice

TRACE = 5
NOTICE = 25

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(NOTICE, "NOTICE")

LEVELS: Dict[str, int] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "notice": NOTICE,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

FORMATS = ["text", "json"]

FACILITY_MAP = {
    "USER": logging.handlers.SysLogHandler.LOG_USER,
    "DAEMON": logging.handlers.SysLogHandler.LOG_DAEMON,
    "AUTH": logging.handlers.SysLogHandler.LOG_AUTH,
    "SYSLOG": logging.handlers.SysLogHandler.LOG_SYSLOG,
    "LOCAL0": logging.handlers.SysLogHandler.LOG_LOCAL0,
    "LOCAL1": logging.handlers.SysLogHandler.LOG_LOCAL1,
    "LOCAL2": logging.handlers.SysLogHandler.LOG_LOCAL2,
    "LOCAL3": logging.handlers.SysLogHandler.LOG_LOCAL3,
    "LOCAL4": logging.handlers.SysLogHandler.LOG_LOCAL4,
    "LOCAL5": logging.handlers.SysLogHandler.LOG_LOCAL5,
    "LOCAL6": logging.handlers.SysLogHandler.LOG_LOCAL6,
    "LOCAL7": logging.handlers.SysLogHandler.LOG_LOCAL7,
}

# Methods tried, in order, on logger-like objects that are not stdlib loggers
_METHOD_CHAIN = {
    TRACE: ("trace", "debug"),
    logging.DEBUG: ("debug",),
    logging.INFO: ("info",),
    NOTICE: ("notice", "info"),
    logging.WARNING: ("warning", "warn"),
    logging.ERROR: ("error",),
    logging.CRITICAL: ("critical", "fatal", "error"),
}

_TRUTHY_STRINGS = {"1", "true", "yes", "on"}

log = get_logger(__name__)


class ArrayHandler(logging.Handler):
    """Append ``{"level", "message"}`` entries to a caller-owned list."""

    def __init__(self, array: List[Any], level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.array = array

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.array.append(
                {"level": record.levelname.lower(), "message": self.format(record)}
            )
        except Exception:
            self.handleError(record)


class ForwardingHandler(logging.Handler):
    """
    Forward records to another logger.

    Stdlib loggers and adapters receive ``log(level, message)``; other
    objects are called through the first level method they expose.
    """

    def __init__(self, target: Any, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.target = target

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if isinstance(self.target, (logging.Logger, logging.LoggerAdapter)):
                self.target.log(record.levelno, message)
                return

            for method_name in _METHOD_CHAIN.get(record.levelno, ("info",)):
                method = getattr(self.target, method_name, None)
                if callable(method):
                    method(message)
                    return
        except Exception:
            self.handleError(record)


class CallbackHandler(logging.Handler):
    """Call a function with a dict describing each record."""

    def __init__(self, callback: Callable[[Dict[str, Any]], Any], level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.callback = callback

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.callback(
                {
                    "level": record.levelname.lower(),
                    "message": record.getMessage(),
                    "name": record.name,
                    "created": record.created,
                }
            )
        except Exception:
            self.handleError(record)


def _is_logger_like(value: Any) -> bool:
    return any(callable(getattr(value, name, None)) for name in ("warning", "warn", "error"))


def build_syslog_handler(
    syslog: Union[bool, str, Mapping[str, Any]],
    config: HandleConfig,
) -> logging.handlers.SysLogHandler:
    """
    Build a syslog handler.

    Args:
        syslog: ``True``, a facility name such as ``"local0"``, or a
            mapping with ``facility``, ``host``, ``port`` and ``protocol``.
        config: Handle defaults supplying the socket, host and port.

    Returns:
        Configured SysLogHandler.

    Raises:
        LoggerConfigError: On an unknown facility or protocol, or when the
            syslog endpoint cannot be opened.
    """
    if isinstance(syslog, Mapping):
        options = dict(syslog)
    elif syslog is True or (isinstance(syslog, str) and syslog.lower() in _TRUTHY_STRINGS):
        options = {}
    elif isinstance(syslog, str):
        options = {"facility": syslog}
    else:
        raise LoggerConfigError(
            f"Unsupported syslog setting: {type(syslog).__name__}", option="syslog"
        )

    facility_name = str(options.get("facility", "user")).upper()
    if facility_name.startswith("LOG_"):
        facility_name = facility_name[4:]
    if facility_name not in FACILITY_MAP:
        raise LoggerConfigError(
            f"Unknown syslog facility: {options.get('facility')}", option="syslog"
        )

    protocol = str(options.get("protocol", "udp")).lower()
    if protocol not in ("udp", "tcp"):
        raise LoggerConfigError(f"Unknown syslog protocol: {protocol}", option="syslog")

    port = int(options.get("port", config.syslog_port))
    address: Union[str, tuple]
    if options.get("host"):
        address = (options["host"], port)
    elif protocol == "udp" and os.path.exists(config.syslog_socket):
        address = config.syslog_socket
    else:
        address = (config.syslog_host, port)

    facility = FACILITY_MAP[facility_name]
    if isinstance(address, str):
        try:
            return logging.handlers.SysLogHandler(address=address, facility=facility)
        except OSError as e:
            # Nothing listening on the local socket; use the network daemon
            log.debug(f"Cannot open syslog socket {address}: {e}")
            address = (config.syslog_host, port)

    socktype = socket.SOCK_STREAM if protocol == "tcp" else socket.SOCK_DGRAM
    try:
        handler = logging.handlers.SysLogHandler(
            address=address, facility=facility, socktype=socktype
        )
    except OSError as e:
        raise LoggerConfigError(
            f"Cannot open syslog at {address}: {e}", option="syslog"
        ) from e

    return handler


class LogHandle:
    """
    Logger object handed to configured classes.

    Attributes:
        level: Threshold level name.
        carp_on_warn: Also raise a UserWarning on every warn() call.
        options: Unrecognized configuration entries, kept for consumers.
    """

    def __init__(
        self,
        logger: Any = None,
        array: Optional[List[Any]] = None,
        syslog: Union[None, bool, str, Mapping[str, Any]] = None,
        file: Optional[str] = None,
        level: Optional[str] = None,
        format: Optional[str] = None,
        carp_on_warn: Any = False,
        name: Optional[str] = None,
        **options: Any,
    ) -> None:
        """
        Build the handle and attach its sinks.

        Args:
            logger: Existing logger, callable, file path, list, option
                mapping or logger-like object to route records to.
            array: List receiving ``{"level", "message"}`` entries.
            syslog: Syslog facility name, ``True`` or option mapping.
            file: Path of a file to append records to.
            level: Threshold level name (default from settings).
            format: ``"text"`` or ``"json"`` for file and syslog output.
            carp_on_warn: Issue a UserWarning on each warn() call.
            name: Logger name shown in records.
            **options: Extra options kept on ``self.options``.

        Raises:
            ValidationError: On an unknown level or format.
            LoggerConfigError: On an unusable sink.
        """
        config = get_settings().handle

        self.name = name or "object_configure.handle"
        self.level = validate_choice(level or config.default_level, HANDLE_LEVELS, "level")
        self.format = validate_choice(format or "text", FORMATS, "format")
        self.carp_on_warn = parse_bool(carp_on_warn)
        self.options: Dict[str, Any] = dict(options)
        self._handlers: List[Tuple[str, logging.Handler]] = []

        # Unregistered logger: handles do not accumulate in logging's manager
        self._logger = logging.Logger(self.name, LEVELS[self.level])
        self._logger.propagate = False
        self._array_handler: Optional[ArrayHandler] = None
        self._config = config

        if array is not None:
            self.array = array
        if file:
            self._add_file(file)
        if syslog:
            self._add_handler("syslog", build_syslog_handler(syslog, config), self._syslog_formatter())
        if logger is not None:
            self._attach(logger)

        if not self._handlers:
            self._add_handler("default", ForwardingHandler(get_logger("handle")))

    @property
    def sinks(self) -> List[str]:
        """Names of the sinks records are routed to."""
        return [sink for sink, _ in self._handlers]

    def _text_formatter(self) -> logging.Formatter:
        if self.format == "json":
            return json_formatter()
        return logging.Formatter(fmt=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

    def _syslog_formatter(self) -> logging.Formatter:
        if self.format == "json":
            return json_formatter()
        return logging.Formatter(fmt="%(name)s[%(process)d]: %(levelname)s %(message)s")

    def _add_handler(
        self,
        sink: str,
        handler: logging.Handler,
        formatter: Optional[logging.Formatter] = None,
    ) -> None:
        if formatter is not None:
            handler.setFormatter(formatter)
        self._logger.addHandler(handler)
        self._handlers.append((sink, handler))

    def _add_file(self, path: Union[str, os.PathLike]) -> None:
        try:
            handler = logging.FileHandler(os.fspath(path), encoding="utf-8")
        except OSError as e:
            raise LoggerConfigError(f"Cannot open log file {path}: {e}", option="file") from e
        self._add_handler("file", handler, self._text_formatter())

    def _attach(self, target: Any) -> None:
        """Route records to ``target`` according to its shape."""
        if isinstance(target, (logging.Logger, logging.LoggerAdapter)):
            self._add_handler("logger", ForwardingHandler(target))
        elif isinstance(target, (str, os.PathLike)):
            self._add_file(target)
        elif isinstance(target, list):
            self.array = target
        elif isinstance(target, Mapping):
            for key, value in target.items():
                if key == "array":
                    self.array = value
                elif key == "file":
                    self._add_file(value)
                elif key == "syslog":
                    self._add_handler(
                        "syslog", build_syslog_handler(value, self._config), self._syslog_formatter()
                    )
                elif key == "logger":
                    self._attach(value)
                else:
                    self.options.setdefault(key, value)
        elif isinstance(target, LogHandle) or _is_logger_like(target):
            self._add_handler("logger", ForwardingHandler(target))
        elif callable(target):
            self._add_handler("callback", CallbackHandler(target))
        else:
            raise LoggerConfigError(
                f"Unsupported logger type: {type(target).__name__}", option="logger"
            )

    @property
    def array(self) -> Optional[List[Any]]:
        """The list backing the in-memory sink, if any."""
        if self._array_handler is None:
            return None
        return self._array_handler.array

    @array.setter
    def array(self, value: List[Any]) -> None:
        if not isinstance(value, list):
            raise LoggerConfigError(
                f"array must be a list, got {type(value).__name__}", option="array"
            )
        if self._array_handler is not None:
            self._array_handler.array = value
            return

        self._remove_sink("default")
        self._array_handler = ArrayHandler(value)
        self._add_handler("array", self._array_handler, logging.Formatter("%(message)s"))

    def _remove_sink(self, sink: str) -> None:
        for name, handler in list(self._handlers):
            if name == sink:
                self._logger.removeHandler(handler)
                handler.close()
                self._handlers.remove((name, handler))

    def messages(self) -> List[Any]:
        """Return a copy of the in-memory sink's entries."""
        return list(self.array or [])

    def is_enabled_for(self, level: str) -> bool:
        """Return True if records at ``level`` pass the threshold."""
        return self._logger.isEnabledFor(LEVELS[validate_choice(level, HANDLE_LEVELS, "level")])

    def _log(self, levelno: int, msg: Any, args: tuple, **kwargs: Any) -> None:
        if self._logger.isEnabledFor(levelno):
            kwargs.setdefault("stacklevel", 3)
            self._logger.log(levelno, msg, *args, **kwargs)

    def trace(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(TRACE, msg, args, **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, args, **kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, args, **kwargs)

    def notice(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(NOTICE, msg, args, **kwargs)

    def warn(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        """Log at warning level; with carp_on_warn also issue a UserWarning."""
        self._log(logging.WARNING, msg, args, **kwargs)
        if self.carp_on_warn:
            text = str(msg) % args if args else str(msg)
            warnings.warn(text, UserWarning, stacklevel=2)

    warning = warn

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, args, **kwargs)

    def fatal(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, msg, args, **kwargs)

    critical = fatal

    def close(self) -> None:
        """Detach and close every handler."""
        for _, handler in self._handlers:
            self._logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        self._array_handler = None

    def __repr__(self) -> str:
        return f"LogHandle(name={self.name!r}, level={self.level!r}, sinks={self.sinks!r})"
