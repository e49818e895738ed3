"""
Structured logging for userdesk

Every userdesk module logs through a child of the "userdesk" logger, which
writes JSON lines (python-json-logger) or plain text to stderr.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "userdesk"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(component)s %(function)s %(message)s"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s - %(message)s"


def component_of(logger_name: str) -> str:
    """
    Package a logger belongs to, e.g. "pipeline" for "userdesk.pipeline.controller".

    Loggers outside userdesk are reported under their own name.
    """
    parts = logger_name.split(".")
    if parts[0] == DEFAULT_LOGGER_NAME and len(parts) > 1:
        return parts[1]
    return logger_name


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter adding timestamp, level, logger, component, module and function
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["component"] = component_of(record.name)
        log_record["module"] = record.module
        log_record["function"] = record.funcName


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Configure a logger with a single stderr handler

    Calling it again replaces the handler, so the CLI can re-apply settings
    after the module loggers were created.

    Args:
        name: Logger name
        level: Level name; defaults to LOG_LEVEL, then INFO
        format_type: "json" or "text"; defaults to LOG_FORMAT, then "json"

    Returns:
        Configured logger instance
    """
    log_level = LOG_LEVELS.get((level or os.getenv("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    format_type = format_type or os.getenv("LOG_FORMAT", "json")

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    # stdout is reserved for CLI output
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    if format_type == "json":
        handler.setFormatter(CustomJsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    else:
        handler.setFormatter(logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Logger for a module

    Names under "userdesk." share the application logger's handler; any
    other name gets its own handler on first use.
    """
    if name == DEFAULT_LOGGER_NAME or name.startswith(DEFAULT_LOGGER_NAME + "."):
        get_default_logger()
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logger(name)
    return logger


_default_logger: logging.Logger | None = None


def get_default_logger() -> logging.Logger:
    """The "userdesk" application logger, configured on first use"""
    global _default_logger
    if _default_logger is None:
        _default_logger = setup_logger(DEFAULT_LOGGER_NAME)
    return _default_logger


class log_operation:
    """
    Context manager logging the start, end and duration of an operation

    Usage:
        with log_operation("submit_user", logger=logger, user_name="Pat") as op:
            await writer.create_user(user)
        op.duration  # seconds

    A failure is logged at ERROR with the exception and then re-raised.
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_default_logger()
        self.extra_fields = extra_fields
        self.start_time: float | None = None
        self.duration: float | None = None

    def _extra(self, **fields) -> dict:
        return {"operation": self.operation_name, **fields, **self.extra_fields}

    def __enter__(self):
        self.start_time = time.monotonic()
        self.logger.info(f"Starting: {self.operation_name}", extra=self._extra())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.monotonic() - self.start_time
        elapsed = round(self.duration, 3)

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra=self._extra(duration_seconds=elapsed, status="success"),
            )
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra=self._extra(
                    duration_seconds=elapsed,
                    status="error",
                    error_type=exc_type.__name__,
                    error_message=str(exc_val),
                ),
                exc_info=True,
            )
        return False
