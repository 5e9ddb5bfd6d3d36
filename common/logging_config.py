# common/logging_config.py
# -*- coding: utf-8 -*-
"""
Logging configuration for the CloudWatch agent installer.

Console output is human readable. An optional log file receives
JSON-structured records so installer runs can be collected and parsed
alongside other host provisioning logs.
"""

import json
import logging
import os
import socket
import sys
from datetime import datetime, timezone
from typing import Optional

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else was passed via `extra`.
_STANDARD_RECORD_KEYS = frozenset(
    [
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
        "message",
        "asctime",
    ]
)


class JSONFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON documents.

    Each entry carries the timestamp (ISO format, UTC), level, service name,
    logger, message, source location and host name, plus any fields passed
    through ``extra``.
    """

    def __init__(self, service_name: str = "cloudwatch-agent-setup"):
        super().__init__()
        self.service_name = service_name
        self.hostname = os.environ.get("HOSTNAME") or socket.gethostname()

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
            "hostname": self.hostname,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_KEYS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(
    service_name: str = "cloudwatch-agent-setup",
    log_level: Optional[str] = None,
    verbose: bool = False,
    enable_console: bool = True,
    log_file_path: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for an installer run.

    Args:
        service_name: Name of the logger returned to the caller.
        log_level: Logging level name. Read from ``LOG_LEVEL`` when not given.
        verbose: Force DEBUG level, overriding ``log_level``.
        enable_console: Whether to log to stdout.
        log_file_path: Optional path of a JSON log file.

    Returns:
        The configured service logger.
    """
    if log_level is None:
        log_level = os.environ.get("LOG_LEVEL", "INFO")
    if verbose:
        log_level = "DEBUG"

    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(JSONFormatter(service_name))
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(service_name)
    logger.debug(
        "Logging initialized",
        extra={
            "log_level": logging.getLevelName(numeric_level),
            "console_enabled": enable_console,
            "file_enabled": bool(log_file_path),
        },
    )
    return logger
