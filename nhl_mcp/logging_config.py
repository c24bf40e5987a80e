"""
Structured logging for the NHL MCP Server.

Every record is written as one JSON object per line. Anything passed through
``extra=`` (request method, path, latency and so on) lands in the object as a
top-level field. Nothing is configured at import time; ``server.main`` calls
``setup_logging`` once at startup.
"""

import json
import logging
import logging.config
import sys
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Dict, Optional


# Attributes every LogRecord carries; any other attribute arrived via ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Third-party loggers pinned to their own level regardless of the app level
THIRD_PARTY_LEVELS = {
    "httpx": "WARNING",
    "uvicorn": "INFO",
}

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class StructuredFormatter(logging.Formatter):
    """Formats records as JSON tagged with service name and version."""

    def __init__(self, service_name: str = "nhl-mcp-server", version: str = "0.1.0"):
        super().__init__()
        self.service_name = service_name
        self.version = version

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "version": self.version,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and key not in entry
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = record.stack_info
        return json.dumps(entry, default=str)


def build_logging_config(
    log_level: str,
    service_name: str,
    version: str,
    log_file_path: Optional[str] = None
) -> Dict[str, Any]:
    """Assemble the ``dictConfig`` mapping used by ``setup_logging``."""
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "structured",
            "stream": sys.stdout,
        },
    }
    if log_file_path:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "structured",
            "filename": log_file_path,
            "maxBytes": LOG_FILE_MAX_BYTES,
            "backupCount": LOG_FILE_BACKUPS,
            "encoding": "utf8",
        }
    names = list(handlers)

    loggers = {"nhl_mcp": {"level": log_level, "handlers": names, "propagate": False}}
    for name, level in THIRD_PARTY_LEVELS.items():
        loggers[name] = {"level": level, "handlers": ["console"], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {"()": StructuredFormatter, "service_name": service_name, "version": version},
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": log_level, "handlers": names},
    }


def setup_logging(
    log_level: str = "INFO",
    service_name: str = "nhl-mcp-server",
    version: str = "0.1.0",
    log_file_path: Optional[str] = None
) -> None:
    """
    Configure structured logging for the process.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR; unknown names fall back to INFO
        service_name: Service name written into every entry
        version: Service version written into every entry
        log_file_path: Optional rotating log file, in addition to stdout
    """
    level = log_level.upper()
    if level not in logging.getLevelNamesMapping():
        level = "INFO"
    if log_file_path:
        Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(level, service_name, version, log_file_path))


def get_logger(name: str) -> logging.Logger:
    """Get a logger by name (usually ``__name__``)."""
    return logging.getLogger(name)
