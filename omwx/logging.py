# omwx/logging.py
"""
Structured logging for omwx.

Every record carries an event name as its message plus keyword fields:

    logger = get_logger(__name__)
    logger.info("batch_evaluated", stations=42, crit=3)

LOG_JSON=true (default) writes one JSON object per line; otherwise lines
read "time [LEVEL] logger: event key=value ...". Enum values (alert
levels, report kinds) are written as their string value.
"""

import json
import logging
import sys
from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .settings import settings

FIELDS_ATTR = "omwx_fields"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s%(omwx_suffix)s"

# Third-party loggers kept at WARNING
QUIET_LOGGERS = ("httpx", "uvicorn", "uvicorn.access")


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, FIELDS_ATTR, None) or {}


class StructuredLogFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, event, fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        entry.update({k: _plain(v) for k, v in _record_fields(record).items()})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
            entry["source"] = f"{record.filename}:{record.lineno}"

        return json.dumps(entry, default=str)


class KeyValueFormatter(logging.Formatter):
    """Human-readable lines with the structured fields appended as key=value."""

    def __init__(self):
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        fields = _record_fields(record)
        record.omwx_suffix = "".join(f" {k}={_plain(v)}" for k, v in fields.items())
        return super().format(record)


class StructuredLogger:
    """
    Logger taking an event name and keyword fields.

    bind() returns a child carrying fixed fields on every record, e.g. the
    station being evaluated.
    """

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self._logger = logging.getLogger(name)
        self._context = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **fields) -> "StructuredLogger":
        return StructuredLogger(self.name, {**self._context, **fields})

    def _log(self, level: int, event: str, exc_info: bool = False, **fields):
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(
            level, event, exc_info=exc_info,
            extra={FIELDS_ATTR: {**self._context, **fields}},
        )

    def debug(self, event: str, **fields):
        self._log(logging.DEBUG, event, **fields)

    def info(self, event: str, **fields):
        self._log(logging.INFO, event, **fields)

    def warning(self, event: str, **fields):
        self._log(logging.WARNING, event, **fields)

    def error(self, event: str, exc_info: bool = False, **fields):
        self._log(logging.ERROR, event, exc_info=exc_info, **fields)

    def exception(self, event: str, **fields):
        """Log at ERROR with the active traceback."""
        self._log(logging.ERROR, event, exc_info=True, **fields)


_configured = False


def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
    log_file: Optional[str] = None,
):
    """
    Install omwx handlers on the root logger (first call wins).

    Args:
        level: Log level name (defaults to LOG_LEVEL)
        json_output: JSON lines on stdout (defaults to LOG_JSON)
        log_file: Optional path that also receives JSON lines
    """
    global _configured
    if _configured:
        return
    _configured = True

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    use_json = settings.log_json if json_output is None else json_output
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(StructuredLogFormatter() if use_json else KeyValueFormatter())
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredLogFormatter())
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger, configuring logging on first use.

    Args:
        name: Logger name (typically __name__)
    """
    if not _configured:
        configure_logging()
    return StructuredLogger(name)


def get_api_logger() -> StructuredLogger:
    """Logger shared by the API routes."""
    return get_logger("omwx.api")
