"""Structured logging for the record store.

structlog renders each event as one JSON line and hands it to the stdlib
root logger, so events follow wherever stdlib logging is routed: stdout,
an optional daily log file, or pytest's ``caplog``.

Store events use dotted names (``record_store.table.created``,
``record_store.upsert.inserted``) and carry table names and row counts,
never bind values. Keys that look like credentials are redacted before
rendering.

Settings read from record_store.config.settings:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL. Default: INFO
- LOG_TO_FILE: Also write to ``<LOG_FILE_DIR>/record-store-YYYYMMDD.log``
- LOG_FILE_DIR: Default: logs/

Usage:
    >>> from record_store.utils.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("record_store.table.created", table="teststruct", column_count=2)
"""

import logging
import os
import re
from datetime import date
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, MutableMapping, Optional

import structlog
from pydantic import ValidationError
from structlog.types import EventDict, Processor

from record_store.config import Settings, get_settings

REDACTED_VALUE = "[REDACTED]"
LOG_FILE_PREFIX = "record-store"

# Substring match on credential words, exact match on the database URL
_SENSITIVE_KEY = re.compile(r"password|token|secret|^database_url$", re.IGNORECASE)


def is_sensitive_key(key: str) -> bool:
    return bool(_SENSITIVE_KEY.search(key))


def sanitize_for_logging(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``data`` with credential-like values redacted.

    Nested dictionaries are sanitized as well; the input is left untouched.

    Example:
        >>> sanitize_for_logging({"password": "secret123", "user": "admin"})
        {'password': '[REDACTED]', 'user': 'admin'}
    """
    sanitized: Dict[str, Any] = {}
    for key, value in data.items():
        if is_sensitive_key(key):
            sanitized[key] = REDACTED_VALUE
        elif isinstance(value, dict):
            sanitized[key] = sanitize_for_logging(value)
        else:
            sanitized[key] = value
    return sanitized


def sanitization_processor(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> MutableMapping[str, Any]:
    """structlog processor applying ``sanitize_for_logging`` to each event."""
    return sanitize_for_logging(dict(event_dict))


def _load_settings() -> Optional[Settings]:
    # Invalid settings must not stop logging from coming up; the
    # ValidationError resurfaces when the store reads them.
    try:
        return get_settings()
    except ValidationError:
        return None


def _resolve_level(settings: Optional[Settings]) -> int:
    name = settings.LOG_LEVEL if settings else os.getenv("LOG_LEVEL", "INFO")
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def log_file_path(log_dir: Path, day: Optional[date] = None) -> Path:
    """Daily log file inside ``log_dir``, e.g. ``logs/record-store-20240131.log``."""
    day = day or date.today()
    return log_dir / f"{LOG_FILE_PREFIX}-{day:%Y%m%d}.log"


def _build_handlers(settings: Optional[Settings], level: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if settings:
        to_file, log_dir = settings.LOG_TO_FILE, Path(settings.LOG_FILE_DIR)
    else:
        to_file = os.getenv("LOG_TO_FILE", "").lower() in ("1", "true", "yes")
        log_dir = Path(os.getenv("LOG_FILE_DIR", "logs"))

    if to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            TimedRotatingFileHandler(
                filename=str(log_file_path(log_dir)),
                when="midnight",
                backupCount=30,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(level)
    return handlers


def configure_logging() -> None:
    """Attach handlers to the root logger and configure structlog.

    Called once when this module is first imported.
    """
    settings = _load_settings()
    level = _resolve_level(settings)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in _build_handlers(settings, level):
        root.addHandler(handler)

    processors: List[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        sanitization_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


def get_logger(name: str) -> Any:
    """structlog logger named ``name``, typically the caller's ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> Any:
    """Logger with ``kwargs`` bound to every event it emits.

    Example:
        >>> logger = bind_context(table="keyvalue", operation="upsert")
        >>> logger.info("record_store.upsert.updated")
    """
    return structlog.get_logger().bind(**kwargs)
