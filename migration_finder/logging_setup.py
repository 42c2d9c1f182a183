"""
Structured logging setup for migration discovery.

This module configures:
- StreamHandler to stderr
- RotatingFileHandler <log_dir>/migration_finder.log (1 MB max, 5 backups), optional
- JSON log formatter (stdlib json)

Usage:
    from migration_finder.logging_setup import setup_logging
    setup_logging(level="INFO", log_dir="logs")
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from pathlib import Path

_CONFIGURED_MARKER = "_migration_finder_logging_configured"


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter with core fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def is_logging_configured(logger: logging.Logger) -> bool:
    return getattr(logger, _CONFIGURED_MARKER, False)


def setup_logging(
    level: str = "INFO",
    log_dir: str | Path | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Configure JSON logging, on the root logger unless another is given.

    Only the first call per logger has an effect.

    Args:
        level: Logging level string ("DEBUG", "INFO", "WARNING", "ERROR").
        log_dir: If given, also log to a rotating file in this directory.
        logger: Logger to configure, defaults to the root logger.
    """
    target = logger or logging.getLogger()
    if is_logging_configured(target):
        return

    formatter = JsonFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(stream=sys.stderr)]

    if log_dir is not None:
        logs_path = Path(log_dir)
        logs_path.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=str(logs_path / "migration_finder.log"),
                maxBytes=1_000_000,
                backupCount=5,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)

    target.setLevel(getattr(logging, level.upper(), logging.INFO))
    target.handlers = handlers
    setattr(target, _CONFIGURED_MARKER, True)

    logging.getLogger("migration_finder").debug("Structured logging configured")


def apply_log_level(level: str) -> None:
    """Set the level of the package loggers without touching handlers."""
    logging.getLogger("migration_finder").setLevel(getattr(logging, level.upper(), logging.INFO))
