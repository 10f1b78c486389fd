# room_directory/logging_config.py
"""
dictConfig builder shared by the API process and the command-line scripts.

Console output goes through uvicorn's formatters so application and server
lines look alike. An optional size-rotated file receives the same records
without colour codes.
"""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import Settings

CONSOLE_FORMAT = "%(levelprefix)s %(asctime)s %(name)s: %(message)s"
ACCESS_FORMAT = (
    '%(levelprefix)s %(asctime)s %(client_addr)s - "%(request_line)s" %(status_code)s'
)
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(module)s:%(lineno)d] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Libraries that are chatty at DEBUG
QUIET_LOGGERS = ("asyncio", "aiosqlite", "sqlalchemy.pool", "faker")


def build_logging_config(
    level: str = "INFO",
    log_file: Optional[str] = None,
    echo_sql: bool = False,
) -> Dict[str, Any]:
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
        "access": {
            "class": "logging.StreamHandler",
            "formatter": "access",
            "stream": "ext://sys.stdout",
        },
    }
    sinks: List[str] = ["console"]

    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "file",
            "filename": log_file,
            "maxBytes": MAX_LOG_BYTES,
            "backupCount": LOG_BACKUPS,
            "encoding": "utf-8",
        }
        sinks.append("file")

    loggers: Dict[str, Any] = {
        "room_directory": {"handlers": sinks, "level": level, "propagate": False},
        "uvicorn": {"handlers": sinks, "level": "INFO", "propagate": False},
        "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
        "sqlalchemy.engine": {"level": "INFO" if echo_sql else "WARNING"},
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": CONSOLE_FORMAT,
                "datefmt": DATE_FORMAT,
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": ACCESS_FORMAT,
                "datefmt": DATE_FORMAT,
            },
            "file": {"format": FILE_FORMAT, "datefmt": DATE_FORMAT},
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {"handlers": sinks, "level": level},
    }


def logging_config_for(settings: Settings) -> Dict[str, Any]:
    return build_logging_config(
        level=settings.LOG_LEVEL,
        log_file=settings.LOG_FILE,
        echo_sql=settings.DATABASE_ECHO,
    )


def setup_logging(settings: Settings) -> Dict[str, Any]:
    """Apply the logging config for ``settings`` and return it."""
    if settings.LOG_FILE:
        Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)

    config = logging_config_for(settings)
    logging.config.dictConfig(config)
    logging.getLogger(__name__).debug(
        "Logging configured at %s%s",
        settings.LOG_LEVEL,
        f", file {settings.LOG_FILE}" if settings.LOG_FILE else "",
    )
    return config


__all__ = ["build_logging_config", "logging_config_for", "setup_logging"]
