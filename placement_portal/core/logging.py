"""
core/logging.py

Logging setup for the API and its scripts.

`init_logging()` installs one dictConfig: colored console output, `app.log`
and an ERROR-only `error.log` under LOG_DIR, both rotating at 1 MB with five
backups. Called once by `main.py` and by the `database` scripts.
"""

import os
from logging.config import dictConfig
from typing import Any

from placement_portal.core.config import settings


def build_logging_config(log_dir: str, level: str) -> dict[str, Any]:
    """Returns the dictConfig mapping for the given log directory and level."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "[%(asctime)s] %(levelname)s [%(name)s] in %(module)s: %(message)s",
            },
            "color": {
                "()": "colorlog.ColoredFormatter",
                "format": "%(log_color)s[%(asctime)s] %(levelname)s [%(name)s] in %(module)s: %(message)s",
                "log_colors": {
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "bold_red",
                },
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "color",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": os.path.join(log_dir, "app.log"),
                "maxBytes": 1 * 1024 * 1024,  # 1MB
                "backupCount": 5,
                "formatter": "default",
                "encoding": "utf-8",
            },
            "error_file": {
                "class": "logging.FileHandler",
                "filename": os.path.join(log_dir, "error.log"),
                "level": "ERROR",
                "formatter": "default",
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "uvicorn": {"level": "WARNING"},
            "sqlalchemy": {"level": "WARNING"},
            "aiosqlite": {"level": "WARNING"},
        },
        "root": {
            "level": level,
            "handlers": ["console", "file", "error_file"],
        },
    }


def init_logging() -> None:
    """Initializes logging, creating the log directory if needed."""
    log_dir = settings.log_path
    os.makedirs(log_dir, exist_ok=True)
    dictConfig(build_logging_config(str(log_dir), settings.LOG_LEVEL.upper()))
