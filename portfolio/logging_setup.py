"""Central logging configuration for the portfolio API.

Routes every module logger and the uvicorn loggers through one stdout
handler at INFO level. Safe to call repeatedly (reloaders, test clients).
"""
from __future__ import annotations
import logging
from logging.config import dictConfig

_DICT_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
        "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
        "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
        # SQL echo stays off unless explicitly raised by an operator
        "sqlalchemy.engine": {"level": "WARNING"},
    },
}


def configure_logging(level: str | None = None) -> None:
    """Configure application-wide logging once.

    Returns early when the root logger already has handlers so repeated
    app construction does not duplicate output. ``level`` overrides the
    root level (e.g. ``"DEBUG"`` from the CLI).
    """
    root = logging.getLogger()
    if root.handlers:
        if level:
            root.setLevel(level.upper())
        return
    dictConfig(_DICT_CONFIG)
    if level:
        root.setLevel(level.upper())
