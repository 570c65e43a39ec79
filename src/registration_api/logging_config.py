"""Logging configuration for the Registration API.

INFO/DEBUG go to stdout and WARNING/ERROR to stderr. Level and format come
from ``LOG_LEVEL`` and ``LOG_FORMAT``. SQLAlchemy engine logging stays at
WARNING unless ``DEBUG`` turns on statement echo.
"""

import logging
import sys

from registration_api.config import config

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


class InfoFilter(logging.Filter):
    """Pass records below WARNING"""

    def filter(self, record):
        return record.levelno < logging.WARNING


def _stream_handler(stream, level: int, formatter: logging.Formatter, info_only=False):
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    if info_only:
        handler.addFilter(InfoFilter())
    handler.setFormatter(formatter)
    return handler


def setup_logging(settings: dict = None):
    """
    Configure the root logger for the service.

    Args:
        settings: Configuration mapping, defaults to the application config.
            Reads ``log_level``, ``log_format`` and ``database_echo``.
    """
    settings = settings if settings is not None else config

    log_level = settings.get("log_level", "INFO")
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(
        settings.get("log_format", "%(levelname)s:%(name)s:%(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    root_logger.addHandler(
        _stream_handler(sys.stdout, logging.DEBUG, formatter, info_only=True)
    )
    root_logger.addHandler(_stream_handler(sys.stderr, logging.WARNING, formatter))

    if not settings.get("database_echo", False):
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name"""
    return logging.getLogger(name)
