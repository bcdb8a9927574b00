import logging
import sys
from typing import Any

from home_energy.core.config import settings


def setup_logging() -> None:
    """Setup application logging configuration"""

    formatter = logging.Formatter(
        fmt=settings.LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(settings.LOG_LEVEL)

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.LOG_LEVEL)
    root_logger.addHandler(console_handler)

    # Quieter third-party loggers
    loggers_config = {
        "uvicorn": {"level": "INFO"},
        "uvicorn.access": {"level": "INFO"},
        "sqlalchemy.engine": {"level": "WARNING"},
        "aiosqlite": {"level": "WARNING"},
        "passlib": {"level": "ERROR"},
        "redis": {"level": "WARNING"},
    }

    for logger_name, config in loggers_config.items():
        logging.getLogger(logger_name).setLevel(config["level"])

    if not settings.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


class StructuredLogger:
    """Logger that appends key=value context to every message"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        extra_data = " | ".join(f"{k}={v}" for k, v in kwargs.items())
        full_message = f"{message} | {extra_data}" if extra_data else message
        self.logger.log(level, full_message)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance"""
    return StructuredLogger(name)
