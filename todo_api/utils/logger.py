"""
Logging utilities for the todo API.

Module code logs through ``logging.getLogger(__name__)``; service-level
events go through ``StructuredLogger`` so they land as one JSON object per
line with the service name and any context fields attached.
"""

import logging
import sys
from datetime import datetime, timezone
import json

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the process.

    Args:
        level: Level name such as ``"INFO"`` or ``"DEBUG"``
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


class StructuredLogger:
    """JSON-line logger for service events."""

    def __init__(self, name: str, level: int = logging.NOTSET):
        """
        Initialize structured logger.

        Args:
            name: Logger name, reported as ``service`` in every record
            level: Logging level; NOTSET defers to the level set by configure_logging
        """
        self.logger = logging.getLogger(name)
        if level != logging.NOTSET:
            self.logger.setLevel(level)

    def _build(self, level: int, message: str, **kwargs) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "message": message,
            "service": self.logger.name,
        }
        log_data.update(kwargs)
        return json.dumps(log_data, default=str)

    def _log_structured(self, level: int, message: str, **kwargs):
        if self.logger.isEnabledFor(level):
            self.logger.log(level, self._build(level, message, **kwargs))

    def debug(self, message: str, **kwargs):
        self._log_structured(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log_structured(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log_structured(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log_structured(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log an error record with the active traceback attached."""
        if self.logger.isEnabledFor(logging.ERROR):
            self.logger.exception(self._build(logging.ERROR, message, exception=True, **kwargs))


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger for the given component.

    Args:
        name: Component name, e.g. ``"todo_api.tasks"``

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
