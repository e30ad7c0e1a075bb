"""Structured logging utilities for robust tag extraction.

Every message emitted during an extraction run carries the component that
produced it and the caller's correlation ID in the record's ``extra`` data.
"""

import logging
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "robust_tag_parser"
VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class CorrelationLogger:
    """Logger that tags each record with a component and correlation ID."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name; defaults to the last segment of ``name``
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool
    ) -> None:
        fields = {"component": self.component, "correlation_id": self.correlation_id}
        if extra:
            fields.update(extra)
        self.logger.log(level, message, extra=fields, exc_info=exc_info)

    def is_enabled_for(self, level: int) -> bool:
        """Check whether messages at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra, exc_info=False)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra, exc_info=False)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        """Log an error; the active exception's traceback is attached by default."""
        self._log(logging.ERROR, message, extra, exc_info=exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger for ``name``."""
    return CorrelationLogger(name, correlation_id, component)


def configure_logging(level: str = "INFO") -> None:
    """Configure logging for command-line use.

    The package logger gets the level as well, so the threshold holds even
    when the root logger already has handlers.

    Args:
        level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL

    Raises:
        ValueError: If ``level`` is not a known level name
    """
    if level not in VALID_LOGGING_LEVELS:
        raise ValueError(f"logging level must be one of {VALID_LOGGING_LEVELS}")
    numeric_level = getattr(logging, level)
    logging.basicConfig(level=numeric_level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric_level)
