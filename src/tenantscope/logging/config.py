"""
Logging configuration for tenantscope.

All library loggers live under the ``tenantscope`` namespace. Nothing is
configured on import; applications call configure_logging() at startup.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Any, TextIO

from tenantscope.logging.context import ContextFilter
from tenantscope.logging.formatters import JSONFormatter, TextFormatter

ROOT_LOGGER_NAME = "tenantscope"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.value)


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    TEXT = "text"


class ScopeLogger:
    """
    Logger wrapper that accepts structured fields as keyword arguments.

    Example:
        logger = ScopeLogger("tenantscope.builder")
        logger.info("Global access granted", principal_id="admin-1")
    """

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def log(
        self,
        level: int | LogLevel,
        msg: str,
        *args: Any,
        exc_info: bool | BaseException | None = None,
        **kwargs: Any,
    ) -> None:
        if isinstance(level, LogLevel):
            level = level.numeric
        self._logger.log(level, msg, *args, exc_info=exc_info, extra=kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(
        self,
        msg: str,
        *args: Any,
        exc_info: bool | BaseException | None = None,
        **kwargs: Any,
    ) -> None:
        self.log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def is_enabled_for(self, level: int | LogLevel) -> bool:
        """Check if logger is enabled for the given level."""
        if isinstance(level, LogLevel):
            level = level.numeric
        return self._logger.isEnabledFor(level)


def get_logger(name: str) -> ScopeLogger:
    """
    Get a tenantscope logger by name.

    Args:
        name: Logger name (e.g., "tenantscope.builder")
    """
    return ScopeLogger(name)


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    format: LogFormat | str = LogFormat.JSON,
    output: TextIO | None = None,
    include_context: bool = True,
    use_colors: bool = True,
) -> None:
    """
    Configure tenantscope logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (json for audit pipelines, text for development)
        output: Output stream (defaults to stderr)
        include_context: Whether to inject LogContext fields into records
        use_colors: Whether to use colors in text format (ignored for JSON)

    Example:
        configure_logging(level="DEBUG", format="text")
    """
    if isinstance(level, str):
        level = LogLevel(level.upper())

    if isinstance(format, str):
        format = LogFormat(format.lower())

    if output is None:
        output = sys.stderr

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.numeric)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(output)
    handler.setLevel(level.numeric)

    if format == LogFormat.JSON:
        formatter: logging.Formatter = JSONFormatter(include_extra=True)
    else:
        formatter = TextFormatter(use_colors=use_colors)
    handler.setFormatter(formatter)

    if include_context:
        handler.addFilter(ContextFilter())

    root_logger.addHandler(handler)
    root_logger.propagate = False


def log_tenant_filter(
    filter_value: Any,
    context: str,
    *,
    level: int | LogLevel = logging.DEBUG,
) -> None:
    """
    Log a built filter for debugging call sites.

    Accepts either a predicate model or an already-rendered where-dict.

    Args:
        filter_value: Predicate or where-dict to log
        context: Short label for the call site (e.g., "projects.list")
    """
    logger = get_logger(f"{ROOT_LOGGER_NAME}.debug")
    if not logger.is_enabled_for(level):
        return
    if hasattr(filter_value, "model_dump"):
        filter_value = filter_value.model_dump(mode="json")
    logger.log(level, "Tenant filter for %s", context, predicate=filter_value)
