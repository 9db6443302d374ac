"""
tenantscope structured logging.

JSON formatting for audit pipelines, text formatting for development, and
per-request context injection.
"""

from tenantscope.logging.config import (
    LogFormat,
    LogLevel,
    ScopeLogger,
    configure_logging,
    get_logger,
    log_tenant_filter,
)
from tenantscope.logging.context import (
    ContextFilter,
    LogContext,
    clear_log_context,
    get_log_context,
    set_log_context,
    with_log_context,
)
from tenantscope.logging.formatters import JSONFormatter, TextFormatter

__all__ = [
    # Configuration
    "configure_logging",
    "get_logger",
    "log_tenant_filter",
    "ScopeLogger",
    "LogLevel",
    "LogFormat",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    # Context
    "ContextFilter",
    "LogContext",
    "clear_log_context",
    "get_log_context",
    "set_log_context",
    "with_log_context",
]
