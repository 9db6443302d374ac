"""
Logging context management for tenantscope.

Lets a request handler attach the principal and request id once so every
scoping decision logged during that request carries them.
"""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tenantscope.core.context import AccessScopeOptions

_log_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "tenantscope_log_context",
    default=None,
)


@dataclass
class LogContext:
    """
    Structured logging context for one request.
    """

    principal_id: str | None = None
    role: str | None = None
    request_id: str | None = None
    trace_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_options(
        cls,
        options: AccessScopeOptions,
        request_id: str | None = None,
    ) -> LogContext:
        """Create a LogContext from the scoping options of a call."""
        return cls(
            principal_id=options.principal.id or None,
            role=options.principal.role.value,
            request_id=request_id,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary of non-None values."""
        result = {}
        if self.principal_id is not None:
            result["principal_id"] = self.principal_id
        if self.role is not None:
            result["role"] = self.role
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.trace_id is not None:
            result["trace_id"] = self.trace_id
        result.update(self.extra)
        return result


def get_log_context() -> dict[str, Any]:
    """Get the current log context."""
    ctx = _log_context.get()
    return ctx.copy() if ctx else {}


def set_log_context(context: LogContext | dict[str, Any]) -> None:
    """Set the current log context."""
    if isinstance(context, LogContext):
        _log_context.set(context.to_dict())
    else:
        _log_context.set(dict(context))


def clear_log_context() -> None:
    """Clear the current log context."""
    _log_context.set(None)


@contextmanager
def with_log_context(
    context: LogContext | dict[str, Any] | None = None,
    **kwargs: Any,
) -> Iterator[None]:
    """
    Context manager for setting log context within a scope.

    Example:
        with with_log_context(LogContext.from_options(options), request_id="r-1"):
            build_tenant_filter(options)  # decision log carries principal_id
    """
    previous = _log_context.get()

    if context is not None:
        new_context = (
            context.to_dict() if isinstance(context, LogContext) else dict(context)
        )
    else:
        new_context = previous.copy() if previous else {}

    new_context.update(kwargs)
    _log_context.set(new_context)

    try:
        yield
    finally:
        _log_context.set(previous)


class ContextFilter(logging.Filter):
    """
    Logging filter that injects context fields into log records.

    Fields passed explicitly on the log call win over context fields.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
