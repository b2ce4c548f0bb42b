"""
Contextual logging for DocVault.

Adds a per-request correlation ID and the acting subject to log records
through context variables, so store and authorization logs can be joined
without threading identifiers through every call.
"""

import contextvars
import logging
import uuid
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

_subject_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "subject_context", default=None
)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind a correlation ID to the current request.

    Returns:
        The given ID, or a new UUID when none was supplied
    """
    correlation_id = correlation_id or str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    _correlation_id.set(None)


def set_subject_context(subject_id: str, role: str) -> None:
    """Bind the acting subject to the current request."""
    _subject_context.set({"subject_id": subject_id, "role": role})


def clear_subject_context() -> None:
    _subject_context.set(None)


def _record_fields(**fields: Any) -> dict[str, Any]:
    correlation_id = _correlation_id.get()
    if correlation_id:
        fields.setdefault("correlation_id", correlation_id)
    for key, value in (_subject_context.get() or {}).items():
        fields.setdefault(key, value)
    return fields


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Attaches the correlation ID and acting subject to every record."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = _record_fields(**(kwargs.get("extra") or {}))
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    success: bool = True,
    duration_ms: float | None = None,
    **fields: Any,
) -> None:
    """
    Log a completed store operation as one structured record.

    Failures are logged at warning level, successes at info.
    """
    message = f"Operation: {operation}" if success else f"Operation failed: {operation}"
    if duration_ms is not None:
        fields["duration_ms"] = round(duration_ms, 2)
        message += f" (duration: {duration_ms:.2f}ms)"
    logger.log(
        logging.INFO if success else logging.WARNING,
        message,
        extra=_record_fields(operation=operation, success=success, **fields),
    )
