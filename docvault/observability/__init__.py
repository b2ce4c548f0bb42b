"""
Observability components.

Provides contextual logging and metrics collection.
"""

from .logging import (
    clear_correlation_id,
    clear_subject_context,
    get_logger,
    log_operation,
    set_correlation_id,
    set_subject_context,
)
from .metrics import MetricsCollector, get_metrics_collector, timed_operation

__all__ = [
    # Metrics
    "MetricsCollector",
    "get_metrics_collector",
    "timed_operation",
    # Logging
    "set_correlation_id",
    "clear_correlation_id",
    "set_subject_context",
    "clear_subject_context",
    "get_logger",
    "log_operation",
]
