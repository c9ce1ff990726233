"""Utility modules."""

from .logging_setup import (
    setup_category_logging,
    shutdown_logging,
    set_log_timezone,
    get_log_timezone,
    get_current_timestamp,
    get_logger,
    set_verbose_mode,
    set_console_enabled,
    is_verbose_mode,
    is_console_enabled,
)
from .trace_context import (
    get_transition_id,
    set_transition_id,
    new_transition,
    generate_transition_id,
)
from .perf_logger import (
    log_timing,
    log_timing_async,
)

__all__ = [
    # Logging setup
    "setup_category_logging",
    "shutdown_logging",
    "set_log_timezone",
    "get_log_timezone",
    "get_current_timestamp",
    "get_logger",
    "set_verbose_mode",
    "set_console_enabled",
    "is_verbose_mode",
    "is_console_enabled",
    # Trace context
    "get_transition_id",
    "set_transition_id",
    "new_transition",
    "generate_transition_id",
    # Performance logging
    "log_timing",
    "log_timing_async",
]
