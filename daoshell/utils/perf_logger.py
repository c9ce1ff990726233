"""
Performance logging utilities.

Provides timing context managers for automatic performance logging.
All timing logs include the current transition ID for correlation.

Usage:
    async with log_timing_async("dao_connect") as ctx:
        wrapper = await connector(dao, options)
        ctx["dao"] = dao

Use for operations that run a handful of times per session (wrapper
construction, identity writes). Callback aggregation is a hot path and
is not timed.
"""

from __future__ import annotations

import time
import logging
from contextlib import contextmanager, asynccontextmanager
from typing import Optional, Generator, AsyncGenerator

from .trace_context import get_transition_id

# Performance logger - uses 'daoshell.perf' category
_perf_logger: Optional[logging.Logger] = None


def get_perf_logger() -> logging.Logger:
    """Get or create the performance logger."""
    global _perf_logger
    if _perf_logger is None:
        _perf_logger = logging.getLogger("daoshell.perf")
    return _perf_logger


def set_perf_logger(logger: logging.Logger) -> None:
    """Set the performance logger (for testing or custom configuration)."""
    global _perf_logger
    _perf_logger = logger


def _emit(operation: str, duration_ms: float, context: dict,
          warn_threshold_ms: float, error_threshold_ms: float) -> None:
    logger = get_perf_logger()
    transition_id = get_transition_id()

    log_data = {
        "transition": transition_id,
        "operation": operation,
        "duration_ms": round(duration_ms, 2),
        **context,
    }

    if duration_ms >= error_threshold_ms:
        logger.error(f"[{transition_id}] SLOW {operation}: {duration_ms:.1f}ms", extra={"data": log_data})
    elif duration_ms >= warn_threshold_ms:
        logger.warning(f"[{transition_id}] {operation}: {duration_ms:.1f}ms (slow)", extra={"data": log_data})
    else:
        logger.debug(f"[{transition_id}] {operation}: {duration_ms:.1f}ms", extra={"data": log_data})


@contextmanager
def log_timing(
    operation: str,
    warn_threshold_ms: float = 500.0,
    error_threshold_ms: float = 2000.0,
    extra: Optional[dict] = None,
) -> Generator[dict, None, None]:
    """
    Context manager to log operation timing.

    Escalates the log level based on duration thresholds.

    Args:
        operation: Name of the operation being timed.
        warn_threshold_ms: Duration above which to log as WARNING.
        error_threshold_ms: Duration above which to log as ERROR.
        extra: Additional data to include in the log.

    Yields:
        Dict that can be updated with additional context during execution.
    """
    context = extra.copy() if extra else {}
    start_time = time.perf_counter()

    try:
        yield context
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        _emit(operation, duration_ms, context, warn_threshold_ms, error_threshold_ms)


@asynccontextmanager
async def log_timing_async(
    operation: str,
    warn_threshold_ms: float = 500.0,
    error_threshold_ms: float = 2000.0,
    extra: Optional[dict] = None,
) -> AsyncGenerator[dict, None]:
    """Async variant of :func:`log_timing`."""
    context = extra.copy() if extra else {}
    start_time = time.perf_counter()

    try:
        yield context
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        _emit(operation, duration_ms, context, warn_threshold_ms, error_threshold_ms)
