"""
Logging setup with per-category files and transition ID support.

Provides:
- 6 log categories: system, session, client, navigation, identity, perf
- Automatic module -> category routing
- Transition ID correlation in all logs
- JSON-lines file logging through a queue (non-blocking writes)
- Console output (when the dashboard is disabled or verbose mode)

Categories:
- system: Startup, shutdown, config, dashboard
- session: Session store, reducer, event bus
- client: Organization client construction and callbacks, connectivity
- navigation: History reconciliation and path requests
- identity: Identity intents and lookups
- perf: Timing, latency diagnostics
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
import json
from queue import Queue
from pathlib import Path
from typing import Optional, Dict, List
from datetime import datetime
from zoneinfo import ZoneInfo

from .trace_context import get_transition_id

# =============================================================================
# GLOBAL STATE
# =============================================================================

# Global timezone setting for log timestamps (None = local time)
_log_timezone: Optional[ZoneInfo] = None

# Global verbose flag (set via --verbose CLI flag)
_verbose_mode: bool = False

# Global console output flag (set when --no-dashboard)
_console_enabled: bool = False

# Global log level override (set via --log-level CLI flag)
_log_level_override: Optional[str] = None

# Configured category loggers
_category_loggers: Dict[str, logging.Logger] = {}

# Queue listeners for async file logging (one per category)
_queue_listeners: List[logging.handlers.QueueListener] = []

# =============================================================================
# LOG CATEGORIES AND ROUTING
# =============================================================================

CATEGORIES = ["system", "session", "client", "navigation", "identity", "perf"]

CATEGORY_SUFFIXES = {
    "system": "sys",
    "session": "ses",
    "client": "cli",
    "navigation": "nav",
    "identity": "idn",
    "perf": "prf",
}

# Module path -> category routing
# More specific paths should come first
MODULE_ROUTING: List[tuple[str, str]] = [
    ("daoshell.application.orchestrator.navigation_coordinator", "navigation"),
    ("daoshell.application.orchestrator.identity_coordinator", "identity"),
    ("daoshell.application.orchestrator.dao_coordinator", "client"),
    ("daoshell.application.orchestrator", "session"),
    ("daoshell.application", "session"),
    ("daoshell.infrastructure.adapters.memory_history", "navigation"),
    ("daoshell.infrastructure.adapters", "client"),
    ("daoshell.infrastructure.monitoring", "client"),
    ("daoshell.infrastructure.persistence", "system"),
    ("daoshell.domain.routing", "navigation"),
    ("daoshell.domain", "session"),
    ("daoshell.presentation", "system"),

    # Default fallback
    ("daoshell", "system"),
]


def get_category_for_module(module_name: str) -> str:
    """
    Determine the log category for a given module name.

    Args:
        module_name: Full module path (e.g., "daoshell.application.session_store").

    Returns:
        Category name.
    """
    for prefix, category in MODULE_ROUTING:
        if module_name.startswith(prefix):
            return category
    return "system"


# =============================================================================
# TIMEZONE SUPPORT
# =============================================================================

def set_log_timezone(tz: Optional[str] = None) -> None:
    """
    Set the timezone for log timestamps.

    Args:
        tz: Timezone name (e.g., "Europe/Berlin", "UTC"). None uses local time.
    """
    global _log_timezone
    _log_timezone = None if tz is None else ZoneInfo(tz)


def get_log_timezone() -> Optional[ZoneInfo]:
    """Get the current log timezone setting."""
    return _log_timezone


def get_current_timestamp() -> str:
    """Get the current timestamp formatted for logging."""
    if _log_timezone is not None:
        return datetime.now(_log_timezone).isoformat()
    return datetime.now().isoformat()


# =============================================================================
# GLOBAL CONFIGURATION
# =============================================================================

def set_verbose_mode(enabled: bool) -> None:
    """Enable or disable verbose mode (DEBUG level logging)."""
    global _verbose_mode
    _verbose_mode = enabled


def is_verbose_mode() -> bool:
    return _verbose_mode


def set_console_enabled(enabled: bool) -> None:
    """Enable or disable console output."""
    global _console_enabled
    _console_enabled = enabled


def is_console_enabled() -> bool:
    return _console_enabled


def set_log_level_override(level: Optional[str]) -> None:
    """Set a global log level override."""
    global _log_level_override
    _log_level_override = level.upper() if level else None


def get_effective_log_level() -> str:
    """Get the effective log level (considering verbose mode and overrides)."""
    if _verbose_mode:
        return "DEBUG"
    if _log_level_override:
        return _log_level_override
    return "INFO"


# =============================================================================
# FORMATTERS
# =============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging with transition ID support.

    Formats log records as single-line JSON with timestamp, level,
    category, transition ID, message and optional extra data.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "ts": get_current_timestamp(),
            "level": record.levelname,
            "cat": self._get_category(record.name),
            "transition": get_transition_id(),
            "msg": record.getMessage(),
        }

        if hasattr(record, "data") and record.data:
            log_entry["data"] = record.data

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)

    def _get_category(self, logger_name: str) -> str:
        """Extract category from logger name."""
        if logger_name.startswith("daoshell."):
            parts = logger_name.split(".")
            if len(parts) >= 2 and parts[1] in CATEGORIES:
                return parts[1]
        return "system"


class ConsoleFormatter(logging.Formatter):
    """
    Console formatter with transition ID and color support.

    Format: [LEVEL] [transition] message
    """

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        transition_id = get_transition_id()
        level = record.levelname
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        if self.use_colors:
            color = self.COLORS.get(level, "")
            return f"{color}[{level:7}]{self.RESET} [{transition_id}] {message}"
        return f"[{level:7}] [{transition_id}] {message}"


# =============================================================================
# LOGGER FACTORY
# =============================================================================

def get_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for the given module, routed to the correct category.

    Args:
        module_name: Module name (typically __name__).

    Returns:
        Logger instance that routes to the appropriate category.

    Example:
        from daoshell.utils.logging_setup import get_logger
        logger = get_logger(__name__)
        logger.info("Loading DAO...")
    """
    category = get_category_for_module(module_name)
    category_logger_name = f"daoshell.{category}"

    logger = logging.getLogger(category_logger_name)

    # If category loggers haven't been set up yet, ensure basic config
    if not logger.handlers and category not in _category_loggers:
        logger.setLevel(logging.DEBUG)

    return logger


# =============================================================================
# CATEGORY LOGGING SETUP
# =============================================================================

def setup_category_logging(
    env: str,
    log_dir: str = "./logs",
    level: str = "INFO",
    console: bool = False,
    verbose: bool = False,
) -> Dict[str, logging.Logger]:
    """
    Set up separate log files for each category.

    Creates log files in a date-specific subdirectory:
    logs/{date}/daoshell_{env}_{suffix}_{date}.log

    Args:
        env: Environment name (dev/demo).
        log_dir: Base directory for log files.
        level: Default logging level.
        console: Enable console output.
        verbose: Enable verbose (DEBUG) mode.

    Returns:
        Dict mapping category name to logger.
    """
    # Clean up existing handlers and listeners before reconfiguration
    shutdown_logging()

    for category in CATEGORIES:
        logger = logging.getLogger(f"daoshell.{category}")
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    set_verbose_mode(verbose)
    set_console_enabled(console)
    if not verbose:
        set_log_level_override(level)

    date_str = datetime.now().strftime('%Y-%m-%d')
    log_path = Path(log_dir) / date_str
    log_path.mkdir(parents=True, exist_ok=True)

    effective_level = getattr(logging, get_effective_log_level(), logging.INFO)

    for category in CATEGORIES:
        suffix = CATEGORY_SUFFIXES[category]
        filename = f"daoshell_{env}_{suffix}_{date_str}.log"

        logger = logging.getLogger(f"daoshell.{category}")
        logger.setLevel(effective_level)
        logger.propagate = False

        file_handler = logging.FileHandler(
            filename=str(log_path / filename),
            mode='a',
            encoding='utf-8'
        )
        file_handler.setFormatter(JSONFormatter())
        file_handler.setLevel(effective_level)

        # QueueHandler keeps file writes off the event loop
        log_queue: Queue = Queue(-1)
        logger.addHandler(logging.handlers.QueueHandler(log_queue))

        listener = logging.handlers.QueueListener(
            log_queue, file_handler, respect_handler_level=True
        )
        listener.start()
        _queue_listeners.append(listener)

        if console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(ConsoleFormatter(use_colors=True))
            console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
            logger.addHandler(console_handler)

        _category_loggers[category] = logger

    return _category_loggers


def get_category_loggers() -> Dict[str, logging.Logger]:
    """Get all configured category loggers."""
    return _category_loggers


def shutdown_logging() -> None:
    """Stop all queue listeners (call during application shutdown)."""
    for listener in _queue_listeners:
        listener.stop()
    _queue_listeners.clear()
