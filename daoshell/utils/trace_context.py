"""
Trace context for correlating logs across a single DAO transition.

Provides:
- Unique transition IDs (6-char hex) for each DAO load/unload
- Context propagation via contextvars (async-safe)
- Easy access to current transition ID from any module

Tasks created inside a transition (wrapper construction, identity
pre-fill) copy the context, so their log lines keep the same ID.

Usage:
    # In the DAO coordinator (start of a transition)
    with new_transition() as transition_id:
        coordinator.load(dao)

    # In any module
    from daoshell.utils.trace_context import get_transition_id
    logger.info(f"[{get_transition_id()}] Processing...")
"""

from __future__ import annotations

import secrets
from contextvars import ContextVar
from contextlib import contextmanager
from typing import Optional, Generator

# Context variable for the current transition ID (async-safe)
_transition_id: ContextVar[Optional[str]] = ContextVar("transition_id", default=None)

# Counter for transitions within a session (for debugging)
_transition_counter: int = 0


def generate_transition_id() -> str:
    """
    Generate a new unique transition ID.

    Returns:
        6-character hex string (e.g., "a7f3b2").
    """
    return secrets.token_hex(3)


def get_transition_id() -> str:
    """
    Get the current transition ID.

    Returns:
        Current transition ID, or "------" if no transition is active.
    """
    transition_id = _transition_id.get()
    return transition_id if transition_id else "------"


def set_transition_id(transition_id: str) -> None:
    """Set the current transition ID."""
    _transition_id.set(transition_id)


def clear_transition_id() -> None:
    """Clear the current transition ID."""
    _transition_id.set(None)


@contextmanager
def new_transition() -> Generator[str, None, None]:
    """
    Context manager to start a new transition with a unique ID.

    Yields:
        The new transition ID.
    """
    global _transition_counter
    _transition_counter += 1

    transition_id = generate_transition_id()
    token = _transition_id.set(transition_id)

    try:
        yield transition_id
    finally:
        _transition_id.reset(token)


def get_transition_counter() -> int:
    """Get the total number of transitions created in this session."""
    return _transition_counter


def reset_transition_counter() -> None:
    """Reset the transition counter (for testing)."""
    global _transition_counter
    _transition_counter = 0
