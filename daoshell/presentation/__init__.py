"""Presentation layer."""

from .dashboard import SessionDashboard

__all__ = ["SessionDashboard"]
