"""Monitoring components."""

from .connectivity import ConnectivityMonitor

__all__ = ["ConnectivityMonitor"]
