"""Adapters for the navigation history and organization clients."""

from .memory_history import MemoryHistory, location_from_path
from .demo_client import DemoOrganizationClient, make_demo_connector
from .connector_loader import load_connector

__all__ = [
    "MemoryHistory",
    "location_from_path",
    "DemoOrganizationClient",
    "make_demo_connector",
    "load_connector",
]
