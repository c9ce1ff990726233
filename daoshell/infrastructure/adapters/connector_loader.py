"""Resolve the organization connector named in configuration."""

from __future__ import annotations
import importlib
from typing import Any, Dict, Optional

from ...domain.exceptions import ConfigurationError
from ...domain.interfaces.organization_client import OrganizationConnector
from ...utils.logging_setup import get_logger

logger = get_logger(__name__)


def load_connector(factory_path: str, options: Optional[Dict[str, Any]] = None) -> OrganizationConnector:
    """
    Import a connector factory and build the connector.

    Args:
        factory_path: ``"package.module:factory"``; the factory returns a connector.
        options: Keyword arguments for the factory.

    Raises:
        ConfigurationError: The path is malformed or cannot be imported.
    """
    module_name, sep, attr = factory_path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Connector must be 'module:factory', got {factory_path!r}")

    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot load connector {factory_path}: {e}") from e

    logger.info(f"Using connector {factory_path}")
    return factory(**(options or {}))
