"""Configuration data models."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


@dataclass
class ProvidersConfig:
    """Ethereum providers and the organization connector."""
    default: str
    wallet: Optional[str]
    connector: str
    connector_options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SelectorNetwork:
    """A network offered by the network selector."""
    type: str
    label: str
    url: str


@dataclass
class NetworkConfig:
    """Network the shell runs on."""
    type: str
    wallet_network_type: str
    selector_networks: List[SelectorNetwork]


@dataclass
class IdentityConfig:
    """Identity resolution configuration."""
    resolve_retry_delay_sec: float


@dataclass
class ConnectivityConfig:
    """Default provider polling configuration."""
    enabled: bool
    poll_interval_sec: float
    request_timeout_sec: float


@dataclass
class DashboardConfig:
    """Dashboard configuration."""
    refresh_interval_sec: float
    refresh_per_second: int
    show_permissions: bool


@dataclass
class PersistenceConfig:
    """Local preferences file."""
    preferences_file: str


@dataclass
class ReposConfig:
    """Repositories considered for organization upgrades."""
    known_app_ids: List[str]


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str
    json: bool
    dir: str
    timezone: str


@dataclass
class AppConfig:
    """Complete application configuration."""
    providers: ProvidersConfig
    network: NetworkConfig
    identity: IdentityConfig
    connectivity: ConnectivityConfig
    dashboard: DashboardConfig
    persistence: PersistenceConfig
    repos: ReposConfig
    logging: LoggingConfig
    raw: Dict[str, Any]
