"""
Configuration manager with environment-based loading.

Supports:
- Base configuration (base.yaml)
- Environment-specific overrides (dev.yaml, demo.yaml)
- Secrets loading (secrets.yaml - gitignored)
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, List
import yaml
import logging

from daoshell.domain.exceptions import ConfigurationError

from .models import (
    AppConfig,
    ProvidersConfig,
    SelectorNetwork,
    NetworkConfig,
    IdentityConfig,
    ConnectivityConfig,
    DashboardConfig,
    PersistenceConfig,
    ReposConfig,
    LoggingConfig,
)


logger = logging.getLogger(__name__)

ROPSTEN = SelectorNetwork(type="ropsten", label="Ropsten testnet", url="https://ropsten.aragon.org/")


class ConfigManager:
    """
    Configuration manager with environment support.

    Loads configuration in this order:
    1. base.yaml (default config)
    2. {env}.yaml (environment-specific, e.g., demo.yaml)
    3. secrets.yaml (if exists, gitignored)

    Later configs override earlier ones.
    """

    def __init__(self, config_dir: str | Path = "config", env: str = "dev"):
        """
        Initialize config manager.

        Args:
            config_dir: Directory containing config files.
            env: Environment name (dev, demo).
        """
        self.config_dir = Path(config_dir)
        self.env = env
        self.config: Dict[str, Any] = {}

    def load(self) -> AppConfig:
        """
        Load configuration from YAML files.

        Returns:
            AppConfig object.

        Raises:
            FileNotFoundError: If base config not found.
            ConfigurationError: If config is invalid.
        """
        base_path = self.config_dir / "base.yaml"
        if not base_path.exists():
            raise FileNotFoundError(f"Base config not found: {base_path}")

        self.config = self._load_yaml(base_path)
        logger.info(f"Loaded base config from {base_path}")

        env_path = self.config_dir / f"{self.env}.yaml"
        if env_path.exists():
            env_config = self._load_yaml(env_path)
            self.config = self._merge_dicts(self.config, env_config)
            logger.info(f"Loaded {self.env} config from {env_path}")

        secrets_path = self.config_dir / "secrets.yaml"
        if secrets_path.exists():
            secrets = self._load_yaml(secrets_path)
            self.config = self._merge_dicts(self.config, secrets)
            logger.info("Loaded secrets")

        return self._parse_config()

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML file."""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Top level of {path} must be a mapping")
        return data

    def _merge_dicts(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts (override wins)."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def _parse_config(self) -> AppConfig:
        """Parse raw dict into AppConfig."""
        try:
            providers_raw = self.config.get("providers", {})
            providers = ProvidersConfig(
                default=providers_raw.get("default", "http://localhost:8545"),
                wallet=providers_raw.get("wallet"),
                connector=providers_raw.get(
                    "connector",
                    "daoshell.infrastructure.adapters.demo_client:make_demo_connector",
                ),
                connector_options=dict(providers_raw.get("connector_options") or {}),
            )

            network_raw = self.config.get("network", {})
            network_type = network_raw.get("type", "main")
            network = NetworkConfig(
                type=network_type,
                wallet_network_type=network_raw.get("wallet_network_type", network_type),
                selector_networks=self._parse_selector_networks(
                    network_type, network_raw.get("selector_networks", [])
                ),
            )

            identity_raw = self.config.get("identity", {})
            identity = IdentityConfig(
                resolve_retry_delay_sec=float(identity_raw.get("resolve_retry_delay_sec", 0.1)),
            )

            connectivity_raw = self.config.get("connectivity", {})
            connectivity = ConnectivityConfig(
                enabled=connectivity_raw.get("enabled", True),
                poll_interval_sec=float(connectivity_raw.get("poll_interval_sec", 2.0)),
                request_timeout_sec=float(connectivity_raw.get("request_timeout_sec", 5.0)),
            )

            dashboard_raw = self.config.get("dashboard", {})
            dashboard = DashboardConfig(
                refresh_interval_sec=float(dashboard_raw.get("refresh_interval_sec", 0.5)),
                refresh_per_second=int(dashboard_raw.get("refresh_per_second", 4)),
                show_permissions=dashboard_raw.get("show_permissions", False),
            )

            persistence_raw = self.config.get("persistence", {})
            persistence = PersistenceConfig(
                preferences_file=persistence_raw.get("preferences_file", "./data/preferences.json"),
            )

            repos_raw = self.config.get("repos", {})
            repos = ReposConfig(
                known_app_ids=[str(app_id) for app_id in repos_raw.get("known_app_ids", [])],
            )

            logging_raw = self.config.get("logging", {})
            logging_config = LoggingConfig(
                level=logging_raw.get("level", "INFO"),
                json=logging_raw.get("json", True),
                dir=logging_raw.get("dir", "./logs"),
                timezone=logging_raw.get("timezone", "local"),
            )

            if identity.resolve_retry_delay_sec <= 0:
                raise ConfigurationError("identity.resolve_retry_delay_sec must be positive")
            if connectivity.poll_interval_sec <= 0:
                raise ConfigurationError("connectivity.poll_interval_sec must be positive")

            return AppConfig(
                providers=providers,
                network=network,
                identity=identity,
                connectivity=connectivity,
                dashboard=dashboard,
                persistence=persistence,
                repos=repos,
                logging=logging_config,
                raw=self.config,
            )

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to parse config: {e}") from e

    def _parse_selector_networks(
        self, network_type: str, networks_raw: List[Dict[str, Any]]
    ) -> List[SelectorNetwork]:
        networks = [
            SelectorNetwork(type=raw["type"], label=raw.get("label", raw["type"]), url=raw["url"])
            for raw in networks_raw
        ]
        # The selector only offers ropsten when running on it
        if network_type == ROPSTEN.type and all(n.type != ROPSTEN.type for n in networks):
            networks.append(ROPSTEN)
        return networks
