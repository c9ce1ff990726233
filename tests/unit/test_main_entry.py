"""
End-to-end tests of the CLI entry point against the demo organization.
"""

import pytest

from config.config_manager import ConfigManager
from main import build_orchestrator_config, main_async, parse_args
from daoshell.utils.logging_setup import get_category_loggers, shutdown_logging


def write_config(tmp_path):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "base.yaml").write_text(f"""
providers:
  default: "http://localhost:8545"
  wallet: "demo"
  connector_options:
    delay_sec: 0.01
    fail_daos: [broken]
connectivity:
  enabled: false
persistence:
  preferences_file: "{tmp_path / 'prefs.json'}"
repos:
  known_app_ids: ["0xvoting"]
logging:
  dir: "{tmp_path / 'logs'}"
""")
    return config_dir


@pytest.fixture
def config_dir(tmp_path):
    yield write_config(tmp_path)
    shutdown_logging()
    for logger in get_category_loggers().values():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.env == "dev"
        assert args.path == "/"
        assert args.account is None
        assert not args.no_dashboard

    def test_options(self):
        args = parse_args(["--env", "demo", "--path", "/acme", "--account", "0xme", "--duration", "2", "-v"])
        assert args.env == "demo"
        assert args.path == "/acme"
        assert args.account == "0xme"
        assert args.duration == 2.0
        assert args.verbose


def test_orchestrator_config(config_dir):
    config = ConfigManager(config_dir, env="demo").load()

    flat = build_orchestrator_config(config, "0xme")

    assert flat["wallet_account"] == "0xme"
    assert flat["known_app_ids"] == ["0xvoting"]
    assert flat["providers"] == {"provider": "http://localhost:8545", "wallet_provider": "demo"}


class TestMainAsync:
    """Runs the shell headless for a short time."""

    @pytest.mark.asyncio
    async def test_demo_session_runs(self, config_dir):
        args = parse_args([
            "--env", "demo", "--config", str(config_dir),
            "--path", "/acme", "--no-dashboard", "--duration", "0.3",
        ])
        assert await main_async(args) == 0

    @pytest.mark.asyncio
    async def test_failed_connection_exits_with_error(self, config_dir):
        args = parse_args([
            "--env", "demo", "--config", str(config_dir),
            "--path", "/broken", "--no-dashboard", "--duration", "5",
        ])
        assert await main_async(args) == 1
