"""
DAO Shell - Main Entry Point

Usage:
    python main.py --env demo --path /acme          # Offline demo organization
    python main.py --env dev --path /acme/0x11a0    # Local devchain
    python main.py --env demo --path /broken        # Demo of a failed connection
"""

from __future__ import annotations
import asyncio
import argparse
import sys
from typing import Any, Dict, Optional

from config.config_manager import ConfigManager
from config.models import AppConfig
from daoshell.application import AsyncEventBus, SessionOrchestrator
from daoshell.domain.events.event_types import EventType
from daoshell.domain.exceptions import FatalError
from daoshell.infrastructure.adapters import MemoryHistory, load_connector, make_demo_connector
from daoshell.infrastructure.monitoring import ConnectivityMonitor
from daoshell.infrastructure.persistence import PreferencesStore
from daoshell.models.session_state import SessionState
from daoshell.presentation import SessionDashboard
from daoshell.utils.logging_setup import setup_category_logging, shutdown_logging, set_log_timezone


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="DAO Shell",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --env demo --path /acme.aragonid.eth
  python main.py --env demo --path /acme --account 0xabc --duration 10
  python main.py --env dev --no-dashboard --verbose
        """
    )

    parser.add_argument(
        "--env",
        type=str,
        default="dev",
        choices=["dev", "demo"],
        help="Environment to run in (default: dev). Use 'demo' for an offline organization."
    )

    parser.add_argument(
        "--config",
        type=str,
        default="config",
        help="Configuration directory (default: config)"
    )

    parser.add_argument(
        "--path",
        type=str,
        default="/",
        help="Initial location, e.g. /acme or /acme/<app>/<path> (default: /)"
    )

    parser.add_argument(
        "--account",
        type=str,
        default=None,
        help="Wallet account used for signing"
    )

    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop after this many seconds (default: run until interrupted)"
    )

    parser.add_argument(
        "--no-dashboard",
        action="store_true",
        help="Disable terminal dashboard (headless mode)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level for all categories)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set log level (default: from config, ignored if --verbose is set)"
    )

    return parser.parse_args(argv)


def build_orchestrator_config(config: AppConfig, account: Optional[str]) -> Dict[str, Any]:
    """Flatten the typed config into the orchestrator's config dict."""
    return {
        "wallet_account": account,
        "known_app_ids": config.repos.known_app_ids,
        "identity": {
            "resolve_retry_delay_sec": config.identity.resolve_retry_delay_sec,
        },
        "providers": {
            "provider": config.providers.default,
            "wallet_provider": config.providers.wallet,
        },
    }


async def main_async(args: argparse.Namespace) -> int:
    """Main async entry point. Returns the process exit code."""
    config = ConfigManager(config_dir=args.config, env=args.env).load()

    log_tz = config.logging.timezone
    if log_tz and log_tz.lower() != "local":
        set_log_timezone(log_tz)
    else:
        set_log_timezone(None)

    category_loggers = setup_category_logging(
        env=args.env,
        log_dir=config.logging.dir,
        level=args.log_level or config.logging.level,
        console=args.no_dashboard,
        verbose=args.verbose,
    )
    system_logger = category_loggers["system"]
    system_logger.info(f"Starting DAO Shell (env={args.env}, path={args.path})")

    orchestrator = None
    dashboard = None
    fatal = asyncio.Event()

    try:
        event_bus = AsyncEventBus()
        history = MemoryHistory(args.path)

        if args.env == "demo":
            connector = make_demo_connector(**config.providers.connector_options)
        else:
            connector = load_connector(config.providers.connector, config.providers.connector_options)

        monitor = None
        if config.connectivity.enabled:
            monitor = ConnectivityMonitor(
                config.providers.default,
                {
                    "poll_interval_sec": config.connectivity.poll_interval_sec,
                    "request_timeout_sec": config.connectivity.request_timeout_sec,
                },
            )

        orchestrator = SessionOrchestrator(
            history=history,
            connector=connector,
            config=build_orchestrator_config(config, args.account),
            event_bus=event_bus,
            preferences=PreferencesStore(config.persistence.preferences_file),
            connectivity_monitor=monitor,
        )

        event_bus.subscribe(EventType.FATAL_ERROR, lambda error: fatal.set())

        if not args.no_dashboard:
            dashboard = SessionDashboard(
                config={
                    "show_permissions": config.dashboard.show_permissions,
                    "refresh_per_second": config.dashboard.refresh_per_second,
                },
                env=args.env,
                network={
                    "type": config.network.type,
                    "wallet_network_type": config.network.wallet_network_type,
                    "wallet_provider": config.providers.wallet,
                },
                wallet_account=lambda: orchestrator.wallet_account,
            )

            def render(state: SessionState) -> None:
                try:
                    dashboard.update(state)
                except FatalError:
                    fatal.set()

            event_bus.subscribe(EventType.SESSION_UPDATED, render)
            dashboard.start()

        await orchestrator.start()
        if monitor is None:
            orchestrator.set_connected(True)

        try:
            await asyncio.wait_for(fatal.wait(), timeout=args.duration)
        except asyncio.TimeoutError:
            system_logger.info(f"Duration of {args.duration}s elapsed")

    finally:
        if dashboard:
            dashboard.stop()
        if orchestrator:
            await orchestrator.stop()
            system_logger.info("Orchestrator stopped")

    error = orchestrator.state.fatal_error
    if error is not None:
        system_logger.error(f"Session ended with a fatal error: {error}")
        print(f"Fatal error: {error}", file=sys.stderr)
        return 1

    system_logger.info("DAO Shell shutdown complete")
    return 0


def main() -> None:
    """Main entry point."""
    args = parse_args()

    try:
        exit_code = asyncio.run(main_async(args))
    except KeyboardInterrupt:
        print("Shutdown requested")
        exit_code = 0
    except Exception as e:
        print(f"Fatal error: {e}")
        exit_code = 1
    finally:
        shutdown_logging()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
