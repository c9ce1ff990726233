"""
ConnectivityMonitor - Default provider reachability polling.

Probes the default Ethereum provider with a JSON-RPC ``net_listening``
call on a fixed interval and reports every change of reachability.
The blocking HTTP call runs in a worker thread.
"""

from __future__ import annotations
import asyncio
from typing import Any, Callable, Dict, Optional

import requests

from ...utils.logging_setup import get_logger


logger = get_logger(__name__)


class ConnectivityMonitor:
    """
    Polls the default provider and reports reachability changes.

    Only the default provider is checked; the wallet provider is not.
    """

    def __init__(self, provider_url: str, config: Dict[str, Any]):
        """
        Initialize the monitor.

        Args:
            provider_url: HTTP(S) JSON-RPC endpoint of the default provider.
            config: Connectivity configuration dict.
        """
        self.provider_url = provider_url
        self.poll_interval_sec = config.get("poll_interval_sec", 2.0)
        self.request_timeout_sec = config.get("request_timeout_sec", 5.0)

        self._on_change: Optional[Callable[[bool], None]] = None
        self._connected: Optional[bool] = None
        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._session = requests.Session()

    @property
    def connected(self) -> Optional[bool]:
        """Last observed reachability, None before the first probe."""
        return self._connected

    async def start(self, on_change: Callable[[bool], None]) -> None:
        """Start the polling loop."""
        if self._running:
            logger.warning("ConnectivityMonitor already running")
            return

        self._on_change = on_change
        self._running = True
        self._task = asyncio.create_task(self._monitor_loop())
        logger.info(f"ConnectivityMonitor started ({self.provider_url})")

    async def stop(self) -> None:
        """Stop the polling loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._session.close()
        logger.info("ConnectivityMonitor stopped")

    async def _monitor_loop(self) -> None:
        while self._running:
            try:
                await self.check()
                await asyncio.sleep(self.poll_interval_sec)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Connectivity check error: {e}", exc_info=True)
                await asyncio.sleep(self.poll_interval_sec)

    async def check(self) -> bool:
        """Probe once and report a change, if any."""
        connected = await asyncio.to_thread(self._probe)
        if connected != self._connected:
            self._connected = connected
            if self._on_change is not None:
                self._on_change(connected)
        return connected

    def _probe(self) -> bool:
        payload = {"jsonrpc": "2.0", "id": 1, "method": "net_listening", "params": []}
        try:
            response = self._session.post(
                self.provider_url,
                json=payload,
                timeout=self.request_timeout_sec,
            )
            response.raise_for_status()
            return bool(response.json().get("result"))
        except (requests.RequestException, ValueError) as e:
            logger.debug(f"Provider unreachable: {e}")
            return False
