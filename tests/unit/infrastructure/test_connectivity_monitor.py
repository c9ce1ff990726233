"""Unit tests for ConnectivityMonitor."""

import asyncio
from unittest.mock import MagicMock

import pytest
import requests

from daoshell.infrastructure.monitoring.connectivity import ConnectivityMonitor


def make_monitor(result=True, error=None):
    monitor = ConnectivityMonitor("http://node", {"poll_interval_sec": 0.01, "request_timeout_sec": 1.0})
    response = MagicMock()
    response.json.return_value = {"jsonrpc": "2.0", "id": 1, "result": result}
    monitor._session = MagicMock()
    if error is not None:
        monitor._session.post.side_effect = error
    else:
        monitor._session.post.return_value = response
    return monitor


class TestProbe:
    """Tests for the JSON-RPC probe."""

    def test_listening(self):
        monitor = make_monitor(result=True)
        assert monitor._probe() is True

        _, kwargs = monitor._session.post.call_args
        assert kwargs["json"]["method"] == "net_listening"
        assert kwargs["timeout"] == 1.0

    def test_not_listening(self):
        assert make_monitor(result=False)._probe() is False

    def test_request_error(self):
        monitor = make_monitor(error=requests.ConnectionError("refused"))
        assert monitor._probe() is False

    def test_invalid_json(self):
        monitor = make_monitor()
        monitor._session.post.return_value.json.side_effect = ValueError("not json")
        assert monitor._probe() is False


class TestCheck:
    """Tests for change reporting."""

    @pytest.mark.asyncio
    async def test_reports_changes_only(self):
        monitor = make_monitor(result=True)
        changes = []
        monitor._on_change = changes.append

        await monitor.check()
        await monitor.check()
        monitor._session.post.side_effect = requests.Timeout("slow")
        await monitor.check()

        assert changes == [True, False]
        assert monitor.connected is False

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        monitor = make_monitor(result=True)
        changes = []

        await monitor.start(changes.append)
        await asyncio.sleep(0.05)
        await monitor.stop()

        assert changes == [True]
        monitor._session.close.assert_called_once()
