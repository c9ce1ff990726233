"""Unit tests for log routing, transition IDs and timing logs."""

import logging
from unittest.mock import MagicMock

import pytest

from daoshell.utils.logging_setup import JSONFormatter, get_category_for_module
from daoshell.utils.perf_logger import log_timing, log_timing_async, set_perf_logger
from daoshell.utils.trace_context import get_transition_id, new_transition


class TestCategoryRouting:
    """Tests for module -> category routing."""

    @pytest.mark.parametrize("module,category", [
        ("daoshell.application.orchestrator.navigation_coordinator", "navigation"),
        ("daoshell.application.orchestrator.identity_coordinator", "identity"),
        ("daoshell.application.orchestrator.dao_coordinator", "client"),
        ("daoshell.application.session_store", "session"),
        ("daoshell.infrastructure.adapters.demo_client", "client"),
        ("daoshell.infrastructure.adapters.memory_history", "navigation"),
        ("daoshell.presentation.dashboard", "system"),
        ("elsewhere", "system"),
    ])
    def test_routing(self, module, category):
        assert get_category_for_module(module) == category


class TestTransitionIds:
    """Tests for transition correlation."""

    def test_default_placeholder(self):
        assert get_transition_id() == "------"

    def test_new_transition_scoped(self):
        with new_transition() as transition_id:
            assert len(transition_id) == 6
            assert get_transition_id() == transition_id
        assert get_transition_id() == "------"

    def test_json_formatter_carries_transition(self):
        record = logging.LogRecord("daoshell.client", logging.INFO, __file__, 1, "hello", None, None)
        with new_transition() as transition_id:
            line = JSONFormatter().format(record)
        assert f'"transition": "{transition_id}"' in line
        assert '"cat": "client"' in line


class TestTiming:
    """Tests for timing logs."""

    def test_fast_operation_logged_at_debug(self):
        logger = MagicMock()
        set_perf_logger(logger)
        try:
            with log_timing("render", extra={"dao": "acme"}):
                pass
        finally:
            set_perf_logger(logging.getLogger("daoshell.perf"))

        logger.debug.assert_called_once()
        assert logger.debug.call_args.kwargs["extra"]["data"]["dao"] == "acme"

    @pytest.mark.asyncio
    async def test_slow_operation_escalates(self):
        logger = MagicMock()
        set_perf_logger(logger)
        try:
            async with log_timing_async("dao_connect", warn_threshold_ms=0, error_threshold_ms=1e9):
                pass
        finally:
            set_perf_logger(logging.getLogger("daoshell.perf"))

        logger.warning.assert_called_once()
