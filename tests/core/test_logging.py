"""
Tests for the logging module.

Tests verify:
- Context binding and scoped LogContext
- Service metadata and ECS field renames
- configure_logging / configure_logging_from_settings install a config
"""

from __future__ import annotations

import pytest
import structlog
from structlog.contextvars import get_contextvars
from structlog.testing import capture_logs

from ufkit.core import logging as uf_logging
from ufkit.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    unbind_context,
)
from ufkit.core.settings import UFSettings


@pytest.fixture(autouse=True)
def _reset_structlog():
    clear_context()
    yield
    clear_context()
    structlog.reset_defaults()


class TestContextManagement:
    """Test bind/unbind/clear of contextvars."""

    def test_bind_and_unbind(self):
        bind_context(run_id="r1", queue="import")
        assert get_contextvars() == {"run_id": "r1", "queue": "import"}
        unbind_context("queue")
        assert get_contextvars() == {"run_id": "r1"}

    def test_clear(self):
        bind_context(run_id="r1")
        clear_context()
        assert get_contextvars() == {}

    def test_log_context_scoped(self):
        with LogContext(run_id="r2"):
            assert get_contextvars()["run_id"] == "r2"
        assert "run_id" not in get_contextvars()

    @pytest.mark.asyncio
    async def test_log_context_async(self):
        async with LogContext(queue="q"):
            assert get_contextvars()["queue"] == "q"
        assert "queue" not in get_contextvars()


class TestProcessors:
    """Test the custom processors."""

    def test_service_metadata_default(self):
        event = uf_logging._add_service_metadata(None, "info", {"event": "x"})
        assert event["service.name"] == uf_logging._SERVICE_NAME

    def test_service_metadata_does_not_override(self):
        event = uf_logging._add_service_metadata(None, "info", {"service.name": "mine"})
        assert event["service.name"] == "mine"

    def test_ecs_renames(self):
        event = uf_logging._elasticsearch_compatible(
            None, "info", {"timestamp": "t", "level": "info", "event": "x"}
        )
        assert event == {"@timestamp": "t", "log.level": "info", "event": "x"}


class TestConfigure:
    """Test configure_logging."""

    def test_configures_structlog(self):
        configure_logging(level="WARNING", json_format=True, service="svc")
        assert structlog.is_configured()
        assert uf_logging._SERVICE_NAME == "svc"

    def test_from_settings(self):
        settings = UFSettings(_env_file=None, service_name="from-settings", log_json=False)
        configure_logging_from_settings(settings)
        assert structlog.is_configured()
        assert uf_logging._SERVICE_NAME == "from-settings"

    def test_settings_fill_unset_arguments(self):
        settings = UFSettings(_env_file=None, service_name="x", log_json=True)
        configure_logging(settings=settings)
        assert uf_logging._SERVICE_NAME == "x"

    def test_explicit_argument_beats_settings(self):
        settings = UFSettings(_env_file=None, service_name="x", log_json=True)
        configure_logging(service="y", settings=settings)
        assert uf_logging._SERVICE_NAME == "y"

    def test_logger_emits_event_with_fields(self):
        with capture_logs() as logs:
            get_logger("tests.logging").info("queue.start", actions=3)
        assert logs == [{"event": "queue.start", "actions": 3, "log_level": "info"}]
