"""
Unit tests for logging manager
"""

import logging
import pytest

from utils.config_manager import LoggingModuleConfig
from utils.logging_manager import (
    LoggingManager, LogContext, log_execution, MetricsLogger, ModuleLoggers, logging_manager
)


@pytest.mark.unit
class TestLoggingManager:
    """Test cases for LoggingManager"""

    def test_singleton(self):
        assert LoggingManager() is logging_manager

    def test_get_logger_is_cached(self):
        assert logging_manager.get_logger("Feed") is logging_manager.get_logger("Feed")
        assert ModuleLoggers.Feed.name == "Feed"

    def test_module_levels(self):
        logging_manager._configure_module_loggers({
            "TestEnabled": LoggingModuleConfig(level="DEBUG", enabled=True),
            "TestDisabled": LoggingModuleConfig(level="DEBUG", enabled=False),
        })

        assert logging.getLogger("TestEnabled").level == logging.DEBUG
        assert logging.getLogger("TestDisabled").level == logging.CRITICAL


@pytest.mark.unit
class TestLogContext:
    """Test cases for LogContext and log_execution"""

    def test_log_context_records_success(self):
        logging_manager.reset_metrics()

        with LogContext("Feed", "unit_op", {"category": "Stoic", "_hidden": 1}):
            pass

        metrics = logging_manager.get_metrics()
        assert metrics["Feed.unit_op.category:Stoic_started"] == 1
        assert metrics["Feed.unit_op.category:Stoic_completed"] == 1

    def test_log_context_records_failure_and_propagates(self):
        logging_manager.reset_metrics()

        with pytest.raises(ValueError):
            with LogContext("Feed", "failing_op"):
                raise ValueError("boom")

        assert logging_manager.get_metrics()["Feed.failing_op_failed"] == 1

    def test_log_execution_sync(self):
        logging_manager.reset_metrics()

        @log_execution("Corpus")
        def parse():
            return 3

        assert parse() == 3
        assert logging_manager.get_metrics()["Corpus.parse_completed"] == 1

    @pytest.mark.asyncio
    async def test_log_execution_async(self):
        logging_manager.reset_metrics()

        @log_execution("Corpus", "fetch")
        async def fetch():
            return ["quote"]

        assert await fetch() == ["quote"]
        assert logging_manager.get_metrics()["Corpus.fetch_completed"] == 1


@pytest.mark.unit
class TestMetricsLogger:
    """Test cases for MetricsLogger"""

    def test_increment_and_gauge(self):
        metrics = MetricsLogger("UnitTest")

        metrics.increment("toggles")
        metrics.increment("toggles", 2)
        metrics.gauge("visible", 10)

        result = metrics.get_metrics()
        assert result["UnitTest.toggles"] == {'count': 2, 'latest': 2, 'sum': 3}
        assert result["UnitTest.visible"]['latest'] == 10

        metrics.reset()
        assert metrics.get_metrics() == {}
