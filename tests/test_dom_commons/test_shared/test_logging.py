"""Tests for structured logging helpers."""

import logging

from dom_commons.shared.logging import CorrelationLogger, configure_logging, get_logger


class TestCorrelationLogger:
    """Test suite for CorrelationLogger."""

    def test_extra_fields(self, caplog):
        """Test that component and correlation ID are attached."""
        logger = get_logger("dom_commons.test", "req-1", "parse")

        with caplog.at_level(logging.DEBUG, logger="dom_commons.test"):
            logger.debug("hello", extra={"size": 3})

        record = caplog.records[-1]
        assert record.component == "parse"
        assert record.correlation_id == "req-1"
        assert record.size == 3

    def test_component_defaults_to_module(self):
        """Test the component fallback."""
        logger = CorrelationLogger("dom_commons.api.xpath")

        assert logger.component == "xpath"
        assert logger.correlation_id is None

    def test_filtered_levels_not_emitted(self, caplog):
        """Test that disabled levels produce no record."""
        logger = get_logger("dom_commons.quiet")

        with caplog.at_level(logging.ERROR, logger="dom_commons.quiet"):
            logger.debug("hidden")
            logger.error("shown", exc_info=False)

        assert [r.getMessage() for r in caplog.records] == ["shown"]


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_installs_single_handler(self):
        """Test that repeated configuration does not stack handlers."""
        package_logger = logging.getLogger("dom_commons")
        saved_handlers = list(package_logger.handlers)
        saved_level = package_logger.level
        try:
            configure_logging(logging.DEBUG)
            configure_logging(logging.INFO)

            assert len(package_logger.handlers) == 1
            assert package_logger.level == logging.INFO
        finally:
            package_logger.handlers = saved_handlers
            package_logger.setLevel(saved_level)
