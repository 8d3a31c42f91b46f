# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for logging setup."""

import io
import json
import logging
from unittest.mock import MagicMock

import pytest
import structlog

from src.utils.logging import (
    HANDLER_NAME,
    RECONCILIATION_LOGGER,
    bind_context,
    build_formatter,
    clear_context,
    setup_logging,
)


def make_settings(log_level: str) -> MagicMock:
    settings = MagicMock()
    settings.log_level = log_level
    settings.is_development = False
    settings.debug = False
    return settings


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo global logger changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    levels = {
        name: logging.getLogger(name).level
        for name in ("", "src", RECONCILIATION_LOGGER, "test.context")
    }
    yield
    root.handlers = handlers
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)
    logging.getLogger("test.context").handlers = []
    clear_context()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_reconciliation_logger_always_emits_errors(self) -> None:
        """Test that a quiet log level does not silence reconciliation errors."""
        setup_logging(make_settings("CRITICAL"))

        assert logging.getLogger("src").level == logging.CRITICAL
        assert logging.getLogger(RECONCILIATION_LOGGER).isEnabledFor(logging.ERROR)

    def test_reconciliation_logger_follows_verbose_levels(self) -> None:
        setup_logging(make_settings("DEBUG"))

        assert logging.getLogger(RECONCILIATION_LOGGER).level == logging.DEBUG

    def test_installs_a_single_handler(self) -> None:
        """Test that repeated setup replaces the application handler."""
        setup_logging(make_settings("INFO"))
        setup_logging(make_settings("INFO"))

        names = [h.get_name() for h in logging.getLogger().handlers]
        assert names.count(HANDLER_NAME) == 1


class TestContext:
    """Tests for request-scoped log context."""

    def test_bind_and_clear_context(self) -> None:
        bind_context(saga_id="saga-1")
        assert structlog.contextvars.get_contextvars() == {"saga_id": "saga-1"}

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_stdlib_records_carry_bound_context(self) -> None:
        """Test that bound values are rendered on plain stdlib log calls."""
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(build_formatter(json_logs=True))
        logger = logging.getLogger("test.context")
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

        bind_context(saga_id="saga-1")
        logger.info("Compensated profile %s", "p-1")
        clear_context()
        logger.info("after clear")

        first, second = (json.loads(line) for line in stream.getvalue().splitlines())
        assert first["event"] == "Compensated profile p-1"
        assert first["saga_id"] == "saga-1"
        assert first["level"] == "info"
        assert first["logger"] == "test.context"
        assert "saga_id" not in second
