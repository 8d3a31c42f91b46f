# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Application modules log through the standard library
(``logging.getLogger(__name__)``). Their records are rendered by a
structlog ProcessorFormatter on the root handler, so values bound with
bind_context (the saga id of a provisioning run, for instance) appear
on every line, including compensation and reconciliation entries.
Output is JSON in production and colored console lines in development.

Example:
    >>> setup_logging(get_settings())
    >>> bind_context(saga_id="4f0c...")
    >>> logging.getLogger("src.domains.provisioning").info("Compensated profile %s", "p-1")
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from src.core.config.settings import Settings

# Logger receiving saga compensation failures (orphaned identities, profiles)
RECONCILIATION_LOGGER = "reconciliation"

HANDLER_NAME = "registrar"

NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "httpcore",
    "sqlalchemy",
    "asyncio",
)


def _pre_chain() -> list[Processor]:
    """Processors run on each stdlib record before rendering."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def build_formatter(json_logs: bool) -> structlog.stdlib.ProcessorFormatter:
    """Create the formatter that renders every log record.

    Args:
        json_logs: Render JSON lines instead of console output.

    Returns:
        A ProcessorFormatter for stdlib handlers.
    """
    if json_logs:
        renderers: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=True)]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_pre_chain(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )


def setup_logging(settings: "Settings") -> None:
    """Configure structured logging for the application.

    Installs one stdout handler on the root logger. Calling it again
    replaces that handler instead of adding a second one.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    json_logs = not (settings.is_development or settings.debug)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(build_formatter(json_logs))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    # Compensation failures needing manual reconciliation are always emitted
    logging.getLogger("src").setLevel(log_level)
    logging.getLogger(RECONCILIATION_LOGGER).setLevel(min(log_level, logging.ERROR))


def bind_context(**kwargs: object) -> None:
    """Bind values to every log line emitted from the current context.

    Example:
        >>> bind_context(saga_id="saga-456")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
