"""
Structured logging setup for ModSentinel.

Configures structlog for JSON-formatted structured logging. Every log
line includes timestamp, level, service name, and event. Per-session
context (session_name, participant handle) is bound at processing time.
"""

from __future__ import annotations

import logging

import structlog


def resolve_level(level: str | None) -> int:
    """Map a level name to its numeric value, defaulting to INFO."""
    if not level:
        return logging.INFO
    return logging.getLevelNamesMapping().get(level.strip().upper(), logging.INFO)


def configure_logging(
    service_name: str,
    level: str | None = "INFO",
    json_output: bool = True,
) -> None:
    """Configure structlog for the current process.

    Args:
        service_name: Value of the ``service`` field on every line.
        level: Minimum level name; unknown names fall back to INFO.
        json_output: Use ``JSONRenderer`` when ``True``, otherwise the
                     human-friendly ``ConsoleRenderer``.
    """

    def _add_service(
        _logger: object, _method: str, event_dict: structlog.typing.EventDict
    ) -> structlog.typing.EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
        cache_logger_on_first_use=False,
    )
