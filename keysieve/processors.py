"""
Structlog integration.

Filters every log event through a FilterConfig before it is rendered, so
secrets can be stripped from event dicts by key.
"""

from __future__ import annotations

import contextvars
import logging
import sys
from typing import Any, List, Optional

import structlog

from .core.config import FilterConfig


_in_processor: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "keysieve_in_processor", default=False
)


class KeyFilterProcessor:
    """Structlog processor applying a FilterConfig to each event dict.

    The ``event`` key is always kept. Events emitted by keysieve itself while
    an event is being filtered pass through unfiltered.
    """

    def __init__(self, config: FilterConfig):
        self.config = config

    def __call__(self, _logger: Any, _method_name: str, event_dict: dict) -> dict:
        if _in_processor.get():
            return event_dict
        token = _in_processor.set(True)
        try:
            filtered = dict(self.config.apply(event_dict))
        finally:
            _in_processor.reset(token)
        if "event" in event_dict and "event" not in filtered:
            filtered = {"event": event_dict["event"], **filtered}
        return filtered


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    redact: Optional[FilterConfig] = None,
) -> None:
    """
    Configure structlog on top of stdlib logging.

    Args:
        log_level: Logging level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        log_format: Format (json or console)
        redact: Optional filter applied to every event before rendering
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if redact is not None:
        processors.append(KeyFilterProcessor(redact))

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
