# logging_config.py
"""
Structured logging with structlog.

Console output in development, one JSON object per line elsewhere. Engine
modules log through `structlog.get_logger(__name__)`; anything bound with
`structlog.contextvars` (the API binds the roster size and estate per
calculation) is merged into every event of that request.
"""

import logging
import sys
from typing import Optional

import structlog


def _tag_service(service: str):
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", service)
        return event_dict
    return processor


def setup_logging(level: str = "INFO", json_logs: bool = False, service: Optional[str] = None) -> None:
    """Configure structlog once, at application start. Unknown level names fall back to INFO."""
    level_no = logging.getLevelName(level.upper())
    if not isinstance(level_no, int):
        level_no = logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
    ]
    if service:
        processors.append(_tag_service(service))
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
