"""Structured logging for the impact core using structlog.

The graph algorithms log id collections (impacted sets, roots, cycles);
those are collapsed to a count plus a short preview so a large outage does
not produce megabyte log lines. JSON output in production, console output
in development.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from itiac.common.config import LoggingSettings, Settings, get_settings

# Third-party loggers that only matter at WARNING and above
_QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "httpx", "httpcore")


def service_context_processor(settings: Settings) -> Processor:
    """Processor stamping every event with service name, version and environment."""
    context = {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }

    def add_service_context(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_service_context


def id_collection_processor(max_ids: int) -> Processor:
    """Processor collapsing long lists/sets of ids to ``{"count", "preview"}``.

    Args:
        max_ids: Collections up to this size are logged unchanged.
    """

    def collapse_id_collections(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        for key, value in event_dict.items():
            if isinstance(value, (set, frozenset)):
                value = sorted(value, key=str)
                event_dict[key] = value
            if isinstance(value, (list, tuple)) and len(value) > max_ids:
                event_dict[key] = {"count": len(value), "preview": list(value[:max_ids])}
        return event_dict

    return collapse_id_collections


def _build_processors(settings: Settings) -> list[Processor]:
    log_settings = settings.logging
    processors: list[Processor] = [structlog.contextvars.merge_contextvars]

    if log_settings.include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    processors += [
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_settings.include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ))

    processors.append(service_context_processor(settings))
    processors.append(id_collection_processor(log_settings.max_logged_ids))

    if log_settings.format == "json":
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    return processors


def setup_logging(log_settings: LoggingSettings | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        log_settings: Logging settings overriding ``get_settings().logging``.
    """
    settings = get_settings()
    if log_settings is not None:
        settings = settings.model_copy(update={"logging": log_settings})

    structlog.configure(
        processors=_build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, settings.logging.level)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, optionally pre-bound with context.

    Example:
        logger = get_logger(__name__, scope="non-online")
        logger.info("Analysis complete", impacted=impacted_ids)
    """
    logger = structlog.get_logger(name)
    return logger.bind(**initial_context) if initial_context else logger


@contextmanager
def log_context(**context: Any) -> Iterator[None]:
    """Bind context variables for the duration of a block.

    Context propagates across ``await`` points, so every event logged while
    serving one request carries the same ``request_id``.
    """
    with structlog.contextvars.bound_contextvars(**context):
        yield
