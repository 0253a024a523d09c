"""Structured logging configuration using structlog.

Events are rendered as JSON lines in production and by the colored console
renderer elsewhere. User content and raw model output can be tens of
kilobytes, so long string values are clipped before rendering.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

APP_NAME = "profile-inference"
MAX_LOG_VALUE_CHARS = 500

# Loggers that are chatty at INFO and add nothing the request log lacks
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "uvicorn.access")


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict["app"] = APP_NAME
    return event_dict


def clip_long_values(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Clip string values longer than MAX_LOG_VALUE_CHARS (the event name is kept)."""
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_LOG_VALUE_CHARS:
            event_dict[key] = f"{value[:MAX_LOG_VALUE_CHARS]}...(+{len(value) - MAX_LOG_VALUE_CHARS} chars)"
    return event_dict


def _select_renderer(is_production: bool) -> tuple[Processor, Processor]:
    """Exception processor and final renderer for the environment."""
    if is_production:
        return structlog.processors.format_exc_info, structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.processors.ExceptionPrettyPrinter(), structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Configure structlog and route standard library logging through it.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Environment name; "production" selects JSON output
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    is_production = environment.lower() == "production"
    exc_processor, renderer = _select_renderer(is_production)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        clip_long_values,
        exc_processor,
    ]

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if is_production else "console",
    )
