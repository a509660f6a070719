"""Structured logging setup using structlog.

Both renderers share one processor chain: context vars, log level, a fixed
``service`` field, stack info and ISO timestamps.  Development gets a
coloured ConsoleRenderer; ``APP_ENV=production`` (or ``json_output=True``)
gets one JSON object per line.

Standard-library ``logging`` goes through the same formatter, so uvicorn's
access log and any httpx warnings come out in the same shape.  aiosqlite
and httpcore log every statement and socket event at DEBUG and are capped
at WARNING.
"""

import logging
import os
import sys

import structlog

SERVICE_NAME = "pollen_tracker"

_NOISY_LOGGERS = ("aiosqlite", "httpcore", "httpx")


def _add_service_name(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output.  Otherwise JSON is used only when
            ``APP_ENV`` is ``"production"``.

    Returns:
        A configured structlog BoundLogger.
    """
    level = log_level.upper()
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_service_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root_logger.level))

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound to *name*.

    Falls back to the default INFO configuration when nothing has called
    :func:`configure_logging` yet (e.g. in a bare script).
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
