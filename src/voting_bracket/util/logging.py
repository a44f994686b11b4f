import logging
import sys

import structlog


def configure_logging(humanize=False, level=logging.INFO):
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if humanize:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Route stdlib loggers (sqlalchemy, celery, uvicorn) to the same stream
    logging.basicConfig(stream=sys.stderr, level=level, format="%(message)s")


def get_logger(name=None):
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(logger_name=name)
