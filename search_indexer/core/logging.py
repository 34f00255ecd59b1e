import logging
import sys

import structlog


def _processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]


def resolve_log_level(level: str) -> int:
    log_level = logging.getLevelName(level.strip().upper())
    return log_level if isinstance(log_level, int) else logging.INFO


def configure_logging(level: str = "INFO", *, service: str = "search-indexer") -> None:
    log_level = resolve_log_level(level)
    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s")
    structlog.configure(
        processors=_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service)
