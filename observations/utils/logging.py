"""structlog 설정 — 애플리케이션 이벤트 로깅.

Application event logging with structlog.
``configure_logging()`` runs once at startup; modules then use
``structlog.get_logger()`` and log events by name::

    log = structlog.get_logger()
    log.info("observation_closed", observation_id=str(obs.id), actor=actor.email)

LOG_FORMAT=json renders one JSON object per line (production);
LOG_FORMAT=console renders colored key/value lines (development).
"""

import logging

import structlog
from structlog.typing import Processor

from observations.config import settings


def _log_level() -> int:
    return getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)


def configure_logging() -> None:
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
