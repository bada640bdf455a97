"""structlog setup for Seller Tax Documents.

Events always go through stdlib logging on stderr; stdout is reserved for
command output such as the JSON printed by ``std list``. Production renders
one JSON object per event, every other environment a readable console line.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from seller_tax_documents.config import Settings, get_settings

# reportlab logs font lookups at DEBUG
QUIET_LOGGERS = ("reportlab",)


def _add_service(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("environment", settings.environment.value)
    return event_dict


def build_processors(log_format: str) -> list[Processor]:
    """Processor chain for ``"json"`` or ``"console"`` output."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_format == "json":
        return [
            *processors,
            _add_service,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [*processors, structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog once at startup, before the first event is logged."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.value)

    structlog.configure(
        processors=build_processors(settings.log_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.stdlib.get_logger(name)


class LogContext:
    """Bind request context (seller, year, command) for the enclosed block.

    Values bound by an outer context are restored on exit, so contexts nest:

        with LogContext(command="export-all"):
            with LogContext(seller_id=seller_id, year=year):
                exporter.export_all(seller_id, year)
    """

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._tokens = dict(structlog.contextvars.bind_contextvars(**self.kwargs))
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)
