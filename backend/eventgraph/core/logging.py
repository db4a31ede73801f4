"""
structlog on top of the stdlib logging tree.

Every module logs through `get_logger(__name__)` with an event name plus
key/value fields (`record_created`, `store_saved`, `subscriber_queue_full`, ...).
Both structlog and plain stdlib records (uvicorn, strawberry) end up on one
stdout handler, rendered as JSON lines when ENVIRONMENT is "production" and
as coloured console lines otherwise. The request id the HTTP middleware binds
into contextvars is merged into every line, so store and bus logs emitted
while serving a GraphQL operation carry it too.
"""

import logging
import sys
import structlog
from eventgraph.core.config import Settings, get_settings

_CONTEXT_PROCESSORS = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
)


def _output_processors(settings: Settings) -> list:
    if settings.ENVIRONMENT == "production":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def _install_handler(formatter: logging.Formatter, level: int) -> None:
    root = logging.getLogger()
    # Replace our own handler on repeated startups; leave foreign handlers (pytest caplog) alone
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(level)


def setup_logging() -> None:
    """Configure structlog and the root logger from the current settings."""
    settings = get_settings()
    *exception_processors, renderer = _output_processors(settings)

    structlog.configure(
        processors=[
            *_CONTEXT_PROCESSORS,
            *exception_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=list(_CONTEXT_PROCESSORS),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    _install_handler(formatter, getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # Per-request access lines duplicate RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
