"""Structured logging: structlog events with the request ID merged in."""

import contextvars
import logging
import logging.config
import os

import structlog

# Request ID of the request being served (per asyncio task)
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="no-request-id"
)

# RequestIDMiddleware already logs every request
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Store the request ID and bind it into every structlog event of this context."""
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def _renderer(log_format: str):
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """
    Configure structlog and route stdlib loggers through the same renderer.

    LOG_LEVEL (default INFO) sets the threshold. LOG_FORMAT=console switches
    from JSON lines to human-readable output for local runs.
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level, level_name = logging.INFO, "INFO"
    renderer = _renderer(os.getenv("LOG_FORMAT", "json").lower())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": renderer,
                    "foreign_pre_chain": [
                        structlog.contextvars.merge_contextvars,
                        structlog.stdlib.add_log_level,
                        structlog.processors.TimeStamper(fmt="iso", utc=True),
                    ],
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "structlog",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"handlers": ["stdout"], "level": level_name},
            "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Module logger. The request ID comes from contextvars at emit time."""
    return structlog.get_logger(name)
