"""structlog setup shared by the API, the CLI scripts and migrations."""

import contextvars
import logging
import logging.config
import os

import structlog

DEFAULT_LOG_LEVEL = "INFO"

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="no-request-id"
)


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Remember the request ID and attach it to every event logged in this context."""
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def get_log_level() -> str:
    """LOG_LEVEL from the environment, falling back to INFO for unknown names."""
    level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if level not in logging.getLevelNamesMapping():
        return DEFAULT_LOG_LEVEL
    return level


def configure_logging() -> None:
    """Render app events as JSON lines and library logs through structlog's formatter."""
    level = get_log_level()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and sqlalchemy log through stdlib
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": structlog.dev.ConsoleRenderer(),
                },
            },
            "handlers": {
                "stdout": {
                    "level": level,
                    "class": "logging.StreamHandler",
                    "formatter": "structlog",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "": {"handlers": ["stdout"], "level": level, "propagate": True},
            },
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
