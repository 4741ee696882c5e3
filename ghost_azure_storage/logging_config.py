"""
Structured logging setup.

Routes structlog and stdlib logging (Azure SDK, uvicorn) through one
ProcessorFormatter so every record is rendered the same way.
"""

import logging
import sys

import structlog

from ghost_azure_storage.config import Settings, get_settings

# Azure SDK request/response logging is very chatty at INFO
_NOISE_LOGGERS = (
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.storage",
    "uvicorn.access",
)


def _build_processors(time_fmt: str) -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt=time_fmt),
        structlog.stdlib.ExtraAdder(),
    ]


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """
    Configure structured logging for the process.

    Args:
        level: Root log level (e.g. "DEBUG", "INFO")
        fmt: "json" for JSON lines, "text" for a colored console
    """
    if fmt == "json":
        processors = _build_processors(time_fmt="iso")
        renderer = structlog.processors.JSONRenderer()
    else:
        processors = _build_processors(time_fmt="%H:%M:%S")
        renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=processors,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _NOISE_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from application settings."""
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, fmt=settings.log_format)
