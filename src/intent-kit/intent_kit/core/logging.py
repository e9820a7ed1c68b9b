"""structlog setup shared by every intent-kit host."""

import structlog

from intent_kit.core.errors import InvalidConfigurationError


def configure_logging(log_format: str = "console") -> None:
    """Configure structlog for the requested output format.

    Raises:
        InvalidConfigurationError: if log_format is not 'console' or 'json'.
    """
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        raise InvalidConfigurationError(
            f"invalid log format {log_format!r}, must be 'console' or 'json'"
        )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )
