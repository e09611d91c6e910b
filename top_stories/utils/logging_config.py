"""
Structured Logging Configuration

Sets up structlog for the Top Stories API:
- Development mode: colored, human-readable console output
- Production mode: JSON lines written to a rotating log file

Usage:
    from top_stories.utils.logging_config import configure_logging, get_logger

    # Initialize once at application startup
    configure_logging()

    # Get a logger in any module
    logger = get_logger(__name__)
    logger.info("Fetched page", page=2, stories=10)
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional

import structlog
from structlog.types import Processor


def _is_production() -> bool:
    """Check if running in production environment."""
    env = os.getenv("ENV", os.getenv("ENVIRONMENT", "development")).lower()
    return env in ("production", "prod")


def _get_log_level() -> int:
    """Get log level from environment variable."""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging(
    json_format: Optional[bool] = None,
    log_level: Optional[int] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure structlog and route standard library logging through it.

    Args:
        json_format: Emit JSON logs. If None, auto-detect from ENV.
        log_level: Logging level. If None, read LOG_LEVEL (default: INFO).
        log_file: Log file for JSON output (defaults to LOG_FILE or logs/app.log).
    """
    # Determine output format
    if json_format is None:
        json_format = _is_production()

    # Determine log level
    if log_level is None:
        log_level = _get_log_level()

    # Shared processors for both dev and prod
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,  # request_id and story query bound by the middleware
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        # Production: JSON lines to a rotating file
        if log_file is None:
            log_file = os.getenv("LOG_FILE", "logs/app.log")
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        renderer = structlog.processors.JSONRenderer()
    else:
        # Development: colored console output
        handler = logging.StreamHandler(sys.stdout)
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    # Configure structlog
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )
    handler.setFormatter(formatter)

    # Route standard library logging (uvicorn, httpx) through the same formatter
    logging.basicConfig(
        format="%(message)s",
        handlers=[handler],
        level=log_level,
    )

    # Every item lookup is an httpx request; keep those out of INFO output
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A bound structlog logger.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """
    Bind context variables included in all subsequent logs of this task.

    Example:
        bind_context(request_id="abc123")
        logger.info("Cache miss")  # carries request_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
