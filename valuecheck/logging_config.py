import logging
from pathlib import Path

import structlog
from opentelemetry import trace
from rich.logging import RichHandler

from .config import settings
from .constants import LOG_FILE_NAME


def setup_logging(log_level: str | None = None) -> None:
    """Configure logging for an application embedding valuecheck.

    The library logs through structlog whether or not this is called; calling
    it only decides where the output goes and how it is rendered.

    Args:
        log_level: Override the log level from settings
    """
    # Determine log level
    level_name = (log_level or settings.effective_log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Clear any existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    # Console handler with Rich for better formatting
    console_handler = RichHandler(
        rich_tracebacks=True,
        show_path=settings.debug,
        show_time=False,  # We handle time in formatter
    )
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler for production or when explicitly requested
    if not settings.debug or settings.log_to_file:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Set root logger level
    root_logger.setLevel(level)

    # Configure structlog
    _configure_structlog()

    # Log configuration
    logger = get_logger(__name__)
    logger.info("Logging configured", level=logging.getLevelName(level))


def _add_trace_context(logger, method_name, event_dict):
    """Add OpenTelemetry trace context to log entries."""
    current_span = trace.get_current_span()
    if current_span and current_span.is_recording():
        span_context = current_span.get_span_context()
        if span_context.is_valid:
            event_dict["trace_id"] = f"0x{format(span_context.trace_id, '032x')}"
            event_dict["span_id"] = f"0x{format(span_context.span_id, '016x')}"
    return event_dict


def _configure_structlog() -> None:
    """Configure structlog for enhanced structured logging."""
    if settings.debug:
        # Development: Pretty console output with trace context
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        # Production: JSON lines with trace context
        renderer = structlog.processors.JSONRenderer()

    # Rendered events are emitted through the root logger handlers
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            _add_trace_context,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    """Get a logger with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog logger backed by the stdlib logger of the same name, so
        levels and output follow the application's logging setup
    """
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )
