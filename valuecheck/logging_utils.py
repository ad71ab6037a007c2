import logging
from typing import Any

from .domain.types import UNDEFINED


def log_validation_error(
    field: str, value: Any, error_message: str, logger_name: str = "validation"
) -> None:
    """Log validation errors with context.

    Args:
        field: Field name that failed validation
        value: The invalid value (will be sanitized)
        error_message: Validation error message
        logger_name: Name of the logger to use
    """
    logger = logging.getLogger(logger_name)

    safe_value = _sanitize_value(field, value)

    logger.warning(
        f"Validation failed for field '{field}': {error_message}",
        extra={"field": field, "value": safe_value, "error": error_message},
    )


def log_rejected_request(
    fields: list[str], error_message: str, logger_name: str = "validation"
) -> None:
    """Log a request whose parameters were rejected in lenient mode.

    Args:
        fields: Names of the fields that were requested
        error_message: The error that caused the empty result
        logger_name: Name of the logger to use
    """
    logger = logging.getLogger(logger_name)

    logger.info(
        f"Request parameters rejected: {error_message}",
        extra={"fields": fields, "error": error_message},
    )


def _sanitize_value(field: str, value: Any) -> str:
    """Render a value for the log, hiding sensitive fields."""
    if _is_sensitive_field(field):
        return "[REDACTED]"
    if value is UNDEFINED:
        return "<undefined>"
    return repr(value)[:100]


def _is_sensitive_field(field_name: str) -> bool:
    """Check if a field contains sensitive data that should not be logged.

    Args:
        field_name: Name of the field to check

    Returns:
        True if field is sensitive, False otherwise
    """
    sensitive_fields = {
        "password",
        "secret",
        "key",
        "token",
        "credential",
        "auth",
        "session",
        "cookie",
    }

    field_lower = field_name.lower()
    return any(sensitive in field_lower for sensitive in sensitive_fields)
