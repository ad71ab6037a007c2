"""Domain-specific exceptions."""


class DomainError(Exception):
    """Base exception for domain errors."""

    pass


class ValueCheckError(DomainError):
    """Raised when a value or a rule fails a check.

    Attributes:
        message: Human-readable reason for the failure
        field: Name of the request field the value came from, when known
    """

    code = "value_check_error"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        if self.field is not None:
            return f"{self.field}: {self.message}"
        return self.message


class ValidationError(ValueCheckError):
    """Raised when a value is absent, of the wrong type or breaks a constraint."""

    code = "validation_error"


class ConfigurationError(ValueCheckError):
    """Raised when the arguments of a rule (or helper) are malformed."""

    code = "configuration_error"
