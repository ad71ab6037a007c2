"""Centralized error handling for FastAPI applications using valuecheck."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..domain.exceptions import ConfigurationError, ValueCheckError
from ..logging_config import get_logger

PROBLEM_TYPE_BASE = "https://valuecheck.dev/problems/"


class FieldError(BaseModel):
    """One field-level failure inside a problem detail."""

    field: str | None = Field(description="Request field that failed, if known")
    code: str = Field(description="Error kind")
    message: str = Field(description="Human-readable reason")


class ProblemDetail(BaseModel):
    """RFC 7807 problem detail body."""

    type: str = Field(description="URI identifying the problem type")
    title: str = Field(description="Short summary of the problem type")
    status: int = Field(description="HTTP status code")
    detail: str = Field(description="Explanation specific to this occurrence")
    instance: str = Field(description="Request path that produced the problem")
    errors: list[FieldError] = Field(default_factory=list)


def build_problem_detail(error: ValueCheckError, request: Request) -> ProblemDetail:
    """Describe a value check failure as a problem detail."""
    if isinstance(error, ConfigurationError):
        title = "Invalid rule configuration"
    else:
        title = "Request validation failed"

    return ProblemDetail(
        type=f"{PROBLEM_TYPE_BASE}{error.code.replace('_', '-')}",
        title=title,
        status=status.HTTP_400_BAD_REQUEST,
        detail=str(error),
        instance=str(request.url.path),
        errors=[FieldError(field=error.field, code=error.code, message=error.message)],
    )


async def handle_value_check_error(
    request: Request, exc: ValueCheckError
) -> JSONResponse:
    """Global handler for value check failures."""
    logger = get_logger(__name__)
    logger.warning(
        "Value check error occurred",
        error_type=type(exc).__name__,
        error_message=exc.message,
        field=exc.field,
        path=request.url.path,
        method=request.method,
    )

    problem = build_problem_detail(exc, request)
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type="application/problem+json",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the valuecheck exception handlers on an application."""
    app.add_exception_handler(ValueCheckError, handle_value_check_error)  # type: ignore[arg-type]
