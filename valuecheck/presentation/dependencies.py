"""FastAPI dependencies that extract validated request parameters.

Example:
    @app.get("/users/{user_id}")
    async def read_user(
        values: dict = Depends(
            request_values(FieldDescriptor("user_id", SemanticType.NUMBER,
                                           POSITIVE_BIGINT, convert=True))
        ),
        page: dict = Depends(pagination()),
    ): ...
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from fastapi import Request

from ..application.extractor import (
    FieldDescriptor,
    get_offset_and_limit_from_request,
    get_values_from_request,
)
from ..request_utils import request_data_from


def request_values(
    *descriptors: FieldDescriptor | Mapping[str, Any],
) -> Callable[[Request], Awaitable[dict[str, Any]]]:
    """Build a dependency returning the extracted field values.

    Failures propagate as ValueCheckError; register_error_handlers turns them
    into 400 problem details.
    """
    fields = list(descriptors)

    async def dependency(request: Request) -> dict[str, Any]:
        data = await request_data_from(request)
        return get_values_from_request(data, fields)

    return dependency


def pagination(
    *, required: bool = False
) -> Callable[[Request], Awaitable[dict[str, int]]]:
    """Build a dependency returning ``{"offset", "limit"}`` or {}.

    Args:
        required: Reject requests without a valid pair instead of yielding {}
    """

    async def dependency(request: Request) -> dict[str, int]:
        data = await request_data_from(request)
        return get_offset_and_limit_from_request(data, throw_on_failure=required)

    return dependency
