"""Request shapes understood by the extractor, and the FastAPI adapter."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from fastapi import Request

from .logging_config import get_logger

logger = get_logger(__name__)

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@dataclass
class RequestData:
    """Framework-independent view of an HTTP request.

    Header names are stored lowercased, the way HTTP servers expose them.
    """

    params: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] = field(default_factory=dict)
    query: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.headers = {str(key).lower(): value for key, value in self.headers.items()}


async def request_data_from(request: Request) -> RequestData:
    """Build a RequestData from a FastAPI request.

    Args:
        request: FastAPI request object

    Returns:
        RequestData with path params, decoded body, query params and headers

    Notes:
        - JSON bodies are decoded when the content type says JSON; a body that
          is not a JSON object is kept out of the lookup
        - Form bodies (urlencoded or multipart) are read as form data
        - Repeated query parameters keep their last value
    """
    content_type = request.headers.get("content-type", "").lower()
    body: Mapping[str, Any] = {}

    if "json" in content_type:
        payload = await _read_json(request)
        if isinstance(payload, Mapping):
            body = payload
    elif content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        body = dict(form)

    return RequestData(
        params=dict(request.path_params),
        body=body,
        query=dict(request.query_params),
        headers=dict(request.headers),
    )


async def _read_json(request: Request) -> Any:
    """Decode a JSON body, treating an empty or malformed body as absent."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return await request.json()
    except ValueError as e:
        logger.debug("Ignoring malformed JSON body", error=str(e))
        return None
