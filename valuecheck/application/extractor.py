"""Extraction of validated parameters from HTTP-like requests."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from ..domain.exceptions import ConfigurationError, ValidationError, ValueCheckError
from ..domain.rules import POSITIVE_BIGINT, UNSIGNED_BIGINT, Rule
from ..domain.types import UNDEFINED, SemanticType, get_type_spec
from ..logging_config import get_logger
from ..logging_utils import log_rejected_request, log_validation_error
from .evaluator import check_value

logger = get_logger(__name__)

# Lookup order when resolving a field
REQUEST_LOCATIONS: Final = ("params", "body", "query", "headers")

_INTEGER_RE: Final = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE: Final = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)
_PREFIXED_INT_RE: Final = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")
_INFINITY_RE: Final = re.compile(r"[+-]?Infinity")


@dataclass(frozen=True)
class FieldDescriptor:
    """How to extract, coerce and validate one named request field."""

    field: str
    type: SemanticType | str
    rule: Rule | Mapping[str, Any] | None = None
    convert: bool = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "FieldDescriptor":
        """Build a descriptor from a ``{"field": ..., "type": ...}`` mapping."""
        try:
            return cls(
                field=mapping["field"],
                type=mapping["type"],
                rule=mapping.get("rule"),
                convert=mapping.get("convert", False),
            )
        except KeyError as e:
            raise ConfigurationError(
                f"field descriptor is missing {e.args[0]!r}"
            ) from e


def to_number(raw: Any) -> Any:
    """Coerce a raw request value to a number, leniently.

    Numbers pass through, booleans become 0 or 1, blank strings become 0 and
    unparsable input becomes NaN. Strings must be ASCII decimal literals,
    unsigned ``0x``/``0o``/``0b`` literals or a signed ``Infinity``; digit
    separators and non-ASCII digits are unparsable. Anything that is not a
    string, bool or number is returned unchanged.
    """
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, (int, float)):
        return raw
    if not isinstance(raw, str):
        return raw

    text = raw.strip()
    if not text:
        return 0
    if _PREFIXED_INT_RE.fullmatch(text):
        return int(text, 0)
    if _INFINITY_RE.fullmatch(text):
        return float(text)
    if _INTEGER_RE.fullmatch(text):
        try:
            return int(text)
        except ValueError:
            # Past the int() digit limit; float() saturates like a double
            return float(text)
    if _DECIMAL_RE.fullmatch(text):
        return float(text)
    return float("nan")


def get_values_from_request(
    request: Any,
    descriptors: Any,
    *,
    throw_on_failure: bool = True,
) -> dict[str, Any]:
    """Extract, coerce and validate fields from a request.

    Args:
        request: RequestData, an object with params/body/query/headers
            attributes, or a mapping with those keys
        descriptors: List of FieldDescriptor instances or descriptor mappings
        throw_on_failure: Raise the first failure instead of returning {}

    Returns:
        Mapping of every described field to its value. An absent field and an
        explicit null both come out as None; only the rule (allow_undefined
        versus allow_null) sees the difference.

    Raises:
        ValueCheckError: If a field fails its rule, with ``field`` set
    """
    logger.debug(
        "get_values_from_request started",
        descriptors=descriptors,
        throw_on_failure=throw_on_failure,
    )

    if not isinstance(descriptors, (list, tuple)):
        logger.debug("Descriptors are not a list, nothing to extract")
        return {}

    try:
        values = {}
        for descriptor in descriptors:
            name, value = _extract_field(request, _coerce_descriptor(descriptor))
            values[name] = value
    except ValueCheckError as e:
        if throw_on_failure:
            raise
        log_rejected_request(_field_names(descriptors), str(e))
        return {}

    logger.debug("get_values_from_request finished", fields=list(values))
    return values


def get_offset_and_limit_from_request(
    request: Any, *, throw_on_failure: bool = False
) -> dict[str, int]:
    """Derive offset/limit pagination from the query parameters.

    Explicit ``offset`` (>= 0) and ``limit`` (>= 1) win; otherwise ``page``
    and ``size`` (both >= 1) are converted. Returns {} when neither pair is
    valid.

    Args:
        request: Request in any shape accepted by get_values_from_request
        throw_on_failure: Raise a ValidationError instead of returning {}
            when neither pair is valid

    Returns:
        ``{"offset": int, "limit": int}`` or an empty mapping
    """
    query = _location(request, "query")
    offset, limit, page, size = (
        to_number(query.get(key, UNDEFINED))
        for key in ("offset", "limit", "page", "size")
    )
    logger.debug(
        "Pagination parameters", offset=offset, limit=limit, page=page, size=size
    )

    if _is_valid(offset, UNSIGNED_BIGINT) and _is_valid(limit, POSITIVE_BIGINT):
        return {"offset": int(offset), "limit": int(limit)}
    if _is_valid(page, POSITIVE_BIGINT) and _is_valid(size, POSITIVE_BIGINT):
        return {"offset": int((page - 1) * size), "limit": int(size)}

    if throw_on_failure:
        raise ValidationError(
            "pagination requires offset and limit, or page and size", field="offset"
        )
    return {}


def _is_valid(value: Any, rule: Rule) -> bool:
    return check_value(value, SemanticType.NUMBER, rule, throw_on_failure=False)


def _coerce_descriptor(descriptor: Any) -> FieldDescriptor:
    if isinstance(descriptor, Mapping):
        descriptor = FieldDescriptor.from_mapping(descriptor)
    elif not isinstance(descriptor, FieldDescriptor):
        raise ConfigurationError(
            f"field descriptor must be a FieldDescriptor or a mapping, "
            f"got {type(descriptor).__name__}"
        )
    if not isinstance(descriptor.field, str):
        raise ConfigurationError(
            f"field name must be a string, got {type(descriptor.field).__name__}"
        )
    return descriptor


def _extract_field(request: Any, descriptor: FieldDescriptor) -> tuple[str, Any]:
    """Resolve, coerce and validate one field."""
    name = descriptor.field
    value = _resolve(request, name)

    if (
        descriptor.convert is True
        and value is not UNDEFINED
        and value is not None
        and get_type_spec(descriptor.type) is get_type_spec(SemanticType.NUMBER)
    ):
        value = to_number(value)

    if descriptor.rule is not None:
        try:
            check_value(value, descriptor.type, descriptor.rule)
        except ValueCheckError as e:
            e.field = name
            log_validation_error(name, value, e.message)
            raise

    return name, None if value is UNDEFINED else value


def _resolve(request: Any, name: str) -> Any:
    """Return the first defined value for a field, in lookup order."""
    for location in REQUEST_LOCATIONS:
        key = name.lower() if location == "headers" else name
        value = _location(request, location).get(key, UNDEFINED)
        if value is not UNDEFINED:
            return value
    return UNDEFINED


def _location(request: Any, location: str) -> Mapping[str, Any]:
    """Fetch one named sub-mapping of a request, or an empty one."""
    if request is None:
        return {}
    if isinstance(request, Mapping):
        found = request.get(location)
    else:
        found = getattr(request, location, None)
    return found if isinstance(found, Mapping) else {}


def _field_names(descriptors: list[Any] | tuple[Any, ...]) -> list[str]:
    names = []
    for descriptor in descriptors:
        if isinstance(descriptor, FieldDescriptor):
            names.append(descriptor.field)
        elif isinstance(descriptor, Mapping) and "field" in descriptor:
            names.append(str(descriptor["field"]))
    return names
