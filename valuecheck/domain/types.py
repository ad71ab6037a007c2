"""Semantic value types and the per-type dispatch table."""

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Final


class _Undefined:
    """Marker for a value that is absent, as opposed to an explicit ``None``."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final = _Undefined()


class SemanticType(str, Enum):
    """Closed set of value categories the evaluator recognizes."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    FUNCTION = "function"
    DATE = "date"


def is_number(value: Any) -> bool:
    """Check for an int or float that is not a bool and not NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


@dataclass(frozen=True)
class TypeSpec:
    """How one semantic type is recognized and measured.

    ``size`` returns the magnitude that the bound rules (gte, gt, lt, lte)
    compare against, or is None when bounds do not apply to the type.
    """

    label: str
    check: Callable[[Any], bool]
    size: Callable[[Any], float] | None = None


TYPE_SPECS: Final[Mapping[SemanticType, TypeSpec]] = {
    SemanticType.BOOLEAN: TypeSpec("boolean", lambda v: isinstance(v, bool)),
    SemanticType.NUMBER: TypeSpec("number", is_number, lambda v: v),
    SemanticType.STRING: TypeSpec("string", lambda v: isinstance(v, str), len),
    SemanticType.ARRAY: TypeSpec(
        "array", lambda v: isinstance(v, (list, tuple)), len
    ),
    SemanticType.OBJECT: TypeSpec("object", lambda v: isinstance(v, Mapping)),
    SemanticType.FUNCTION: TypeSpec("function", callable),
    SemanticType.DATE: TypeSpec("date", lambda v: isinstance(v, date)),
}


def get_type_spec(value_type: Any) -> TypeSpec | None:
    """Look up the dispatch entry for a type tag (member or its string value)."""
    if not isinstance(value_type, SemanticType):
        try:
            value_type = SemanticType(value_type)
        except (ValueError, TypeError):
            return None
    return TYPE_SPECS[value_type]


def strict_equals(left: Any, right: Any) -> bool:
    """Compare two values without the bool/int crossover of ``==``.

    Booleans only equal booleans and numbers compare numerically, so ``1`` and
    ``1.0`` are equal while ``True`` and ``1`` are not.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if is_number(left) and is_number(right):
        return left == right
    if is_number(left) != is_number(right):
        return False
    try:
        return bool(left == right)
    except (TypeError, ValueError):
        return left is right
