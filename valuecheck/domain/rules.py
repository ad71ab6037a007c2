"""Declarative value rules and the named presets built from them."""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Final

from .constants import (
    DOUBLE_MAX,
    INT_MAX,
    INT_MIN,
    MAX_STRING_LENGTH,
    MAX_TEXT_LENGTH,
    SAFE_INTEGER_MAX,
    SAFE_INTEGER_MIN,
    TINYINT_MAX,
    TINYINT_MIN,
    UNSIGNED_INT_MAX,
    UNSIGNED_TINYINT_MAX,
)
from .exceptions import ConfigurationError
from .types import UNDEFINED

# camelCase spellings accepted by Rule.from_mapping
_ALIASES: Final = {
    "allowUndefined": "allow_undefined",
    "allowNull": "allow_null",
    "allowEmpty": "allow_empty",
    "checkHandler": "check_handler",
}


@dataclass(frozen=True)
class Rule:
    """A flat set of optional constraints, all of which must hold.

    Flag fields are active only when literally ``True``. Every other
    constraint is inactive while it holds ``UNDEFINED``; an explicit ``None``
    counts as configured (``eq=None`` demands a null value, ``gte=None`` is a
    misconfigured bound).
    """

    allow_undefined: bool = False
    allow_null: bool = False
    allow_empty: bool = False
    gte: Any = UNDEFINED
    gt: Any = UNDEFINED
    eq: Any = UNDEFINED
    lt: Any = UNDEFINED
    lte: Any = UNDEFINED
    ne: Any = UNDEFINED
    list: Any = UNDEFINED
    integer: bool = False
    mobile: bool = False
    email: bool = False
    html: bool = False
    check_handler: Any = UNDEFINED

    def overlay(self, **changes: Any) -> "Rule":
        """Return a copy with the given fields replaced (later fields win)."""
        unknown = set(changes) - _FIELD_NAMES
        if unknown:
            raise ConfigurationError(
                f"unknown rule keys: {', '.join(sorted(unknown))}"
            )
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Rule":
        """Build a rule from a mapping with snake_case or camelCase keys."""
        bad_keys = [key for key in mapping if not isinstance(key, str)]
        if bad_keys:
            raise ConfigurationError(
                f"rule keys must be strings, got {', '.join(map(repr, bad_keys))}"
            )
        values = {_ALIASES.get(key, key): value for key, value in mapping.items()}
        return cls().overlay(**values)

    def configured(self) -> dict[str, Any]:
        """Return only the fields that differ from an empty rule."""
        return {
            field.name: getattr(self, field.name)
            for field in fields(self)
            if getattr(self, field.name) is not field.default
        }


_FIELD_NAMES: Final = frozenset(field.name for field in fields(Rule))

EMPTY_RULE: Final = Rule()


def coerce_rule(rule: "Rule | Mapping[str, Any] | None") -> Rule:
    """Normalize the accepted rule spellings into a Rule instance."""
    if rule is None:
        return EMPTY_RULE
    if isinstance(rule, Rule):
        return rule
    if isinstance(rule, Mapping):
        return Rule.from_mapping(rule)
    raise ConfigurationError(
        f"rule must be a Rule or a mapping, got {type(rule).__name__}"
    )


# Integer presets
TINYINT: Final = Rule(gte=TINYINT_MIN, lte=TINYINT_MAX, integer=True)
UNSIGNED_TINYINT: Final = TINYINT.overlay(gte=0, lte=UNSIGNED_TINYINT_MAX)
POSITIVE_TINYINT: Final = UNSIGNED_TINYINT.overlay(gte=1)

INT: Final = Rule(gte=INT_MIN, lte=INT_MAX, integer=True)
UNSIGNED_INT: Final = INT.overlay(gte=0, lte=UNSIGNED_INT_MAX)
POSITIVE_INT: Final = UNSIGNED_INT.overlay(gte=1)

BIGINT: Final = Rule(gte=SAFE_INTEGER_MIN, lte=SAFE_INTEGER_MAX, integer=True)
UNSIGNED_BIGINT: Final = BIGINT.overlay(gte=0)
POSITIVE_BIGINT: Final = UNSIGNED_BIGINT.overlay(gte=1)

# Floating point presets
DOUBLE: Final = Rule(gte=-DOUBLE_MAX, lte=DOUBLE_MAX)
UNSIGNED_DOUBLE: Final = DOUBLE.overlay(gte=0)
POSITIVE_DOUBLE: Final = UNSIGNED_DOUBLE.overlay(gt=0)

# String length presets
STRING: Final = Rule(gte=0, lte=MAX_STRING_LENGTH)
NONEMPTY_STRING: Final = STRING.overlay(gte=1)

TEXT: Final = Rule(gte=0, lte=MAX_TEXT_LENGTH)
NONEMPTY_TEXT: Final = TEXT.overlay(gte=1)
