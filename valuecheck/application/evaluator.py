"""Rule evaluation for single values.

``evaluate`` returns a ``CheckResult`` and never raises for a bad value or a
bad rule; ``check_value`` wraps it for call sites that want either an
exception or a plain boolean.
"""

import math
import operator
import re
import warnings
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from ..domain.constants import EMAIL_PATTERN, FORBIDDEN_HTML_TAGS, MOBILE_PATTERN
from ..domain.exceptions import ConfigurationError, ValidationError, ValueCheckError
from ..domain.rules import Rule, coerce_rule
from ..domain.types import (
    UNDEFINED,
    SemanticType,
    TypeSpec,
    get_type_spec,
    is_number,
    strict_equals,
)
from ..logging_config import get_logger

logger = get_logger(__name__)

_MOBILE_RE: Final = re.compile(MOBILE_PATTERN, re.ASCII)
_EMAIL_RE: Final = re.compile(EMAIL_PATTERN, re.ASCII)


@dataclass(frozen=True)
class CheckResult:
    """Outcome of evaluating one value: success, or the error that failed it."""

    ok: bool
    error: ValueCheckError | None = None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> bool:
        """Return True on success, raise the carried error otherwise."""
        if self.error is not None:
            raise self.error
        return True


def evaluate(
    value: Any,
    value_type: SemanticType | str,
    rule: Rule | Mapping[str, Any] | None = None,
) -> CheckResult:
    """Check a value against a semantic type and a rule.

    Args:
        value: The value to check; ``UNDEFINED`` stands for an absent value
        value_type: Expected semantic type
        rule: Constraints to apply, as a Rule, a mapping or None

    Returns:
        CheckResult carrying either success or the first failure
    """
    logger.debug(
        "check_value started", value=value, value_type=value_type, rule=rule
    )
    try:
        _check(value, value_type, coerce_rule(rule))
    except ValueCheckError as e:
        logger.debug("check_value failed", reason=e.message, code=e.code)
        return CheckResult(ok=False, error=e)
    logger.debug("check_value passed")
    return CheckResult(ok=True)


def check_value(
    value: Any,
    value_type: SemanticType | str,
    rule: Rule | Mapping[str, Any] | None = None,
    *,
    throw_on_failure: bool = True,
) -> bool:
    """Check a value, raising or returning False on failure.

    Args:
        value: The value to check; ``UNDEFINED`` stands for an absent value
        value_type: Expected semantic type
        rule: Constraints to apply, as a Rule, a mapping or None
        throw_on_failure: Raise the failure instead of returning False

    Returns:
        True if the value conforms, False on failure in lenient mode

    Raises:
        ValidationError: If the value does not conform
        ConfigurationError: If the rule itself is malformed
    """
    result = evaluate(value, value_type, rule)
    if result.ok:
        return True
    if throw_on_failure:
        return result.unwrap()
    return False


def _check(value: Any, value_type: Any, rule: Rule) -> None:
    if value is UNDEFINED:
        if rule.allow_undefined is not True:
            raise ValidationError("value must not be undefined")
        return

    if value is None:
        if rule.allow_null is not True:
            raise ValidationError("value must not be null")
        return

    spec = get_type_spec(value_type)
    if spec is None:
        raise ValidationError(f"unknown type {value_type!r}")
    if not spec.check(value):
        raise ValidationError(f"value is not of type {spec.label}")

    if (
        rule.allow_empty is True
        and spec is get_type_spec(SemanticType.STRING)
        and value == ""
    ):
        return

    for step in _CONSTRAINT_STEPS:
        step(value, spec, rule)


def _require_bound(name: str, bound: Any) -> None:
    if not check_value(bound, SemanticType.NUMBER, throw_on_failure=False) or (
        isinstance(bound, float) and not math.isfinite(bound)
    ):
        raise ConfigurationError(f"{name} rule is misconfigured")


def _bound_step(
    name: str, passes: Callable[[Any, Any], bool]
) -> Callable[[Any, TypeSpec, Rule], None]:
    def step(value: Any, spec: TypeSpec, rule: Rule) -> None:
        bound = getattr(rule, name)
        if bound is UNDEFINED:
            return
        _require_bound(name, bound)
        # Bounds only measure numbers, strings and arrays
        if spec.size is not None and not passes(spec.size(value), bound):
            raise ValidationError(f"{name} rule check failed")

    return step


def _check_eq(value: Any, spec: TypeSpec, rule: Rule) -> None:
    if rule.eq is not UNDEFINED and not strict_equals(value, rule.eq):
        raise ValidationError("eq rule check failed")


def _check_ne(value: Any, spec: TypeSpec, rule: Rule) -> None:
    if rule.ne is not UNDEFINED and strict_equals(value, rule.ne):
        raise ValidationError("ne rule check failed")


def _check_list(value: Any, spec: TypeSpec, rule: Rule) -> None:
    if rule.list is UNDEFINED:
        return
    if not check_value(rule.list, SemanticType.ARRAY, throw_on_failure=False):
        raise ConfigurationError("list rule is misconfigured")
    if not any(strict_equals(value, item) for item in rule.list):
        raise ValidationError("list rule check failed")


def _check_integer(value: Any, spec: TypeSpec, rule: Rule) -> None:
    if rule.integer is not True:
        return
    whole = is_number(value) and (
        isinstance(value, int) or (math.isfinite(value) and value.is_integer())
    )
    if not whole:
        raise ValidationError("integer rule check failed")


def _check_mobile(value: Any, spec: TypeSpec, rule: Rule) -> None:
    if rule.mobile is True and _MOBILE_RE.fullmatch(str(value)) is None:
        raise ValidationError("mobile rule check failed")


def _check_email(value: Any, spec: TypeSpec, rule: Rule) -> None:
    if rule.email is True and _EMAIL_RE.fullmatch(str(value)) is None:
        raise ValidationError("email rule check failed")


def _check_html(value: Any, spec: TypeSpec, rule: Rule) -> None:
    # Tag blacklist only: event handler attributes and javascript: URLs pass
    if rule.html is not True:
        return
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        soup = BeautifulSoup(str(value), "html.parser")
    for tag in FORBIDDEN_HTML_TAGS:
        if soup.find(tag) is not None:
            raise ValidationError(f"value must not contain {tag} tag")


def _check_handler(value: Any, spec: TypeSpec, rule: Rule) -> None:
    handler = rule.check_handler
    if handler is UNDEFINED:
        return
    if not check_value(handler, SemanticType.FUNCTION, throw_on_failure=False):
        raise ConfigurationError("check_handler rule is misconfigured")
    try:
        outcome = handler(value)
    except ValueCheckError:
        raise
    except Exception as e:
        raise ValidationError(f"check_handler rule raised {e!r}") from e
    if outcome is False:
        raise ValidationError("check_handler rule check failed")


_CONSTRAINT_STEPS: Final = (
    _bound_step("gte", operator.ge),
    _bound_step("gt", operator.gt),
    _check_eq,
    _bound_step("lt", operator.lt),
    _bound_step("lte", operator.le),
    _check_ne,
    _check_list,
    _check_integer,
    _check_mobile,
    _check_email,
    _check_html,
    _check_handler,
)
