"""Independent helpers: delay, random values, timestamps, fixed point."""

import asyncio
import math
import secrets
import string
from datetime import date, datetime, time

from ..config import settings
from ..domain.constants import DEFAULT_PRECISION, MAX_PRECISION, MIN_PRECISION
from ..domain.exceptions import ConfigurationError, ValidationError, ValueCheckError
from ..domain.rules import BIGINT, DOUBLE, INT, POSITIVE_INT, Rule
from ..domain.types import SemanticType
from ..logging_config import get_logger
from .evaluator import check_value

logger = get_logger(__name__)

PRECISION_RULE = Rule(gte=MIN_PRECISION, lte=MAX_PRECISION, integer=True)


async def sleep(milliseconds: int, *, throw_on_failure: bool = True) -> None:
    """Suspend the calling coroutine for the given number of milliseconds.

    Args:
        milliseconds: Positive integer delay
        throw_on_failure: Raise on an invalid delay instead of sleeping for
            ``settings.sleep_fallback_ms``

    Raises:
        ValidationError: If the delay is not a positive 32-bit integer
    """
    logger.debug("sleep started", milliseconds=milliseconds)
    try:
        check_value(milliseconds, SemanticType.NUMBER, POSITIVE_INT)
    except ValueCheckError as e:
        if throw_on_failure:
            raise
        logger.warning(
            "Invalid sleep duration, using fallback",
            milliseconds=milliseconds,
            fallback_ms=settings.sleep_fallback_ms,
            reason=e.message,
        )
        milliseconds = settings.sleep_fallback_ms

    await asyncio.sleep(milliseconds / 1000)
    logger.debug("sleep finished", milliseconds=milliseconds)


def generate_random_number(
    min_value: int, max_value: int, *, throw_on_failure: bool = True
) -> int:
    """Draw a uniform random integer from the closed range [min_value, max_value].

    Args:
        min_value: Lower bound, a 32-bit integer
        max_value: Upper bound, a 32-bit integer greater than min_value
        throw_on_failure: Raise on invalid bounds instead of returning 0

    Raises:
        ValidationError: If a bound is not a 32-bit integer
        ConfigurationError: If min_value >= max_value
    """
    try:
        check_value(min_value, SemanticType.NUMBER, INT)
        check_value(max_value, SemanticType.NUMBER, INT)
        if min_value >= max_value:
            raise ConfigurationError("min_value must be less than max_value")
    except ValueCheckError:
        if throw_on_failure:
            raise
        return 0

    low, high = int(min_value), int(max_value)
    return low + secrets.randbelow(high - low + 1)


def generate_random_string(
    length: int,
    lowercase: bool = True,
    uppercase: bool = True,
    number: bool = True,
    other_chars: str = "",
    *,
    throw_on_failure: bool = True,
) -> str:
    """Build a random string from the enabled character classes.

    Each character is drawn uniformly with generate_random_number.

    Args:
        length: Number of characters, a positive integer
        lowercase: Include a-z
        uppercase: Include A-Z
        number: Include 0-9
        other_chars: Extra characters to draw from
        throw_on_failure: Raise on invalid arguments instead of returning ""
    """
    try:
        check_value(length, SemanticType.NUMBER, POSITIVE_INT)
        check_value(lowercase, SemanticType.BOOLEAN)
        check_value(uppercase, SemanticType.BOOLEAN)
        check_value(number, SemanticType.BOOLEAN)
        check_value(other_chars, SemanticType.STRING)

        alphabet = "".join(
            chars
            for enabled, chars in (
                (lowercase, string.ascii_lowercase),
                (uppercase, string.ascii_uppercase),
                (number, string.digits),
            )
            if enabled
        )
        alphabet += other_chars
        if not alphabet:
            raise ConfigurationError("no characters available")

        return "".join(
            alphabet[_random_index(len(alphabet))] for _ in range(int(length))
        )
    except ValueCheckError:
        if throw_on_failure:
            raise
        return ""


def _random_index(size: int) -> int:
    # A single-character alphabet has nothing to draw
    return generate_random_number(0, size - 1) if size > 1 else 0


def get_current_timestamp(
    value: date | None = None, *, throw_on_failure: bool = True
) -> int:
    """Return whole seconds since the Unix epoch.

    Naive datetimes are read as local time and a plain date as its local
    midnight; None means now.

    Raises:
        ValidationError: If value is not a date or datetime
    """
    try:
        check_value(value, SemanticType.DATE, {"allow_null": True})
    except ValueCheckError:
        if throw_on_failure:
            raise
        return 0

    if value is None:
        moment = datetime.now()
    elif isinstance(value, datetime):
        moment = value
    else:
        moment = datetime.combine(value, time.min)
    return math.floor(moment.timestamp())


def int_to_float(
    value: int,
    precision: int = DEFAULT_PRECISION,
    *,
    throw_on_failure: bool = True,
) -> float:
    """Convert a fixed point integer to a float, e.g. cents to units."""
    try:
        check_value(value, SemanticType.NUMBER, BIGINT)
        check_value(precision, SemanticType.NUMBER, PRECISION_RULE)
    except ValueCheckError:
        if throw_on_failure:
            raise
        return 0

    return value / 10 ** int(precision)


def float_to_int(
    value: float,
    precision: int = DEFAULT_PRECISION,
    *,
    throw_on_failure: bool = True,
) -> int:
    """Convert a float to a fixed point integer, flooring the remainder."""
    try:
        check_value(value, SemanticType.NUMBER, DOUBLE)
        check_value(precision, SemanticType.NUMBER, PRECISION_RULE)
        scaled = value * 10 ** int(precision)
        if not math.isfinite(scaled):
            raise ValidationError("value is out of range for the precision")
    except ValueCheckError:
        if throw_on_failure:
            raise
        return 0

    return math.floor(scaled)
