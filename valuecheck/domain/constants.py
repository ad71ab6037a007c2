"""Domain constants shared by the rule presets and helpers."""

import sys
from typing import Final

# Integer domains
TINYINT_MIN: Final = -(2**7)
TINYINT_MAX: Final = 2**7 - 1
UNSIGNED_TINYINT_MAX: Final = 2**8 - 1
INT_MIN: Final = -(2**31)
INT_MAX: Final = 2**31 - 1
UNSIGNED_INT_MAX: Final = 2**32 - 1
# Largest integers a double represents exactly
SAFE_INTEGER_MIN: Final = -(2**53 - 1)
SAFE_INTEGER_MAX: Final = 2**53 - 1
DOUBLE_MAX: Final = sys.float_info.max

# String length domains
MAX_STRING_LENGTH: Final = 255
MAX_TEXT_LENGTH: Final = 65535

# Pattern rules
MOBILE_PATTERN: Final = r"1[3-9]\d{9}"
EMAIL_PATTERN: Final = r"[\w-]+(\.[\w-]+)*@[\w-]+(\.[\w-]+)+"
FORBIDDEN_HTML_TAGS: Final = ("script", "iframe", "frame")

# Fixed point precision bounds
MIN_PRECISION: Final = 1
MAX_PRECISION: Final = 6
DEFAULT_PRECISION: Final = 2

