"""Infrastructure and technical constants."""

from typing import Final

# Technical configuration constants
DEFAULT_SLEEP_FALLBACK_MS: Final = 1000
DEFAULT_LOG_DIR: Final = "logs"
LOG_FILE_NAME: Final = "valuecheck.log"
