"""
Rate limit retry logic.

The API answers 429 when the request quota is exhausted. Requests are
replayed after a backoff derived from the ``x-ratelimit-reset`` header,
for a bounded number of attempts. No other status is retried.
"""

import re
from typing import Optional, Mapping, Any
from ..config.settings import get_settings
from ..core.logging_config import get_logger
from ..clients.headers import get_header

logger = get_logger(__name__)

RATE_LIMITED = 429
DEFAULT_RATE_LIMIT_RETRIES = 3
DEFAULT_BACKOFF_SECONDS = 5
RATE_LIMIT_RESET_HEADER = 'x-ratelimit-reset'

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def parse_int(value: Any) -> int:
    """
    Parse the leading integer of a header value.

    Args:
        value: Raw header value

    Returns:
        Leading integer, or 0 when the value does not start with one
    """
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def backoff_from_headers(headers: Mapping, default: int = DEFAULT_BACKOFF_SECONDS) -> int:
    """
    Compute how long to wait before replaying a rate limited request.

    One extra second is added to the advertised reset time.

    Args:
        headers: Parsed header map of the 429 response
        default: Backoff used when the reset header is absent or empty

    Returns:
        Backoff in seconds
    """
    reset = get_header(headers, RATE_LIMIT_RESET_HEADER)
    if isinstance(reset, list):
        reset = reset[-1] if reset else None
    if not reset:
        return default
    return max(0, parse_int(reset) + 1)


class RateLimitRetry:
    """
    Retry budget for a single logical request.

    A fresh instance is created per call; it is never shared.
    """

    def __init__(self, retries: Optional[int] = None, default_backoff: Optional[int] = None):
        """
        Initialize the retry budget.

        Args:
            retries: Maximum number of replays after the first attempt (default from settings)
            default_backoff: Seconds to wait when no reset header is sent (default from settings)
        """
        settings = get_settings()
        self.retries = settings.rate_limit_retries if retries is None else retries
        self.default_backoff = settings.rate_limit_backoff if default_backoff is None else default_backoff
        self.remaining = self.retries

    def should_retry(self, status_code: int) -> bool:
        """Check whether a response status allows another attempt."""
        return status_code == RATE_LIMITED and self.remaining > 0

    def next_backoff(self, headers: Mapping, method: str = '') -> int:
        """
        Consume one retry and return the backoff to apply before it.

        Args:
            headers: Parsed header map of the rate limited response
            method: API method, used for logging only

        Returns:
            Backoff in seconds
        """
        backoff = backoff_from_headers(headers, self.default_backoff)
        attempt = self.retries - self.remaining + 1
        self.remaining -= 1
        logger.warning(
            f"Rate limited on {method or 'request'} (retry {attempt}/{self.retries}). "
            f"Retrying in {backoff}s..."
        )
        return backoff
