"""Standardized retry logic for sitespec.

Provides a centralized way to create async retry configurations using tenacity.
"""

from collections.abc import Callable
from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_none,
)


def get_retryer(
    max_attempts: int = 3,
    wait_min: float = 0.0,
    wait_max: float = 0.0,
    wait_multiplier: float = 1.0,
    exceptions: tuple[type[BaseException], ...] = (Exception,),
    log_callback: Callable[[Any], None] | None = None,
    reraise: bool = True,
) -> AsyncRetrying:
    """Create a standardized tenacity AsyncRetrying object.

    Args:
        max_attempts: Maximum number of attempts, the first one included.
        wait_min: Minimum wait time between retries in seconds.
        wait_max: Maximum wait time between retries in seconds. 0 retries immediately.
        wait_multiplier: Multiplier for exponential backoff.
        exceptions: Tuple of exception types to retry on.
        log_callback: Optional callback function for before_sleep logging.
                      Receives the retry state.
        reraise: Whether to reraise the last exception after all attempts fail.

    Returns:
        A configured tenacity.AsyncRetrying object.

    """
    wait = wait_exponential(multiplier=wait_multiplier, min=wait_min, max=wait_max) if wait_max > 0 else wait_none()
    return AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait,
        retry=retry_if_exception_type(exceptions),
        before_sleep=log_callback,
        reraise=reraise,
    )
