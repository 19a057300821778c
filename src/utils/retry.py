"""Retry helpers for external API calls.

Only errors that signal a transient condition are retried; anything else
propagates on the first attempt.
"""

import asyncio
import functools
import inspect
import logging
import time

logger = logging.getLogger(__name__)


class RetryableError(Exception):
    """Base class for errors worth another attempt."""


class NetworkError(RetryableError):
    """Connection failure, DNS error or timeout talking to a remote API."""


class TemporaryServiceError(RetryableError):
    """Remote service is temporarily unavailable (429, 5xx)."""


class APIRateLimitError(RetryableError):
    """AI backend rejected the call because of quota or rate limits."""


def _backoff(attempt: int, base_delay: float, max_delay: float) -> float:
    return min(base_delay * (2**attempt), max_delay)


def retry_api_call(max_retries: int = 3, base_delay: float = 1.0, max_delay: float = 30.0):
    """Retry a sync or async callable on RetryableError with exponential backoff.

    Args:
        max_retries: Number of retries after the first attempt
        base_delay: Delay before the first retry, doubled for each subsequent one
        max_delay: Upper bound for a single delay

    Returns:
        Decorator preserving the wrapped callable's sync/async nature
    """

    def decorator(func):
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                for attempt in range(max_retries + 1):
                    try:
                        return await func(*args, **kwargs)
                    except RetryableError as e:
                        if attempt >= max_retries:
                            raise
                        delay = _backoff(attempt, base_delay, max_delay)
                        logger.warning(
                            f"{func.__qualname__} failed ({e}), retry {attempt + 1}/{max_retries} in {delay:.1f}s"
                        )
                        await asyncio.sleep(delay)

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except RetryableError as e:
                    if attempt >= max_retries:
                        raise
                    delay = _backoff(attempt, base_delay, max_delay)
                    logger.warning(
                        f"{func.__qualname__} failed ({e}), retry {attempt + 1}/{max_retries} in {delay:.1f}s"
                    )
                    time.sleep(delay)

        return sync_wrapper

    return decorator
