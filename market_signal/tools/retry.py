"""Retry utilities for upstream HTTP fetches with exponential backoff."""
import asyncio
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

import httpx

from market_signal.app.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def is_transient(exc: BaseException) -> bool:
    """Connection problems, timeouts, throttling and upstream 5xx are worth another try."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS
    return isinstance(exc, (httpx.TransportError, httpx.TimeoutException))


def retry_with_backoff(
    max_retries: int | None = None,
    initial_delay: float | None = None,
    max_delay: float | None = None,
    backoff_factor: float | None = None,
):
    """
    Decorator to retry async upstream calls with exponential backoff on transient errors.

    Unset arguments fall back to the ``fetch_*``/``retry_*`` settings at call time.
    Cancellation is never retried: ``asyncio.CancelledError`` is not an ``Exception``.

    Args:
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds before first retry
        max_delay: Maximum delay between retries
        backoff_factor: Multiplier for exponential backoff
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            retries = settings.fetch_max_retries if max_retries is None else max_retries
            delay = settings.retry_initial_delay if initial_delay is None else initial_delay
            ceiling = settings.retry_max_delay if max_delay is None else max_delay
            factor = settings.retry_backoff_factor if backoff_factor is None else backoff_factor

            for attempt in range(retries + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not is_transient(e):
                        raise
                    if attempt >= retries:
                        logger.error(
                            "%s failed after %d attempts: %s",
                            func.__name__,
                            attempt + 1,
                            e,
                        )
                        raise
                    logger.warning(
                        "%s transient failure (attempt %d/%d). Retrying in %.1f seconds: %s",
                        func.__name__,
                        attempt + 1,
                        retries + 1,
                        delay,
                        e,
                    )
                    await asyncio.sleep(delay)
                    delay = min(delay * factor, ceiling)

            raise RuntimeError("Unexpected retry loop exit")

        return wrapper

    return decorator
