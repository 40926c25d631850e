"""Retry utilities.

``with_retry`` wraps async calls to the auth provider with exponential backoff.
``retry_call`` is the synchronous, no-delay variant used for database inserts
whose only failure mode worth retrying is a regenerable unique value.
"""

import asyncio
from collections.abc import Awaitable, Callable

# Default retry configuration
DEFAULT_ATTEMPTS = 2
DEFAULT_BASE_DELAY = 0.2  # seconds

RetryHook = Callable[[int, Exception], None]


def _calculate_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY) -> float:
    """Calculate exponential backoff delay for a zero-indexed attempt.

    Returns:
        Delay in seconds (base_delay * 2^attempt)
    """
    return base_delay * (2**attempt)


async def with_retry[T](
    fn: Callable[[], Awaitable[T]],
    attempts: int = DEFAULT_ATTEMPTS,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    base_delay: float = DEFAULT_BASE_DELAY,
    on_retry: RetryHook | None = None,
) -> T:
    """Execute async function with exponential backoff retry.

    Args:
        fn: Async function to execute (typically a closure)
        attempts: Maximum number of attempts
        exceptions: Tuple of exception types to catch and retry
        base_delay: Base delay in seconds for exponential backoff
        on_retry: Called with (attempt, error) before each retry

    Returns:
        Result from successful function execution

    Raises:
        The last exception if all attempts fail
    """
    last_error: Exception | None = None

    for attempt in range(attempts):
        try:
            return await fn()
        except exceptions as e:
            last_error = e
            if attempt < attempts - 1:
                if on_retry is not None:
                    on_retry(attempt, e)
                await asyncio.sleep(_calculate_delay(attempt, base_delay))

    raise last_error  # type: ignore[misc]


def retry_call[T](
    fn: Callable[[int], T],
    attempts: int,
    exceptions: tuple[type[Exception], ...],
    on_retry: RetryHook | None = None,
) -> T:
    """Call ``fn(attempt)`` until it succeeds, without sleeping in between.

    ``fn`` receives the zero-indexed attempt so it can produce a fresh value
    (for example a new random code) each time.

    Raises:
        ValueError: If attempts is less than 1
        The last caught exception if all attempts fail
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    last_error: Exception | None = None

    for attempt in range(attempts):
        try:
            return fn(attempt)
        except exceptions as e:
            last_error = e
            if attempt < attempts - 1 and on_retry is not None:
                on_retry(attempt, e)

    raise last_error  # type: ignore[misc]
