import random
import time
from functools import wraps
from typing import Any, Callable, Iterator, Type, TypeVar

R = TypeVar("R")


def backoff_delays(
    max_retries: int,
    initial_delay_seconds: float,
    max_delay_seconds: float,
    jitter_range: tuple[float, float] = (0.5, 1.0),
) -> Iterator[float]:
    """Yields the sleep time before each of ``max_retries`` retries.

    The delay doubles on every retry, is capped at ``max_delay_seconds`` and is
    then scaled by a random factor from ``jitter_range``.
    """
    delay = initial_delay_seconds
    for _ in range(max_retries):
        yield min(delay, max_delay_seconds) * random.uniform(*jitter_range)
        delay *= 2


def exponential_backoff(
    max_retries: int = 3,
    initial_delay_seconds: float = 0.5,
    max_delay_seconds: float = 15.0,
    jitter_range: tuple[float, float] = (0.5, 1.0),
    retryable_exceptions: tuple[Type[BaseException], ...] = (Exception,),
    is_retryable: Callable[[BaseException], bool] = lambda e: True,
    requested_delay: Callable[[BaseException], float | None] | None = None,
    on_retry: Callable[[BaseException, float, int], None] | None = None,
) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """
    Decorator retrying a function with exponentially growing delays.

    Args:
        max_retries: Maximum number of retries after the first call.
        initial_delay_seconds: Delay before the first retry.
        max_delay_seconds: Upper bound of any delay, including requested ones.
        jitter_range: Tuple of (min, max) multipliers randomizing the delay.
        retryable_exceptions: Exception types that trigger a retry.
        is_retryable: Decides whether a caught exception is retried.
        requested_delay: Returns the delay the failure asks for, e.g. from a
                         Retry-After header, or None to use the backoff delay.
        on_retry: Called before each retry with (exception, sleep_time, retry_count).

    Example:
        ```
        @exponential_backoff(retryable_exceptions=(ClusterConnectionError,))
        def fetch() -> httpx.Response:
            return client.send(request)
        ```
    """

    def decorator(func: Callable[..., R]) -> Callable[..., R]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> R:
            delays = backoff_delays(
                max_retries, initial_delay_seconds, max_delay_seconds, jitter_range
            )
            retries = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    if not is_retryable(e):
                        raise
                    sleep_time = next(delays, None)
                    if sleep_time is None:
                        raise
                    retries += 1

                    if requested_delay is not None:
                        requested = requested_delay(e)
                        if requested is not None:
                            sleep_time = min(max(requested, 0.0), max_delay_seconds)
                    if on_retry:
                        on_retry(e, sleep_time, retries)
                    time.sleep(sleep_time)

        return wrapper

    return decorator
