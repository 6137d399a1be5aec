"""Retry decorator for calls to flaky external services."""

import functools
import time
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from gorge.logger import get_logger

logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

DEFAULT_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY = 0.5
DEFAULT_BACKOFF_FACTOR = 1.5


def with_retry(
    retry_on: tuple[type[Exception], ...],
    attempts: int = DEFAULT_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Retry a function with exponential backoff when it raises ``retry_on``.

    Other exceptions propagate immediately. When the final attempt fails its
    exception is re-raised.

    Args:
        retry_on: Exception types that mark a failure as transient, e.g.
            ``(sqlalchemy.exc.OperationalError,)`` for dropped connections.
        attempts: Total number of calls, including the first one.
        initial_delay: Seconds to wait before the second call.
        backoff_factor: Multiplier applied to the delay after every retry.

    Returns:
        Decorator function.
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        name = getattr(func, "__qualname__", repr(func))

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            delay = initial_delay
            for attempt in range(1, attempts):
                try:
                    return func(*args, **kwargs)
                except retry_on as exc:
                    logger.debug(
                        f"{name} failed (attempt {attempt}/{attempts}), retrying in {delay:.1f}s: {exc}"
                    )
                time.sleep(delay)
                delay *= backoff_factor

            try:
                return func(*args, **kwargs)
            except retry_on as exc:
                logger.warning(f"{name} failed after {attempts} attempts: {exc}")
                raise

        return wrapper

    return decorator
