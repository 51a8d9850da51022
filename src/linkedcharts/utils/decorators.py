"""Utility decorators for dataset loading and recomputation."""

import functools
import time
from typing import Any, Callable, Tuple, Type

from linkedcharts.utils.logging import get_logger

logger = get_logger(__name__)


def timer(func: Callable) -> Callable:
    """Decorator to time function execution and log results."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            logger.info(f"{func.__name__} took {elapsed:.4f} seconds")
    return wrapper


def retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
):
    """Decorator to retry function on failure with logging.

    Only exceptions listed in ``exceptions`` are retried; anything else
    propagates on the first attempt. The last failure is re-raised once
    ``max_attempts`` is exhausted.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        logger.error(f"All {max_attempts} attempts failed for {func.__name__}")
                        raise
                    logger.warning(
                        f"Attempt {attempt} failed for {func.__name__}: {e}. Retrying in {delay}s..."
                    )
                    time.sleep(delay)
        return wrapper
    return decorator
