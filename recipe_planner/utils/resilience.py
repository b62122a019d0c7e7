"""Retry and graceful-degradation helpers shared by every external call site.

- with_retry(): exponential backoff around a single async operation, with a
  caller-supplied classifier deciding which exceptions are worth retrying.
- safe_execute_async() / safe_execute_sync(): run an optional operation and
  return a default on failure, logging at the requested level.
"""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from recipe_planner.utils.logger import logger

T = TypeVar("T")


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    """Log error with appropriate level.

    Args:
        operation_name: Description for logging
        exception: Exception that occurred
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
    """
    msg = f"{operation_name}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg)
    else:
        logger.warning(msg)


def backoff_delay(attempt: int, base_delay: float, exponential: bool = True) -> float:
    """Delay before the retry that follows `attempt` (1-based): 2s, 4s, 8s for base 2."""
    if not exponential:
        return base_delay
    return base_delay * (2 ** (attempt - 1))


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int,
    classify: Callable[[Exception], bool],
    base_delay: float = 2,
    exponential: bool = True,
    operation_name: str = "operation",
) -> T:
    """Run `operation` up to `max_attempts` times, sleeping between retryable failures.

    `operation` is a zero-argument factory so each attempt gets a fresh coroutine.
    `classify(exc)` returns True for transient errors. Non-transient errors and the
    final transient error are re-raised unchanged; callers translate them.

    Example:
        >>> result = await with_retry(lambda: call_model(prompt), 3, is_transient_error)
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got: {max_attempts}")

    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as e:
            if not classify(e):
                logger.debug(f"{operation_name}: non-retryable failure on attempt {attempt}: {e}")
                raise
            if attempt >= max_attempts:
                logger.warning(f"{operation_name}: failed after {max_attempts} attempts: {e}")
                raise

            delay = backoff_delay(attempt, base_delay, exponential)
            logger.warning(
                f"{operation_name}: attempt {attempt}/{max_attempts} failed ({e}). Retrying in {delay}s..."
            )
            await asyncio.sleep(delay)
            attempt += 1


async def safe_execute_async(
    coro: Awaitable[Any],
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
    reraise: bool = False,
) -> Any:
    """Safely execute async operation with consistent error logging.

    Used where failure must not spread: one image tier, one image resolution,
    one recipe insert.

    Args:
        coro: Awaitable coroutine to execute.
        operation_name: Description for logging (e.g., "Resolve image for 'Dal Tadka'").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None (graceful degradation).
        reraise: If True, re-raise exception after logging (for critical ops). Default: False.

    Returns:
        Result of coroutine if successful, default_return on exception if reraise=False.
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level)
        if reraise:
            raise
        return default_return


def safe_execute_sync(
    func: Callable[[], Any],
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
    reraise: bool = False,
) -> Any:
    """Synchronous version of safe_execute_async. Same behavior and patterns."""
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level)
        if reraise:
            raise
        return default_return

