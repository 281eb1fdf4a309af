"""Retry with exponential backoff for transient external API errors."""
import asyncio
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


async def retry_with_backoff(
    func: Callable[..., Any],
    *args: Any,
    max_retries: int = 3,
    backoff_base: float = 1.0,
    backoff_factor: float = 2.0,
    retryable_exceptions: tuple = (ConnectionError, TimeoutError),
    **kwargs: Any,
) -> Any:
    """Execute func with exponential backoff retry on retryable errors.

    Callers pass the exception types their client raises for transient
    failures; anything else propagates on the first attempt.
    Delay: backoff_base * (backoff_factor ** attempt)
        → 1s, 2s, 4s by default
    """
    last_exc: Exception | None = None

    for attempt in range(max_retries + 1):
        try:
            return await func(*args, **kwargs)
        except retryable_exceptions as exc:
            last_exc = exc
            if attempt < max_retries:
                delay = backoff_base * (backoff_factor ** attempt)
                logger.warning(
                    "Retry %d/%d after %.1fs: %s",
                    attempt + 1, max_retries, delay, exc,
                )
                await asyncio.sleep(delay)
            else:
                logger.error("Max retries (%d) exceeded: %s", max_retries, exc)
                raise

    raise last_exc  # type: ignore[misc]
