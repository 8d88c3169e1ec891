"""Bounded retry loop with capped exponential backoff."""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, *, base_delay: float, max_delay: float) -> float:
    """Delay before the retry that follows zero-based ``attempt``."""

    return min(base_delay * (2 ** attempt), max_delay)


def call_with_retries(
    fn: Callable[[], T],
    *,
    attempts: int,
    base_delay: float,
    max_delay: float,
    retry_on: Tuple[Type[BaseException], ...],
    label: str = "call",
    sleep: Optional[Callable[[float], None]] = None,
) -> T:
    """Run ``fn`` up to ``attempts`` times, re-raising the last error once exhausted.

    Only exceptions listed in ``retry_on`` are retried; anything else propagates
    on the first occurrence.
    """

    sleeper = sleep or time.sleep
    total = max(1, attempts)
    attempt = 0
    while True:
        try:
            return fn()
        except retry_on as exc:
            logger.warning("%s attempt %d/%d failed: %s", label, attempt + 1, total, exc)
            if attempt >= total - 1:
                logger.error("%s failed after %d attempts", label, total)
                raise
        delay = backoff_delay(attempt, base_delay=base_delay, max_delay=max_delay)
        logger.info("%s retrying in %.2fs", label, delay)
        sleeper(delay)
        attempt += 1


__all__ = ["backoff_delay", "call_with_retries"]
