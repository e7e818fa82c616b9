"""Bounded retry with a fixed delay.

The delay function is injectable so callers (and tests) can run the loop
without wall-clock waits.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class RetryOutcome:
    ok: bool
    attempts: int
    error: BaseException | None = None


def retry(
    action: Callable[[], object],
    attempts: int = 10,
    delay: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> RetryOutcome:
    """Call *action* until it returns a truthy value, at most *attempts* times.

    An exception raised by *action* counts as a failed attempt; the last one is
    kept on the outcome. ``sleep(delay)`` runs between attempts, never after the
    final one.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    error: BaseException | None = None
    for n in range(1, attempts + 1):
        try:
            if action():
                return RetryOutcome(ok=True, attempts=n)
            error = None
        except Exception as exc:
            error = exc
        if n < attempts:
            sleep(delay)
    return RetryOutcome(ok=False, attempts=attempts, error=error)
