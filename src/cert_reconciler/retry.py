"""Deadline-bounded polling with retryable/fatal error classification.

``retry_until`` calls ``attempt`` until it returns. ``attempt`` signals a
transient condition by raising :class:`RetryableError`; any other exception
is fatal and propagates immediately. Waits grow exponentially up to
``RetryPolicy.max_interval``.

When the deadline expires the engine makes exactly one more synchronous
attempt before giving up, because the remote system may have converged
between the last poll and the deadline.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from typing import TypeVar

import backoff

from cert_reconciler.errors import RetryableError, RetryTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass(frozen=True)
class RetryPolicy:
    """Wait curve between attempts and the clock deadlines are measured on."""

    initial_interval: float = 0.1
    max_interval: float = 10.0
    jitter: bool = True
    clock: Clock = field(default=time.monotonic, repr=False, compare=False)


def _log_backoff(details: dict) -> None:
    logger.debug(
        "Attempt %d not converged (%s), retrying in %.1fs",
        details["tries"],
        details["exception"],
        details["wait"],
    )


def _waits_until(
    deadline: float,
    clock: Clock,
    policy: RetryPolicy,
) -> Generator[float | None, object, None]:
    """Exponential waits that stop once the next attempt would start after ``deadline``."""
    waits = backoff.expo(factor=policy.initial_interval, max_value=policy.max_interval)
    next(waits)
    yield None
    while True:
        wait = next(waits)
        if clock() + wait >= deadline:
            return
        yield wait


def retry_until(
    timeout: float,
    attempt: Callable[[], T],
    *,
    policy: RetryPolicy | None = None,
) -> T:
    """Call ``attempt`` until it returns, a fatal error is raised, or ``timeout`` seconds pass.

    Returns the value of the first successful attempt. Raises
    :class:`RetryTimeoutError` if the post-deadline final attempt still raises
    :class:`RetryableError`.
    """
    policy = policy or RetryPolicy()
    clock = policy.clock
    deadline = clock() + timeout

    @backoff.on_exception(
        lambda: _waits_until(deadline, clock, policy),
        RetryableError,
        giveup=lambda _e: clock() >= deadline,
        jitter=backoff.full_jitter if policy.jitter else None,
        on_backoff=_log_backoff,
        logger=None,
    )
    def poll() -> T:
        return attempt()

    try:
        return poll()
    except RetryableError as exc:
        logger.debug("Polling stopped at deadline: %s", exc)

    remaining = deadline - clock()
    if remaining > 0:
        time.sleep(remaining)

    try:
        return attempt()
    except RetryableError as exc:
        raise RetryTimeoutError(timeout, exc) from exc
