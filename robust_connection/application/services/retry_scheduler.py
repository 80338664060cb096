"""Retry scheduler service.

Runs the attempts of one episode against a RetryBudget. Every attempt is
announced and then preceded by a suspension of constant length; there is
no backoff and no jitter.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from ...domain.entities import RetryBudget
from ...domain.exceptions import RetriesExhaustedError

_LOGGER = logging.getLogger(__name__)

SleepFunction = Callable[[float], Awaitable[Any]]
ScheduledListener = Callable[[float, int], None]
FailureListener = Callable[[BaseException, int], None]


class RetryScheduler:
    """Delayed re-invocation of a connection attempt.

    For each attempt the scheduler:
    1. Calls ``on_scheduled(delay, remaining)``
    2. Suspends for ``delay`` (never busy-waits)
    3. Awaits ``attempt()``
    4. On failure consumes one unit of budget and calls
       ``on_failure(error, remaining)``; stops once the budget is exhausted

    ``asyncio.CancelledError`` is never treated as a failed attempt.

    Attributes:
        _sleep: Suspension primitive (asyncio.sleep unless injected)

    Example:
        >>> scheduler = RetryScheduler()
        >>> budget = RetryBudget.for_episode(attempts=3, interval=1.0)
        >>> handle = await scheduler.run(budget, provider_attempt)
    """

    def __init__(self, sleep: Optional[SleepFunction] = None):
        """Initialize scheduler.

        Args:
            sleep: Coroutine function used to wait (default: asyncio.sleep)
        """
        self._sleep = sleep or asyncio.sleep

    async def run(
        self,
        budget: RetryBudget,
        attempt: Callable[[], Awaitable[Any]],
        first_delay: Optional[float] = None,
        on_scheduled: Optional[ScheduledListener] = None,
        on_failure: Optional[FailureListener] = None,
    ) -> Any:
        """Run attempts until one succeeds or the budget is exhausted.

        Args:
            budget: Budget for this episode (mutated)
            attempt: Coroutine function performing one attempt
            first_delay: Delay before the first attempt (default:
                budget.interval)
            on_scheduled: Called with (delay, remaining) before each wait
            on_failure: Called with (error, remaining) after each failure

        Returns:
            Result of the first successful attempt

        Raises:
            RetriesExhaustedError: If every permitted attempt failed
        """
        delay = budget.interval if first_delay is None else first_delay

        while True:
            if on_scheduled is not None:
                on_scheduled(delay, budget.remaining)

            _LOGGER.debug(
                "Next attempt in %.3fs (%d attempt(s) remaining)",
                delay,
                budget.remaining,
            )
            await self._sleep(delay)

            try:
                return await attempt()
            except Exception as err:
                remaining = budget.consume()
                _LOGGER.warning(
                    "Connection attempt %d failed (%d remaining): %s",
                    budget.attempts_made,
                    remaining,
                    err,
                )

                if on_failure is not None:
                    on_failure(err, remaining)

                if budget.exhausted:
                    raise RetriesExhaustedError(err, budget.attempts_made) from err

            delay = budget.interval
