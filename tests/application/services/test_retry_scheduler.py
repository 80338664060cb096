"""Tests for RetryScheduler service."""

import asyncio
import pytest

from robust_connection.application.services import RetryScheduler
from robust_connection.domain.entities import RetryBudget
from robust_connection.domain.exceptions import RetriesExhaustedError
from tests.doubles import RecordingSleep


def _scripted_attempt(outcomes):
    """Build an attempt coroutine that raises or returns scripted outcomes."""
    remaining = list(outcomes)

    async def attempt():
        outcome = remaining.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    return attempt


class TestRetryScheduler:
    """Test suite for RetryScheduler."""

    @pytest.fixture
    def sleep(self):
        """Create recording sleep."""
        return RecordingSleep()

    @pytest.fixture
    def scheduler(self, sleep):
        """Create scheduler that never really sleeps."""
        return RetryScheduler(sleep=sleep)

    @pytest.mark.asyncio
    async def test_first_success_returns_result(self, scheduler, sleep):
        """Test successful first attempt returns its result."""
        budget = RetryBudget.for_episode(attempts=3, interval=0.5)

        result = await scheduler.run(budget, _scripted_attempt(["handle"]))

        assert result == "handle"
        assert budget.remaining == 3
        assert budget.attempts_made == 0
        assert sleep.delays == [0.5]

    @pytest.mark.asyncio
    async def test_first_delay_overrides_interval(self, scheduler, sleep):
        """Test first_delay is only used before the first attempt."""
        budget = RetryBudget.for_episode(attempts=3, interval=2.0)
        attempt = _scripted_attempt([ConnectionError("down"), "handle"])

        await scheduler.run(budget, attempt, first_delay=0.0)

        assert sleep.delays == [0.0, 2.0]

    @pytest.mark.asyncio
    async def test_failures_consume_budget(self, scheduler):
        """Test each failure consumes one attempt."""
        budget = RetryBudget.for_episode(attempts=5, interval=1.0)
        attempt = _scripted_attempt(
            [ConnectionError("1"), ConnectionError("2"), "handle"]
        )

        result = await scheduler.run(budget, attempt)

        assert result == "handle"
        assert budget.remaining == 3
        assert budget.attempts_made == 2

    @pytest.mark.asyncio
    async def test_listener_sequence(self, scheduler):
        """Test scheduled and failure listeners see the countdown."""
        events = []
        budget = RetryBudget.for_episode(attempts=3, interval=1.0)
        errors = [ConnectionError("a"), ConnectionError("b"), ConnectionError("c")]

        with pytest.raises(RetriesExhaustedError):
            await scheduler.run(
                budget,
                _scripted_attempt(errors),
                on_scheduled=lambda delay, left: events.append(("scheduled", left)),
                on_failure=lambda err, left: events.append(("failure", left)),
            )

        assert events == [
            ("scheduled", 3),
            ("failure", 2),
            ("scheduled", 2),
            ("failure", 1),
            ("scheduled", 1),
            ("failure", 0),
        ]

    @pytest.mark.asyncio
    async def test_exhaustion_carries_last_error(self, scheduler):
        """Test RetriesExhaustedError wraps the final attempt error."""
        budget = RetryBudget.for_episode(attempts=2, interval=1.0)
        last = ConnectionError("last")

        with pytest.raises(RetriesExhaustedError) as exc_info:
            await scheduler.run(
                budget, _scripted_attempt([ConnectionError("first"), last])
            )

        assert exc_info.value.last_error is last
        assert exc_info.value.attempts_made == 2
        assert exc_info.value.__cause__ is last

    @pytest.mark.asyncio
    async def test_zero_budget_still_attempts_once(self, scheduler, sleep):
        """Test a zero budget makes exactly one attempt."""
        budget = RetryBudget.for_episode(attempts=0, interval=1.0)
        calls = []

        async def attempt():
            calls.append(1)
            raise ConnectionError("down")

        with pytest.raises(RetriesExhaustedError):
            await scheduler.run(budget, attempt)

        assert len(calls) == 1
        assert budget.remaining == 0

    @pytest.mark.asyncio
    async def test_cancellation_is_not_a_failure(self, scheduler):
        """Test CancelledError propagates without consuming budget."""
        budget = RetryBudget.for_episode(attempts=3, interval=1.0)
        failures = []

        async def attempt():
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await scheduler.run(
                budget, attempt, on_failure=lambda err, left: failures.append(err)
            )

        assert failures == []
        assert budget.remaining == 3

    @pytest.mark.asyncio
    async def test_failure_logged(self, scheduler, caplog):
        """Test failed attempts are logged as warnings."""
        budget = RetryBudget.for_episode(attempts=2, interval=1.0)

        await scheduler.run(
            budget, _scripted_attempt([ConnectionError("refused"), "handle"])
        )

        assert "Connection attempt 1 failed (1 remaining): refused" in caplog.text

    @pytest.mark.asyncio
    async def test_default_sleep_is_asyncio_sleep(self):
        """Test real scheduler waits with asyncio.sleep."""
        scheduler = RetryScheduler()
        budget = RetryBudget.for_episode(attempts=1, interval=0.0)

        assert await scheduler.run(budget, _scripted_attempt(["ok"])) == "ok"
