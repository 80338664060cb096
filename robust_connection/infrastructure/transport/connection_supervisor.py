"""Connection supervisor maintaining one persistent logical connection.

This module implements the reconnection lifecycle with:
- A bounded, fixed-delay retry sequence per episode
- Loss detection through the provider's loss callback
- A disconnect acknowledgement gating every reconnection episode
- Exactly one terminal failure signal
"""

import asyncio
import functools
import itertools
import logging
from typing import Any, Dict, Optional

from ...application.services import LifecycleNotifier, RetryScheduler
from ...config import Configuration
from ...domain.entities import RetryBudget
from ...domain.exceptions import (
    ConnectionFailedError,
    ConnectionLostError,
    RetriesExhaustedError,
    SupervisorStateError,
)
from ...domain.value_objects import LossContext
from ..state_machines import (
    ConnectionEvent,
    ConnectionState,
    ConnectionStateMachine,
)

_LOGGER = logging.getLogger(__name__)


class ConnectionSupervisor:
    """Keeps exactly one connection alive on top of an unreliable provider.

    Lifecycle:
    1. start() runs the initial episode and settles once, with the handle
       or with ConnectionFailedError
    2. When the provider reports loss, on_disconnect is awaited; a resolved
       acknowledgement starts a new episode with a fresh budget, a rejected
       one fails the supervisor
    3. Once FAILED the supervisor is inert

    The supervisor runs on the event loop that called start(). It never
    issues two attempts at once, and there is no stop method: abandoning
    the instance is the only way to stop it.

    Attributes:
        _config: Immutable configuration
        _scheduler: Fixed-delay attempt loop
        _notifier: Lifecycle hook dispatch
        _state_machine: Current supervisor state
        _handle: Live connection handle, if any
        _live_attempt: Id of the attempt that produced the live handle
        _budget: Budget of the current or last episode
        _episodes: Number of episodes started
        _failure: Terminal error, once failed

    Example:
        >>> config = build_configuration(
        ...     provider=BleakConnectionProvider("AA:BB:CC:DD:EE:FF"),
        ...     on_connect=subscribe,
        ...     on_disconnect=pause_processing,
        ... )
        >>> supervisor = ConnectionSupervisor(config)
        >>> client = await supervisor.start()
    """

    def __init__(
        self,
        config: Configuration,
        scheduler: Optional[RetryScheduler] = None,
        notifier: Optional[LifecycleNotifier] = None,
    ):
        """Initialize supervisor.

        Args:
            config: Supervisor configuration
            scheduler: Retry scheduler (default: RetryScheduler())
            notifier: Hook dispatcher (default: built from config)
        """
        self._config = config
        self._provider = config.provider
        self._scheduler = scheduler or RetryScheduler()
        self._notifier = notifier or LifecycleNotifier(config)
        self._state_machine = ConnectionStateMachine()

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._handle: Any = None
        self._live_attempt: Optional[int] = None
        self._attempt_ids = itertools.count(1)
        self._budget: Optional[RetryBudget] = None
        self._episodes = 0
        self._failure: Optional[BaseException] = None
        self._recovery_task: Optional[asyncio.Task] = None

        # Register state callbacks for logging
        self._state_machine.on_state(ConnectionState.CONNECTED, self._on_connected)
        self._state_machine.on_state(ConnectionState.FAILED, self._on_failed)

    def _on_connected(self):
        """Callback when connection established."""
        _LOGGER.info("Connection established (episode %d)", self._episodes)

    def _on_failed(self):
        """Callback when the supervisor failed permanently."""
        _LOGGER.error("Connection failed permanently: %s", self._failure)

    async def start(self) -> Any:
        """Run the initial connection episode.

        Returns:
            The connection handle, after on_connect ran

        Raises:
            ConnectionFailedError: If the initial episode failed permanently
                (raised after on_failure ran)
            SupervisorStateError: If the supervisor was already started
        """
        if not self._state_machine.transition(ConnectionEvent.START):
            raise SupervisorStateError(
                f"Supervisor already started (state: {self.connection_state})"
            )

        self._loop = asyncio.get_running_loop()
        budget = RetryBudget.for_episode(
            self._config.effective_initial_attempts, self._config.retry_interval
        )

        try:
            return await self._run_episode(budget, first_delay=self._config.initial_delay)
        except RetriesExhaustedError as err:
            self._fail(ConnectionEvent.RETRIES_EXHAUSTED, err.last_error)
            raise ConnectionFailedError(
                f"Initial connection failed after {err.attempts_made} attempt(s): "
                f"{err.last_error}",
                cause=err.last_error,
            ) from err.last_error

    async def _run_episode(
        self, budget: RetryBudget, first_delay: Optional[float] = None
    ) -> Any:
        """Drive one episode until connected or out of budget."""
        self._episodes += 1
        self._budget = budget

        _LOGGER.info(
            "Starting connection episode %d (%d attempt(s), %.3fs interval)",
            self._episodes,
            budget.remaining,
            budget.interval,
        )

        return await self._scheduler.run(
            budget,
            self._attempt,
            first_delay=first_delay,
            on_scheduled=self._retry_scheduled,
            on_failure=self._retry_failed,
        )

    async def _attempt(self) -> Any:
        """Make one provider connection attempt."""
        self._state_machine.transition(ConnectionEvent.DELAY_ELAPSED)

        attempt_id = next(self._attempt_ids)
        _LOGGER.debug("Connection attempt %d", attempt_id)

        handle = await self._provider.connect(
            functools.partial(self._report_loss, attempt_id)
        )

        self._handle = handle
        self._live_attempt = attempt_id
        self._state_machine.transition(ConnectionEvent.CONNECT_SUCCESS)
        self._notifier.connected(handle)
        return handle

    def _retry_scheduled(self, delay: float, attempts_remaining: int) -> None:
        self._notifier.retry_scheduled(delay, attempts_remaining)

    def _retry_failed(self, error: BaseException, attempts_remaining: int) -> None:
        self._notifier.retry_failed(error, attempts_remaining)
        if attempts_remaining >= 1:
            self._state_machine.transition(ConnectionEvent.CONNECT_FAILED)

    def _report_loss(
        self, attempt_id: int, error: BaseException, context: Any = None
    ) -> None:
        """Handle a loss notification from the provider.

        This is the callback handed to the provider for one attempt. It may
        be called from any thread, so the work is scheduled onto the
        supervisor's event loop.
        """
        loop = self._loop
        if loop is None or loop.is_closed():
            _LOGGER.warning(
                "Loss reported for attempt %d with no running supervisor: %s",
                attempt_id,
                error,
            )
            return

        loop.call_soon_threadsafe(self._handle_loss, attempt_id, error, context)

    def _handle_loss(
        self, attempt_id: int, error: BaseException, context: Any
    ) -> None:
        """Start a reconnection episode for the live handle."""
        if attempt_id != self._live_attempt or not self._state_machine.is_connected:
            _LOGGER.warning(
                "Ignoring loss notification for attempt %d (live attempt: %s, "
                "state: %s): %s",
                attempt_id,
                self._live_attempt,
                self.connection_state,
                error,
            )
            return

        if not isinstance(error, BaseException):
            error = ConnectionLostError(str(error))

        # The handle's lifetime ends here
        self._live_attempt = None
        self._handle = None

        _LOGGER.warning("Connection lost: %s", error)
        self._state_machine.transition(ConnectionEvent.CONNECTION_LOST)
        self._recovery_task = asyncio.ensure_future(
            self._recover(LossContext(error, context))
        )

    async def _recover(self, loss: LossContext) -> None:
        """Acknowledge a loss and run the reconnection episode."""
        try:
            await self._notifier.disconnected(loss)
        except Exception as err:
            _LOGGER.warning("Disconnect acknowledgement rejected: %s", err)
            self._fail(ConnectionEvent.ACK_REJECTED, err)
            return

        self._state_machine.transition(ConnectionEvent.ACK_RESOLVED)
        budget = RetryBudget.for_episode(
            self._config.retry_attempts, self._config.retry_interval
        )

        try:
            await self._run_episode(budget)
        except RetriesExhaustedError as err:
            self._fail(ConnectionEvent.RETRIES_EXHAUSTED, err.last_error)

    def _fail(self, event: ConnectionEvent, error: BaseException) -> None:
        """Enter FAILED and signal on_failure exactly once."""
        if self._failure is not None:
            return

        self._failure = error
        self._state_machine.transition(event)
        self._notifier.failed(error)

    @property
    def state(self) -> ConnectionState:
        """Get current supervisor state."""
        return self._state_machine.state

    @property
    def connection_state(self) -> str:
        """Get current state name.

        Returns:
            State: "idle", "waiting", "connecting", "connected",
                   "awaiting_ack", "failed"
        """
        return self._state_machine.state.name.lower()

    @property
    def is_connected(self) -> bool:
        """Check if a handle is live."""
        return self._state_machine.is_connected

    @property
    def handle(self) -> Any:
        """Get the live connection handle, or None."""
        return self._handle

    @property
    def failure(self) -> Optional[BaseException]:
        """Get the terminal error, or None if not failed."""
        return self._failure

    def get_status(self) -> Dict[str, Any]:
        """Get current supervisor diagnostics.

        Returns:
            Dictionary with supervisor statistics

        Example:
            >>> status = supervisor.get_status()
            >>> print(f"Episodes: {status['episodes']}")
        """
        budget = self._budget
        return {
            "state": self.connection_state,
            "episodes": self._episodes,
            "attempts_remaining": budget.remaining if budget else None,
            "attempts_made": budget.attempts_made if budget else 0,
            "failure": str(self._failure) if self._failure is not None else None,
        }

    def __repr__(self) -> str:
        """Developer representation."""
        return (
            f"ConnectionSupervisor(state={self.connection_state}, "
            f"episodes={self._episodes})"
        )
