"""Lifecycle notifier service.

Dispatches the five caller hooks. Only ``on_disconnect`` can influence
control flow: its acknowledgement is awaited and a raised or rejected
acknowledgement is propagated. Every other hook is fire-and-forget.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Set

from ...config import Configuration
from ...const import (
    CONF_ON_CONNECT,
    CONF_ON_FAILURE,
    CONF_ON_RETRY_FAILURE,
    CONF_ON_RETRY_SCHEDULED,
)
from ...domain.exceptions import AcknowledgementCancelledError
from ...domain.value_objects import LossContext
from ...infrastructure.decorators import handle_hook_errors

_LOGGER = logging.getLogger(__name__)


class LifecycleNotifier:
    """Invokes caller hooks with the documented guarantees.

    Fire-and-forget hooks:
    - Exceptions are logged, never propagated
    - Awaitable results are scheduled as tasks and not awaited
    - Unset optional hooks are no-ops

    Example:
        >>> notifier = LifecycleNotifier(config)
        >>> notifier.connected(handle)
        >>> await notifier.disconnected(LossContext(error, context))
    """

    def __init__(self, config: Configuration):
        """Initialize notifier from configuration.

        Args:
            config: Supervisor configuration holding the hooks
        """
        self._on_connect = self._guard(CONF_ON_CONNECT, config.on_connect)
        self._on_disconnect = config.on_disconnect
        self._on_retry_scheduled = self._guard(
            CONF_ON_RETRY_SCHEDULED, config.on_retry_scheduled
        )
        self._on_retry_failure = self._guard(
            CONF_ON_RETRY_FAILURE, config.on_retry_failure
        )
        self._on_failure = self._guard(CONF_ON_FAILURE, config.on_failure)

        # Strong references so scheduled hook tasks are not garbage collected
        self._pending: Set[asyncio.Future] = set()

    @staticmethod
    def _guard(name: str, hook: Optional[Callable]) -> Optional[Callable]:
        if hook is None:
            return None
        return handle_hook_errors(name, logger=_LOGGER)(hook)

    @property
    def pending(self) -> int:
        """Number of asynchronous hook results still running."""
        return len(self._pending)

    def connected(self, handle: Any) -> None:
        """Dispatch ``on_connect(handle)``."""
        self._fire(self._on_connect, handle)

    async def disconnected(self, loss: LossContext) -> Any:
        """Dispatch ``on_disconnect(error, context)`` and await its acknowledgement.

        Args:
            loss: What broke and why

        Returns:
            The acknowledgement value (awaited if it was awaitable)

        Raises:
            AcknowledgementCancelledError: If the acknowledgement itself was
                cancelled
            Exception: Whatever the hook raised or its acknowledgement
                rejected with; the caller treats this as permanent failure
        """
        ack = self._on_disconnect(loss.error, loss.context)
        if not inspect.isawaitable(ack):
            return ack

        future = asyncio.ensure_future(ack)
        try:
            # future is only cancelled here if the acknowledgement itself was
            return await asyncio.shield(future)
        except asyncio.CancelledError:
            if not future.cancelled():
                future.cancel()
                raise
            raise AcknowledgementCancelledError(
                "on_disconnect acknowledgement was cancelled"
            ) from None

    def retry_scheduled(self, delay: float, attempts_remaining: int) -> None:
        """Dispatch ``on_retry_scheduled(delay, attempts_remaining)``."""
        self._fire(self._on_retry_scheduled, delay, attempts_remaining)

    def retry_failed(self, error: BaseException, attempts_remaining: int) -> None:
        """Dispatch ``on_retry_failure(error, attempts_remaining)``."""
        self._fire(self._on_retry_failure, error, attempts_remaining)

    def failed(self, error: BaseException) -> None:
        """Dispatch ``on_failure(error)``."""
        self._fire(self._on_failure, error)

    async def drain(self) -> None:
        """Wait for all scheduled asynchronous hook results to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _fire(self, hook: Optional[Callable], *args: Any) -> None:
        """Invoke hook without letting its outcome affect the caller."""
        if hook is None:
            return

        result = hook(*args)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._pending.add(task)
            task.add_done_callback(self._hook_done)

    def _hook_done(self, task: asyncio.Future) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return

        err = task.exception()
        if err is not None:
            _LOGGER.error(
                "Error in asynchronous hook: %s",
                err,
                exc_info=(type(err), err, err.__traceback__),
            )
