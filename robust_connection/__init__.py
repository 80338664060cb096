# Copyright (c) 2026 Robust Connection Contributors
# Licensed under the MIT License
# See LICENSE file for full license text

"""Robust persistent connections for asyncio applications.

A supervisor keeps exactly one logical connection alive on top of an
unreliable connection provider: it detects loss, retries with a fixed
delay and a bounded budget, and signals permanent failure once.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .config import Configuration, build_configuration
from .domain.entities import RetryBudget
from .domain.exceptions import (
    AcknowledgementCancelledError,
    ConnectionFailedError,
    ConnectionLostError,
    DeviceNotFoundError,
    InvalidConfigurationError,
    RetriesExhaustedError,
    RobustConnectionError,
    SupervisorStateError,
)
from .domain.interfaces import IConnectionProvider, IFailureStrategy
from .domain.value_objects import LossContext
from .infrastructure.failure_strategies import ExitProcessStrategy, LogOnlyStrategy
from .infrastructure.state_machines import ConnectionState
from .infrastructure.transport import (
    BleakConnectionProvider,
    BleLossContext,
    ConnectionSupervisor,
)

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "AcknowledgementCancelledError",
    "BleakConnectionProvider",
    "BleLossContext",
    "Configuration",
    "ConnectionFailedError",
    "ConnectionLostError",
    "ConnectionState",
    "ConnectionSupervisor",
    "DeviceNotFoundError",
    "ExitProcessStrategy",
    "IConnectionProvider",
    "IFailureStrategy",
    "InvalidConfigurationError",
    "LogOnlyStrategy",
    "LossContext",
    "RetriesExhaustedError",
    "RetryBudget",
    "RobustConnectionError",
    "SupervisorStateError",
    "build_configuration",
    "robust_connection",
]


async def robust_connection(
    provider: IConnectionProvider,
    on_connect: Callable[[Any], Any],
    on_disconnect: Callable[[BaseException, Any], Any],
    **options: Any,
) -> Any:
    """Start a supervised connection and wait for the initial outcome.

    Args:
        provider: Source of connection attempts and loss notifications
        on_connect: Called with the handle on every (re)connect
        on_disconnect: Called with (error, context) when the connection is
            lost; an awaitable result gates reconnection
        **options: Remaining Configuration fields (on_retry_scheduled,
            on_retry_failure, on_failure, retry_interval, retry_attempts,
            initial_attempts, initial_delay)

    Returns:
        The initial connection handle, after on_connect ran. Later
        reconnections are only visible through the hooks.

    Raises:
        InvalidConfigurationError: If options are invalid
        ConnectionFailedError: If the initial connection failed permanently

    Example:
        >>> client = await robust_connection(
        ...     BleakConnectionProvider("AA:BB:CC:DD:EE:FF"),
        ...     on_connect=subscribe,
        ...     on_disconnect=pause_processing,
        ...     retry_attempts=5,
        ... )
    """
    config = build_configuration(
        provider=provider,
        on_connect=on_connect,
        on_disconnect=on_disconnect,
        **options,
    )
    supervisor = ConnectionSupervisor(config)
    _LOGGER.debug("Starting %r", supervisor)
    return await supervisor.start()
