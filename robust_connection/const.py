"""Constants for the robust connection supervisor.

Only defaults and names shared across layers live here.
"""

from __future__ import annotations

from typing import Final

# Retry defaults (seconds / attempts)
DEFAULT_RETRY_INTERVAL: Final[float] = 1.0
DEFAULT_RETRY_ATTEMPTS: Final[int] = 10
DEFAULT_INITIAL_DELAY: Final[float] = 0.0

# Terminal failure
DEFAULT_EXIT_CODE: Final[int] = 1

# BLE provider timing (seconds)
BLE_SCAN_TIMEOUT: Final[float] = 10.0
BLE_CONNECTION_TIMEOUT: Final[float] = 20.0
BLE_DISCONNECT_TIMEOUT: Final[float] = 5.0

# Configuration keys
CONF_PROVIDER = "provider"
CONF_ON_CONNECT = "on_connect"
CONF_ON_DISCONNECT = "on_disconnect"
CONF_ON_RETRY_SCHEDULED = "on_retry_scheduled"
CONF_ON_RETRY_FAILURE = "on_retry_failure"
CONF_ON_FAILURE = "on_failure"
CONF_RETRY_INTERVAL = "retry_interval"
CONF_RETRY_ATTEMPTS = "retry_attempts"
CONF_INITIAL_ATTEMPTS = "initial_attempts"
CONF_INITIAL_DELAY = "initial_delay"

REQUIRED_HOOKS: Final[tuple[str, ...]] = (CONF_ON_CONNECT, CONF_ON_DISCONNECT)
OPTIONAL_HOOKS: Final[tuple[str, ...]] = (
    CONF_ON_RETRY_SCHEDULED,
    CONF_ON_RETRY_FAILURE,
    CONF_ON_FAILURE,
)
