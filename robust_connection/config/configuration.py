"""Supervisor configuration.

Caller options are validated and defaulted exactly once, by
``build_configuration()``, into an immutable ``Configuration``. The
supervisor only ever reads that value, so one configuration can be shared
by several supervisors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import voluptuous as vol

from ..const import (
    CONF_INITIAL_ATTEMPTS,
    CONF_INITIAL_DELAY,
    CONF_ON_CONNECT,
    CONF_ON_DISCONNECT,
    CONF_ON_FAILURE,
    CONF_ON_RETRY_FAILURE,
    CONF_ON_RETRY_SCHEDULED,
    CONF_PROVIDER,
    CONF_RETRY_ATTEMPTS,
    CONF_RETRY_INTERVAL,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_INTERVAL,
    OPTIONAL_HOOKS,
    REQUIRED_HOOKS,
)
from ..domain.exceptions import InvalidConfigurationError
from ..infrastructure.failure_strategies import ExitProcessStrategy

_LOGGER = logging.getLogger(__name__)


def _callable(value: Any) -> Callable:
    """Validate that value is callable."""
    if not callable(value):
        raise vol.Invalid(f"expected a callable, got {type(value).__name__}")
    return value


def _provider(value: Any) -> Any:
    """Validate that value looks like a connection provider."""
    if not callable(getattr(value, "connect", None)):
        raise vol.Invalid("provider must have a callable connect(on_lost) method")
    return value


def _count(value: Any) -> int:
    """Validate that value is an int, rejecting bool."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise vol.Invalid(f"expected int, got {type(value).__name__}")
    return value


def _seconds(value: Any) -> float:
    """Validate that value is a number of seconds, rejecting bool."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise vol.Invalid(f"expected a number, got {type(value).__name__}")
    return float(value)


_NON_NEGATIVE_SECONDS = vol.All(_seconds, vol.Range(min=0))
_NON_NEGATIVE_COUNT = vol.All(_count, vol.Range(min=0))


def _check_range(name: str, value: Any, validator: Callable) -> None:
    """Raise InvalidConfigurationError unless value is a valid non-negative field."""
    try:
        validator(value)
    except vol.Invalid as err:
        raise InvalidConfigurationError(f"{name}: {err}") from err

    if value < 0:
        raise InvalidConfigurationError(f"{name} must be >= 0, got {value}")


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_PROVIDER): _provider,
        vol.Required(CONF_ON_CONNECT): _callable,
        vol.Required(CONF_ON_DISCONNECT): _callable,
        vol.Optional(CONF_ON_RETRY_SCHEDULED, default=None): vol.Any(
            None, _callable
        ),
        vol.Optional(CONF_ON_RETRY_FAILURE, default=None): vol.Any(None, _callable),
        # A callable default is a factory: every configuration gets its own
        vol.Optional(CONF_ON_FAILURE, default=ExitProcessStrategy): _callable,
        vol.Optional(
            CONF_RETRY_INTERVAL, default=DEFAULT_RETRY_INTERVAL
        ): _NON_NEGATIVE_SECONDS,
        vol.Optional(
            CONF_RETRY_ATTEMPTS, default=DEFAULT_RETRY_ATTEMPTS
        ): _NON_NEGATIVE_COUNT,
        vol.Optional(CONF_INITIAL_ATTEMPTS, default=None): vol.Any(
            None, _NON_NEGATIVE_COUNT
        ),
        vol.Optional(
            CONF_INITIAL_DELAY, default=DEFAULT_INITIAL_DELAY
        ): _NON_NEGATIVE_SECONDS,
    }
)


@dataclass(frozen=True)
class Configuration:
    """Immutable supervisor configuration.

    Attributes:
        provider: Source of connection attempts and loss notifications
        on_connect: Called with the handle on every successful (re)connect
        on_disconnect: Called with (error, context) on loss; may return an
            awaitable acknowledgement that gates the reconnection episode
        on_retry_scheduled: Called with (delay, attempts_remaining) before
            each wait
        on_retry_failure: Called with (error, attempts_remaining) after each
            failed attempt
        on_failure: Called once with the error on permanent failure
        retry_interval: Fixed wait between attempts, in seconds
        retry_attempts: Attempts per reconnection episode
        initial_attempts: Attempts for the initial connection; None means
            the same as retry_attempts
        initial_delay: Wait before the very first attempt, in seconds

    Example:
        >>> config = Configuration(provider, on_connect, on_disconnect,
        ...                        retry_interval=0.5, retry_attempts=3)
        >>> config.effective_initial_attempts
        3
    """

    provider: Any
    on_connect: Callable
    on_disconnect: Callable
    on_retry_scheduled: Optional[Callable] = None
    on_retry_failure: Optional[Callable] = None
    on_failure: Callable = field(default_factory=ExitProcessStrategy)
    retry_interval: float = DEFAULT_RETRY_INTERVAL
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    initial_attempts: Optional[int] = None
    initial_delay: float = DEFAULT_INITIAL_DELAY

    def __post_init__(self) -> None:
        """Validate configuration invariants.

        Raises:
            InvalidConfigurationError: If any field is out of range or a
                hook is not callable
        """
        try:
            _provider(self.provider)
        except vol.Invalid as err:
            raise InvalidConfigurationError(str(err)) from err

        for name in REQUIRED_HOOKS:
            if not callable(getattr(self, name)):
                raise InvalidConfigurationError(f"{name} must be callable")

        for name in OPTIONAL_HOOKS:
            hook = getattr(self, name)
            if hook is not None and not callable(hook):
                raise InvalidConfigurationError(f"{name} must be callable or None")

        for name in (CONF_RETRY_INTERVAL, CONF_INITIAL_DELAY):
            _check_range(name, getattr(self, name), _seconds)

        _check_range(CONF_RETRY_ATTEMPTS, self.retry_attempts, _count)
        if self.initial_attempts is not None:
            _check_range(CONF_INITIAL_ATTEMPTS, self.initial_attempts, _count)

    @property
    def effective_initial_attempts(self) -> int:
        """Attempts permitted for the initial connection episode."""
        if self.initial_attempts is None:
            return self.retry_attempts
        return self.initial_attempts


def build_configuration(**options: Any) -> Configuration:
    """Validate caller options and fill in defaults.

    Args:
        **options: Configuration fields (see ``Configuration``)

    Returns:
        Immutable Configuration

    Raises:
        InvalidConfigurationError: If options are missing, unknown or invalid

    Example:
        >>> config = build_configuration(
        ...     provider=provider,
        ...     on_connect=on_connect,
        ...     on_disconnect=on_disconnect,
        ...     retry_attempts=5,
        ... )
        >>> config.retry_interval
        1.0
    """
    try:
        validated = CONFIG_SCHEMA(options)
    except vol.Invalid as err:
        raise InvalidConfigurationError(f"Invalid configuration: {err}") from err

    config = Configuration(**validated)
    _LOGGER.debug(
        "Configuration built: retry_interval=%.3fs, retry_attempts=%d, "
        "initial_attempts=%d, initial_delay=%.3fs",
        config.retry_interval,
        config.retry_attempts,
        config.effective_initial_attempts,
        config.initial_delay,
    )
    return config
