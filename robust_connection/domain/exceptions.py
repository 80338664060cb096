"""Custom exceptions for the robust connection supervisor.

This module defines the error taxonomy of the supervisor:

- Transient connect failures never surface as exceptions; they are
  reported through ``on_retry_failure`` and retried.
- Loss errors are reported by providers (``ConnectionLostError``) and
  handed to ``on_disconnect``.
- Permanent failures are reported once through ``on_failure`` and, for
  the initial connection only, raised from ``start()`` as
  ``ConnectionFailedError``.
"""

from typing import Optional


class RobustConnectionError(Exception):
    """Base class for all errors raised by this package."""


class InvalidConfigurationError(RobustConnectionError, ValueError):
    """Configuration options failed validation.

    Example:
        >>> build_configuration(provider=p, on_connect=f, on_disconnect=g,
        ...                     retry_attempts=-1)
        Traceback (most recent call last):
        InvalidConfigurationError: ...
    """


class SupervisorStateError(RobustConnectionError, RuntimeError):
    """Supervisor used in a way its current state does not allow."""


class RetriesExhaustedError(RobustConnectionError):
    """Retry budget ran out before a connection was established.

    Attributes:
        last_error: Error raised by the final attempt
        attempts_made: Number of attempts made in the episode
    """

    def __init__(self, last_error: BaseException, attempts_made: int):
        super().__init__(
            f"Connection failed after {attempts_made} attempt(s): {last_error}"
        )
        self.last_error = last_error
        self.attempts_made = attempts_made


class ConnectionFailedError(RobustConnectionError):
    """Initial connection failed permanently.

    Raised from ``ConnectionSupervisor.start()`` after ``on_failure`` ran.
    The error passed to ``on_failure`` is available as ``cause`` and is
    also chained as ``__cause__``.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ConnectionLostError(RobustConnectionError):
    """An established connection broke."""


class DeviceNotFoundError(RobustConnectionError):
    """Device to connect to could not be discovered."""


class AcknowledgementCancelledError(RobustConnectionError):
    """The awaitable returned by ``on_disconnect`` was cancelled.

    A cancelled acknowledgement neither resolved nor rejected, so the
    supervisor treats it as a rejection and fails permanently.
    """
