"""Terminal failure strategies.

A supervisor that can no longer recover hands its final error to exactly
one strategy. The default terminates the process so the application is
never left running without its connection; restart is the job of an
external process supervisor (systemd, Kubernetes, supervisord).
"""

import logging
import os
from typing import Optional

from ..const import DEFAULT_EXIT_CODE
from ..domain.interfaces import IFailureStrategy

_LOGGER = logging.getLogger(__name__)


class ExitProcessStrategy(IFailureStrategy):
    """Terminate the process immediately on permanent failure.

    Uses ``os._exit`` so no cleanup handlers, ``finally`` blocks or
    pending tasks run; log handlers are flushed first so the reason is
    not lost.

    Attributes:
        exit_code: Process exit status

    Example:
        >>> config = build_configuration(..., on_failure=ExitProcessStrategy(2))
    """

    def __init__(self, exit_code: int = DEFAULT_EXIT_CODE):
        """Initialize strategy.

        Args:
            exit_code: Process exit status (default: 1)
        """
        self.exit_code = exit_code

    def __call__(self, error: BaseException) -> None:
        """Log the failure and exit the process."""
        _LOGGER.critical(
            "Connection failed permanently, terminating process (exit code %d): %s",
            self.exit_code,
            error,
        )
        for handler in logging.getLogger().handlers:
            handler.flush()
        os._exit(self.exit_code)

    def __repr__(self) -> str:
        """Developer representation."""
        return f"ExitProcessStrategy(exit_code={self.exit_code})"


class LogOnlyStrategy(IFailureStrategy):
    """Log the permanent failure and keep the process running.

    Example:
        >>> strategy = LogOnlyStrategy(level=logging.WARNING)
        >>> strategy(ConnectionLostError("gone"))
    """

    def __init__(
        self, logger: Optional[logging.Logger] = None, level: int = logging.ERROR
    ):
        """Initialize strategy.

        Args:
            logger: Logger to write to (defaults to this module's logger)
            level: Log level for the failure record
        """
        self._logger = logger or _LOGGER
        self._level = level

    def __call__(self, error: BaseException) -> None:
        """Log the failure."""
        self._logger.log(self._level, "Connection failed permanently: %s", error)

    def __repr__(self) -> str:
        """Developer representation."""
        return f"LogOnlyStrategy(level={logging.getLevelName(self._level)})"
