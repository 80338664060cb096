"""IFailureStrategy interface for terminal failure handling."""

from abc import ABC, abstractmethod


class IFailureStrategy(ABC):
    """Policy applied once when a supervisor fails permanently.

    Any plain callable taking the error is accepted as ``on_failure``;
    this interface names the strategies shipped with the package so they
    can be swapped without touching the supervisor.

    Example:
        >>> config = build_configuration(..., on_failure=LogOnlyStrategy())
    """

    @abstractmethod
    def __call__(self, error: BaseException) -> None:
        """Handle a permanent failure.

        Args:
            error: The error that made the failure permanent
        """
