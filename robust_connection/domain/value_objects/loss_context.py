"""LossContext value object.

Describes why and where an established connection broke.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LossContext:
    """Immutable record of one connection loss.

    Produced once per broken handle and passed to ``on_disconnect`` as
    ``(error, context)``.

    Attributes:
        error: The error reported by the provider
        context: Provider specific diagnostic data (e.g. BleLossContext)

    Example:
        >>> loss = LossContext(ConnectionLostError("gone"), {"address": "AA"})
        >>> str(loss)
        'LossContext(ConnectionLostError: gone)'
    """

    error: BaseException
    context: Any = None

    def __post_init__(self) -> None:
        """Validate error type.

        Raises:
            TypeError: If error is not an exception instance
        """
        if not isinstance(self.error, BaseException):
            raise TypeError(
                f"error must be an exception, got {type(self.error).__name__}"
            )

    def __str__(self) -> str:
        """String representation for logging."""
        return f"LossContext({type(self.error).__name__}: {self.error})"
