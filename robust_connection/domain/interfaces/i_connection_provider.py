"""IConnectionProvider interface for connection provider implementations."""

from abc import ABC, abstractmethod
from typing import Any, Callable

LossCallback = Callable[[BaseException, Any], None]


class IConnectionProvider(ABC):
    """Interface for the collaborator that establishes connections.

    The provider owns everything protocol specific: opening the socket or
    session, and detecting that an open one broke. The supervisor only
    asks it for a handle and listens for loss.

    Contract:
        1. connect(on_lost) resolves to an opaque handle or raises
        2. for every handle it returned, the provider calls
           ``on_lost(error, context)`` at most once, when that handle breaks
        3. the provider never reports loss for a handle it did not return

    Example:
        >>> provider = BleakConnectionProvider("AA:BB:CC:DD:EE:FF")
        >>> handle = await provider.connect(on_lost=lambda err, ctx: ...)
    """

    @abstractmethod
    async def connect(self, on_lost: LossCallback) -> Any:
        """Establish one connection.

        Args:
            on_lost: Callback to invoke once if the returned handle breaks.
                May be called from any thread.

        Returns:
            Opaque connection handle

        Raises:
            Exception: Any error means this attempt failed
        """
