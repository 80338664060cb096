"""State machines for managing supervisor state transitions."""

from .connection_state_machine import (
    ConnectionStateMachine,
    ConnectionState,
    ConnectionEvent,
)

__all__ = [
    "ConnectionStateMachine",
    "ConnectionState",
    "ConnectionEvent",
]
