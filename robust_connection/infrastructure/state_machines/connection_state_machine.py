"""Connection state machine for explicit supervisor state management."""

import logging
from enum import Enum, auto
from typing import Callable, Dict, Optional

_LOGGER = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Supervisor states."""

    IDLE = auto()
    WAITING = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    AWAITING_ACK = auto()
    FAILED = auto()


class ConnectionEvent(Enum):
    """Events that trigger state transitions."""

    START = auto()
    DELAY_ELAPSED = auto()
    CONNECT_SUCCESS = auto()
    CONNECT_FAILED = auto()
    RETRIES_EXHAUSTED = auto()
    CONNECTION_LOST = auto()
    ACK_RESOLVED = auto()
    ACK_REJECTED = auto()


class ConnectionStateMachine:
    """State machine for the reconnection supervisor.

    WAITING covers the fixed delay announced before every attempt.
    FAILED is terminal: no event leaves it.

    Valid transitions:
        IDLE -> WAITING (on START)
        WAITING -> CONNECTING (on DELAY_ELAPSED)
        CONNECTING -> CONNECTED (on CONNECT_SUCCESS)
        CONNECTING -> WAITING (on CONNECT_FAILED with attempts remaining)
        CONNECTING -> FAILED (on RETRIES_EXHAUSTED)
        CONNECTED -> AWAITING_ACK (on CONNECTION_LOST)
        AWAITING_ACK -> WAITING (on ACK_RESOLVED)
        AWAITING_ACK -> FAILED (on ACK_REJECTED)

    Example:
        >>> sm = ConnectionStateMachine()
        >>> sm.transition(ConnectionEvent.START)
        True
        >>> sm.state
        <ConnectionState.WAITING: 2>
        >>> sm.transition(ConnectionEvent.CONNECT_SUCCESS)
        False
    """

    def __init__(self):
        """Initialize state machine in IDLE state."""
        self._state = ConnectionState.IDLE
        self._previous_state: Optional[ConnectionState] = None

        # Callbacks for state entry
        self._on_state_change: Dict[ConnectionState, Callable] = {}

        # Valid transitions: (current_state, event) -> new_state
        self._transitions = {
            (ConnectionState.IDLE, ConnectionEvent.START): ConnectionState.WAITING,
            (
                ConnectionState.WAITING,
                ConnectionEvent.DELAY_ELAPSED,
            ): ConnectionState.CONNECTING,
            (
                ConnectionState.CONNECTING,
                ConnectionEvent.CONNECT_SUCCESS,
            ): ConnectionState.CONNECTED,
            (
                ConnectionState.CONNECTING,
                ConnectionEvent.CONNECT_FAILED,
            ): ConnectionState.WAITING,
            (
                ConnectionState.CONNECTING,
                ConnectionEvent.RETRIES_EXHAUSTED,
            ): ConnectionState.FAILED,
            (
                ConnectionState.CONNECTED,
                ConnectionEvent.CONNECTION_LOST,
            ): ConnectionState.AWAITING_ACK,
            (
                ConnectionState.AWAITING_ACK,
                ConnectionEvent.ACK_RESOLVED,
            ): ConnectionState.WAITING,
            (
                ConnectionState.AWAITING_ACK,
                ConnectionEvent.ACK_REJECTED,
            ): ConnectionState.FAILED,
        }

    @property
    def state(self) -> ConnectionState:
        """Get current state."""
        return self._state

    @property
    def previous_state(self) -> Optional[ConnectionState]:
        """Get the state before the last transition."""
        return self._previous_state

    @property
    def is_connected(self) -> bool:
        """Check if a handle is live."""
        return self._state == ConnectionState.CONNECTED

    @property
    def is_connecting(self) -> bool:
        """Check if an episode is in progress."""
        return self._state in (
            ConnectionState.WAITING,
            ConnectionState.CONNECTING,
            ConnectionState.AWAITING_ACK,
        )

    @property
    def is_terminal(self) -> bool:
        """Check if the machine reached FAILED."""
        return self._state == ConnectionState.FAILED

    def can_handle(self, event: ConnectionEvent) -> bool:
        """Check whether event is valid in the current state.

        Args:
            event: Event to check

        Returns:
            True if transition(event) would succeed
        """
        return (self._state, event) in self._transitions

    def transition(self, event: ConnectionEvent) -> bool:
        """Attempt state transition.

        Args:
            event: Event triggering transition

        Returns:
            True if transition valid and executed, False otherwise

        Example:
            >>> sm = ConnectionStateMachine()
            >>> sm.transition(ConnectionEvent.START)
            True
            >>> sm.state.name
            'WAITING'
        """
        key = (self._state, event)

        if key not in self._transitions:
            _LOGGER.debug(
                "Invalid transition: %s + %s",
                self._state.name,
                event.name,
            )
            return False

        new_state = self._transitions[key]
        self._change_state(new_state, event)
        return True

    def _change_state(self, new_state: ConnectionState, event: ConnectionEvent):
        """Change to new state and invoke callbacks.

        Args:
            new_state: State to transition to
            event: Event that triggered transition
        """
        self._previous_state = self._state
        self._state = new_state

        _LOGGER.debug(
            "Connection state: %s -> %s (event: %s)",
            self._previous_state.name,
            new_state.name,
            event.name,
        )

        if new_state in self._on_state_change:
            try:
                self._on_state_change[new_state]()
            except Exception as err:
                _LOGGER.error("Error in state change callback: %s", err)

    def on_state(self, state: ConnectionState, callback: Callable):
        """Register callback for state entry.

        Args:
            state: State to watch
            callback: Function to call on state entry (no args)

        Example:
            >>> sm = ConnectionStateMachine()
            >>> sm.on_state(ConnectionState.CONNECTED, lambda: print("Connected!"))
        """
        self._on_state_change[state] = callback

    def __str__(self) -> str:
        """String representation."""
        return f"ConnectionStateMachine(state={self._state.name})"

    def __repr__(self) -> str:
        """Developer representation."""
        return f"ConnectionStateMachine(state={self._state!r}, previous={self._previous_state!r})"
