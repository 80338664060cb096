"""Bluetooth LE connection provider.

This module implements the IConnectionProvider interface on top of bleak
and bleak-retry-connector. Each successful connect() returns a connected
BleakClient; an unrequested disconnect of that client is reported to the
supervisor exactly once.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from bleak import BleakClient, BleakScanner
from bleak.exc import BleakError
from bleak_retry_connector import (
    asyncio_timeout,
    close_stale_connections_by_address,
    establish_connection,
)

from ...const import BLE_CONNECTION_TIMEOUT, BLE_DISCONNECT_TIMEOUT, BLE_SCAN_TIMEOUT
from ...domain.exceptions import ConnectionLostError, DeviceNotFoundError
from ...domain.interfaces import IConnectionProvider, LossCallback
from ..decorators import handle_provider_errors

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BleLossContext:
    """Diagnostic context for a lost BLE connection.

    Attributes:
        address: Device address
        client: The BleakClient that disconnected
        disconnected_at: When the disconnect callback fired
    """

    address: str
    client: Any
    disconnected_at: datetime = field(default_factory=datetime.now)


class _DisconnectListener:
    """Bleak disconnected_callback for one client.

    Translates Bleak's callback into at most one loss report and stays
    silent for disconnects requested through the provider.
    """

    def __init__(
        self, address: str, on_lost: LossCallback, forget: Callable[[Any], None]
    ):
        self._address = address
        self._on_lost = on_lost
        self._forget = forget
        self.expected = False
        self.reported = False

    def __call__(self, client: Any) -> None:
        if self.expected or self.reported:
            _LOGGER.debug(
                "Disconnect of %s not reported (expected=%s, reported=%s)",
                self._address,
                self.expected,
                self.reported,
            )
            return

        self.reported = True
        self._forget(client)
        _LOGGER.warning("BLE device %s disconnected unexpectedly", self._address)
        self._on_lost(
            ConnectionLostError(f"BLE device {self._address} disconnected"),
            BleLossContext(address=self._address, client=client),
        )


class BleakConnectionProvider(IConnectionProvider):
    """Connection provider for a single Bluetooth LE device.

    Connection Pattern:
        1. Close stale connections left over for the address
        2. Scan for the device (DeviceNotFoundError if absent)
        3. establish_connection() with a single attempt; retrying is
           the supervisor's job

    Attributes:
        _address: Device BLE MAC address (or platform UUID on macOS)
        _name: Name used in bleak-retry-connector log messages
        _scan_timeout: Seconds to scan for the device
        _connect_timeout: Seconds allowed for establishing the connection
        _listeners: Disconnect listeners keyed by client id

    Example:
        >>> provider = BleakConnectionProvider("AA:BB:CC:DD:EE:FF")
        >>> client = await provider.connect(on_lost=report)
        >>> await provider.close(client)
    """

    def __init__(
        self,
        address: str,
        name: Optional[str] = None,
        scan_timeout: float = BLE_SCAN_TIMEOUT,
        connect_timeout: float = BLE_CONNECTION_TIMEOUT,
    ):
        """Initialize BLE provider.

        Args:
            address: Device address to connect to
            name: Human-readable device name (default: address)
            scan_timeout: Seconds to scan for the device
            connect_timeout: Seconds allowed for the connection
        """
        self._address = address
        self._name = name or address
        self._scan_timeout = scan_timeout
        self._connect_timeout = connect_timeout
        self._listeners: Dict[int, _DisconnectListener] = {}

    def _forget(self, client: Any) -> None:
        self._listeners.pop(id(client), None)

    @property
    def address(self) -> str:
        """Get device address."""
        return self._address

    @handle_provider_errors("BLE connect")
    async def connect(self, on_lost: LossCallback) -> BleakClient:
        """Connect to the BLE device.

        Args:
            on_lost: Called once with (ConnectionLostError, BleLossContext)
                if the returned client disconnects unexpectedly

        Returns:
            Connected BleakClient

        Raises:
            DeviceNotFoundError: If the device is not discovered
            BleakError: If the connection fails
            asyncio.TimeoutError: If the connection takes too long
        """
        _LOGGER.debug("Closing stale connections for %s", self._address)
        await close_stale_connections_by_address(self._address)

        device = await BleakScanner.find_device_by_address(
            self._address, timeout=self._scan_timeout
        )
        if device is None:
            raise DeviceNotFoundError(
                f"BLE device {self._address} not found after "
                f"{self._scan_timeout:.1f}s scan"
            )

        listener = _DisconnectListener(self._address, on_lost, self._forget)

        _LOGGER.debug("Connecting to BLE device %s", self._address)
        async with asyncio_timeout(self._connect_timeout):
            client = await establish_connection(
                BleakClient,
                device,
                self._name,
                disconnected_callback=listener,
                max_attempts=1,
            )

        if not client.is_connected:
            raise BleakError(f"BLE device {self._address} not connected after setup")

        self._listeners[id(client)] = listener
        _LOGGER.info("BLE provider connected to %s", self._address)
        return client

    async def close(self, client: BleakClient) -> None:
        """Disconnect a client without reporting it as lost.

        Safe to call more than once and after the client already dropped.

        Args:
            client: Client returned by connect()
        """
        listener = self._listeners.pop(id(client), None)
        if listener is not None:
            listener.expected = True

        try:
            if client.is_connected:
                await asyncio.wait_for(
                    client.disconnect(), timeout=BLE_DISCONNECT_TIMEOUT
                )
                _LOGGER.debug("BLE connection to %s closed", self._address)
        except (BleakError, asyncio.TimeoutError) as err:
            _LOGGER.warning("Error during disconnect from %s: %s", self._address, err)
