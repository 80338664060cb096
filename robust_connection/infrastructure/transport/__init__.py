"""Connection supervision and provider implementations.

This module contains the supervisor that keeps one logical connection
alive and the Bluetooth LE provider it can run on.
"""

from .ble_provider import BleakConnectionProvider, BleLossContext
from .connection_supervisor import ConnectionSupervisor

__all__ = [
    "BleakConnectionProvider",
    "BleLossContext",
    "ConnectionSupervisor",
]
