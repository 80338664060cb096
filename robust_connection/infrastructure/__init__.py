"""Infrastructure layer for the robust connection supervisor.

The infrastructure layer contains:
- The supervisor state machine
- The connection supervisor itself
- Connection provider implementations (Bluetooth LE via bleak)
- Terminal failure strategies
- Error handling decorators

This layer depends on the domain and application layers and on external
libraries (bleak, bleak-retry-connector).
"""
