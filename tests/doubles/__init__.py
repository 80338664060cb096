"""Test doubles for unit testing.

Test doubles are fake implementations of interfaces used for testing.
They're faster and more reliable than mocking, and they implement the
actual interface contracts.

We primarily use Fakes because they:
- Actually implement the interface
- Can be reused across many tests
- Provide realistic behavior

Example:
    >>> from tests.doubles import FakeConnectionProvider
    >>> provider = FakeConnectionProvider()
    >>> provider.fail_next_connect(times=2)
    >>> handle = await provider.connect(on_lost)  # raises twice, then succeeds
"""

from .fake_provider import FakeConnectionProvider
from .recorders import HookRecorder, RecordingSleep, wait_until

__all__ = [
    "FakeConnectionProvider",
    "HookRecorder",
    "RecordingSleep",
    "wait_until",
]
