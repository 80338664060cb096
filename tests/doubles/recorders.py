"""Recording doubles for hooks and sleeps.

These record what the supervisor did so tests can assert on hook order
and retry delays without real waiting.
"""

import asyncio
from typing import Any, Callable, List, Optional, Tuple


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays and only yields."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


class HookRecorder:
    """Records every lifecycle hook invocation in order.

    ``on_disconnect`` returns whatever ``ack_factory`` produces (None by
    default, i.e. an immediately resolved acknowledgement).
    """

    def __init__(self):
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.ack_factory: Optional[Callable[[], Any]] = None

    def on_connect(self, handle):
        self.calls.append(("connect", (handle,)))

    def on_disconnect(self, error, context):
        self.calls.append(("disconnect", (error, context)))
        if self.ack_factory is not None:
            return self.ack_factory()
        return None

    def on_retry_scheduled(self, delay, attempts_remaining):
        self.calls.append(("retry_scheduled", (delay, attempts_remaining)))

    def on_retry_failure(self, error, attempts_remaining):
        self.calls.append(("retry_failure", (error, attempts_remaining)))

    def on_failure(self, error):
        self.calls.append(("failure", (error,)))

    def args(self, name: str) -> List[Tuple[Any, ...]]:
        """Arguments of every call to hook name, in order."""
        return [args for hook, args in self.calls if hook == name]

    def count(self, name: str) -> int:
        return len(self.args(name))

    def names(self) -> List[str]:
        return [hook for hook, _ in self.calls]

    def hooks(self) -> dict:
        return {
            "on_connect": self.on_connect,
            "on_disconnect": self.on_disconnect,
            "on_retry_scheduled": self.on_retry_scheduled,
            "on_retry_failure": self.on_retry_failure,
            "on_failure": self.on_failure,
        }


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until predicate holds."""

    async def _poll():
        while not predicate():
            await asyncio.sleep(0)

    await asyncio.wait_for(_poll(), timeout=timeout)
