"""Error handling decorators for standardized exception handling."""

import asyncio
import inspect
import logging
from functools import wraps
from typing import Callable, Optional

from bleak.exc import BleakError

from ...domain.exceptions import DeviceNotFoundError


def handle_provider_errors(
    operation_name: str,
    logger: Optional[logging.Logger] = None,
):
    """Decorator for standardized provider error logging.

    Logs the failure of an async provider operation at a level matching
    its kind and re-raises it, so the retry scheduler sees every failed
    attempt.

    Args:
        operation_name: Human-readable operation name for logging
        logger: Logger to use (defaults to function's module logger)

    Example:
        @handle_provider_errors("BLE connect")
        async def connect(self, on_lost):
            return await establish_connection(...)
    """

    def decorator(func: Callable):
        log = logger or logging.getLogger(func.__module__)

        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except asyncio.TimeoutError as err:
                log.warning("%s timed out: %s", operation_name, err)
                raise
            except DeviceNotFoundError as err:
                # Expected while a device is out of range - no stack trace
                log.warning("%s device not found: %s", operation_name, err)
                raise
            except BleakError as err:
                log.error("%s BLE error: %s", operation_name, err)
                raise
            except Exception as err:
                log.error(
                    "%s unexpected error: %s",
                    operation_name,
                    err,
                    exc_info=True,
                )
                raise

        return wrapper

    return decorator


def handle_hook_errors(
    hook_name: str,
    logger: Optional[logging.Logger] = None,
):
    """Decorator isolating a caller-supplied lifecycle hook.

    Exceptions raised by the hook are logged with a traceback and
    swallowed, so a faulty hook cannot change supervisor control flow.
    ``async def`` hooks get an async wrapper that does the same when the
    coroutine is awaited.

    Args:
        hook_name: Hook name for logging (e.g. "on_connect")
        logger: Logger to use (defaults to this module's logger)

    Example:
        >>> guarded = handle_hook_errors("on_connect")(user_callback)
        >>> guarded(handle)  # never raises
    """
    log = logger or logging.getLogger(__name__)

    def decorator(func: Callable):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as err:
                log.error("Error in %s hook: %s", hook_name, err, exc_info=True)
                return None

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as err:
                log.error("Error in %s hook: %s", hook_name, err, exc_info=True)
                return None

        return async_wrapper if inspect.iscoroutinefunction(func) else sync_wrapper

    return decorator
