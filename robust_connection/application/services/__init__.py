"""Application services for the robust connection supervisor.

This module contains services that coordinate domain objects:
- RetryScheduler: fixed-delay attempt loop over a RetryBudget
- LifecycleNotifier: dispatch of caller lifecycle hooks
"""

from .lifecycle_notifier import LifecycleNotifier
from .retry_scheduler import RetryScheduler

__all__ = [
    "LifecycleNotifier",
    "RetryScheduler",
]
