"""Domain interfaces for the robust connection supervisor.

Implementations of these contracts live in the infrastructure layer or are
supplied by the caller:
- IConnectionProvider: where connections come from and how loss is reported
- IFailureStrategy: what happens when recovery is no longer possible
"""

from .i_connection_provider import IConnectionProvider, LossCallback
from .i_failure_strategy import IFailureStrategy

__all__ = [
    "IConnectionProvider",
    "IFailureStrategy",
    "LossCallback",
]
