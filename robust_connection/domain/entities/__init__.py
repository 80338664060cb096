"""Domain entities for the robust connection supervisor.

Entities hold mutable state with a lifecycle, unlike value objects.
"""

from .retry_budget import RetryBudget

__all__ = [
    "RetryBudget",
]
