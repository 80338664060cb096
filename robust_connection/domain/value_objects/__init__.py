"""Value Objects for the robust connection domain.

Value Objects are immutable, compare by value and validate themselves at
construction.
"""

from .loss_context import LossContext

__all__ = [
    "LossContext",
]
