"""Infrastructure layer decorators."""

from .error_handler import handle_hook_errors, handle_provider_errors

__all__ = [
    "handle_hook_errors",
    "handle_provider_errors",
]
