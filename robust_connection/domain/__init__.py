"""Domain layer for the robust connection supervisor.

This layer contains:
- Interfaces: contracts for connection providers and failure strategies
- Entities: the per-episode retry budget
- Value Objects: the loss context
- Exceptions: the error taxonomy

The domain layer has no dependencies outside the standard library.
"""
