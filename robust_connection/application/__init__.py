"""Application layer for the robust connection supervisor.

The application layer orchestrates domain objects on behalf of the
supervisor. It depends on the domain layer and on the configuration.
"""
