"""Configuration for the robust connection supervisor."""

from .configuration import CONFIG_SCHEMA, Configuration, build_configuration

__all__ = [
    "CONFIG_SCHEMA",
    "Configuration",
    "build_configuration",
]
