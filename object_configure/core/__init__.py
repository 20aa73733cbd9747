"""
Core module containing the configurator and its building blocks.

This module provides:
- configure / instantiate: Configuration injection entry points
- LogHandle: Logger handed to configured objects
- Custom exceptions
"""

from object_configure.core.configurator import (
    LoggerSpec,
    LoggerSpecKind,
    configure,
    derive_namespace,
    instantiate,
)
from object_configure.core.log_handle import LogHandle
from object_configure.core.exceptions import (
    ObjectConfigureError,
    ConfigurationError,
    ConfigUnreadableError,
    ConfigLoadError,
    SchemaValidationError,
    ValidationError,
    LoggerConfigError,
)

__all__ = [
    "LoggerSpec",
    "LoggerSpecKind",
    "configure",
    "derive_namespace",
    "instantiate",
    "LogHandle",
    "ObjectConfigureError",
    "ConfigurationError",
    "ConfigUnreadableError",
    "ConfigLoadError",
    "SchemaValidationError",
    "ValidationError",
    "LoggerConfigError",
]
