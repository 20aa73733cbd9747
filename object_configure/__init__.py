"""
object-configure - Runtime configuration injection for Python classes.

Merges configuration from files and environment variables into a
class's constructor parameters and attaches a logger handle, so each
class can be tuned at run time without code changes.
"""

__version__ = "0.14.0"
__license__ = "GPL-2.0-only"

from object_configure.core.configurator import (
    configure,
    derive_namespace,
    env_var_name,
    instantiate,
)
from object_configure.core.log_handle import LogHandle
from object_configure.config.source import ConfigSource
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
    "configure",
    "instantiate",
    "derive_namespace",
    "env_var_name",
    "LogHandle",
    "ConfigSource",
    "ObjectConfigureError",
    "ConfigurationError",
    "ConfigUnreadableError",
    "ConfigLoadError",
    "SchemaValidationError",
    "ValidationError",
    "LoggerConfigError",
]
