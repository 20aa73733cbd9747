"""
Configuration management module.

Provides the file and environment configuration source, deep merge,
package settings and logging setup.
"""

from object_configure.config.settings import Settings, get_settings
from object_configure.config.logging_config import setup_logging, get_logger
from object_configure.config.source import ConfigSource, load_file
from object_configure.config.merge import deep_merge

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "ConfigSource",
    "load_file",
    "deep_merge",
]
