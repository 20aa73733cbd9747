"""
Utility modules for object-configure.

Provides common functionality:
- validators: Input validation and coercion
- params: Flexible argument normalization
"""

from object_configure.utils.validators import (
    validate_path,
    validate_class_name,
    is_readable_file,
    parse_bool,
)
from object_configure.utils.params import get_params

__all__ = [
    "validate_path",
    "validate_class_name",
    "is_readable_file",
    "parse_bool",
    "get_params",
]
