"""
Input validation utilities.

Provides validation and coercion helpers for the values that
flow into configure() and the logger handle.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Iterable

from object_configure.core.exceptions import ValidationError

_FALSE_STRINGS = {"", "0", "false", "no", "off", "n", "f"}

# Dotted Python path, optionally with a ":attr" suffix or Perl-style "::"
_CLASS_NAME_PATTERN = re.compile(r"^[A-Za-z_][\w]*((\.|::|:)[A-Za-z_][\w]*)*$")


def validate_path(path: str, must_be_file: bool = False) -> bool:
    """
    Validate a file path.

    Args:
        path: File path to validate.
        must_be_file: An existing path must be a regular file.

    Returns:
        True if valid path.

    Raises:
        ValidationError: If path is invalid.
    """
    if not path or not isinstance(path, (str, os.PathLike)):
        raise ValidationError("Path must be a non-empty string", field="path", value=path)

    if "\x00" in os.fspath(path):
        raise ValidationError("Path contains null byte", field="path")

    path_obj = Path(path)
    if must_be_file and path_obj.exists() and not path_obj.is_file():
        raise ValidationError(f"Path is not a file: {path}", field="path")

    return True


def is_readable_file(path: Any) -> bool:
    """Return True if ``path`` names a regular file the process can read."""
    try:
        validate_path(path)
    except ValidationError:
        return False
    return os.path.isfile(path) and os.access(path, os.R_OK)


def validate_class_name(name: str) -> bool:
    """
    Validate a class name used to derive a configuration namespace.

    Args:
        name: Dotted class name.

    Returns:
        True if valid.

    Raises:
        ValidationError: If the name is empty or malformed.
    """
    if not name or not isinstance(name, str):
        raise ValidationError(
            "Class name must be a non-empty string", field="class", value=name
        )

    if not _CLASS_NAME_PATTERN.match(name):
        raise ValidationError(
            f"Invalid class name: {name}",
            field="class",
            constraint="dotted identifier",
        )

    return True


def validate_choice(value: str, choices: Iterable[str], field: str) -> str:
    """
    Validate that a case-insensitive string is one of ``choices``.

    Returns:
        The lower-cased value.

    Raises:
        ValidationError: If the value is not allowed.
    """
    choices = list(choices)
    if not isinstance(value, str) or value.lower() not in choices:
        raise ValidationError(
            f"{field} must be one of: {choices}",
            field=field,
            value=value,
            constraint=",".join(choices),
        )
    return value.lower()


def parse_bool(value: Any) -> bool:
    """
    Coerce a flag to bool.

    Strings such as "0", "false", "no" and "off" are false, since flags
    read from environment variables arrive as strings.
    """
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)
