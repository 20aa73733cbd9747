"""
Custom exception classes for object-configure.

Provides a hierarchy of exceptions for specific error conditions,
enabling precise error handling and meaningful error messages.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ObjectConfigureError(Exception):
    """
    Base exception for all object-configure errors.

    All custom exceptions inherit from this class, allowing
    callers to catch all configuration-injection exceptions.

    Attributes:
        message: Human-readable error description.
        details: Additional context about the error.
        error_code: Optional error code for categorization.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Additional context about the error.
            error_code: Optional error code for categorization.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "error_code": self.error_code,
        }


class ConfigurationError(ObjectConfigureError):
    """
    Exception raised for configuration-related errors.

    Raised when:
    - Configuration file is missing or malformed
    - Configuration values fail validation
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_file: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error description.
            config_key: The configuration key that caused the error.
            config_file: Path to the configuration file.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if config_file:
            details["config_file"] = config_file

        kwargs.setdefault("error_code", "CONFIG_ERROR")
        super().__init__(message, details=details, **kwargs)


class ConfigUnreadableError(ConfigurationError):
    """
    Exception raised when a configuration file cannot be read.

    Only raised when no fallback config_dirs were given, so the
    named file is the sole candidate.
    """

    def __init__(
        self,
        message: str,
        class_name: Optional[str] = None,
        config_file: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize unreadable configuration error.

        Args:
            message: Error description.
            class_name: Name of the class being configured.
            config_file: Path that could not be read.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if class_name:
            details["class_name"] = class_name

        self.class_name = class_name
        self.config_file = config_file
        kwargs.setdefault("error_code", "CONFIG_UNREADABLE")
        super().__init__(message, config_file=config_file, details=details, **kwargs)


class ConfigLoadError(ConfigurationError):
    """
    Exception raised when configuration cannot be loaded.

    Raised when:
    - No configuration file was found in the search directories
    - A configuration file cannot be parsed
    - The configuration source fails to merge
    """

    def __init__(
        self,
        message: str,
        class_name: Optional[str] = None,
        config_file: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize configuration load error.

        Args:
            message: Error description.
            class_name: Name of the class being configured.
            config_file: Path to the configuration file.
            cause: Underlying exception, when one is available.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if class_name:
            details["class_name"] = class_name
        if cause is not None:
            details["cause"] = str(cause)

        self.class_name = class_name
        self.cause = cause
        kwargs.setdefault("error_code", "CONFIG_LOAD_FAILED")
        super().__init__(message, config_file=config_file, details=details, **kwargs)


class SchemaValidationError(ConfigLoadError):
    """
    Exception raised when a configuration section fails its schema.

    The pydantic error list is kept in ``details["errors"]``.
    """

    def __init__(
        self,
        message: str,
        section: Optional[str] = None,
        errors: Optional[list] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize schema validation error.

        Args:
            message: Error description.
            section: Configuration section that failed.
            errors: Validation errors reported by the schema.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if section:
            details["section"] = section
        if errors:
            details["errors"] = errors

        kwargs.setdefault("error_code", "SCHEMA_VALIDATION")
        super().__init__(message, details=details, **kwargs)


class ValidationError(ObjectConfigureError):
    """
    Exception raised when argument validation fails.

    Raised when:
    - A class name is empty or cannot be resolved
    - A required parameter is missing
    - A value is outside its allowed set
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error description.
            field: Name of the field that failed validation.
            value: The invalid value (only its type is recorded).
            constraint: The constraint that was violated.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value_type"] = type(value).__name__
        if constraint:
            details["constraint"] = constraint

        super().__init__(message, details=details, error_code="VALIDATION_ERROR", **kwargs)


class LoggerConfigError(ObjectConfigureError):
    """
    Exception raised when a logger handle cannot be built.

    Raised when:
    - A syslog facility or protocol is unknown
    - A logger option has an unusable type
    """

    def __init__(
        self,
        message: str,
        option: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize logger configuration error.

        Args:
            message: Error description.
            option: The logger option that was rejected.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if option:
            details["option"] = option

        super().__init__(message, details=details, error_code="LOGGER_CONFIG", **kwargs)
