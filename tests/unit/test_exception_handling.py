"""Tests for exception handling."""

from __future__ import annotations

import pytest

from object_configure.core.exceptions import (
    ConfigLoadError,
    ConfigUnreadableError,
    ConfigurationError,
    LoggerConfigError,
    ObjectConfigureError,
    SchemaValidationError,
    ValidationError,
)


class TestObjectConfigureError:
    """Tests for base ObjectConfigureError class."""

    def test_base_exception_creation(self) -> None:
        """Should create base exception."""
        error = ObjectConfigureError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.details == {}
        assert error.error_code is None

    def test_exception_with_details(self) -> None:
        """Should create exception with details."""
        error = ObjectConfigureError(
            "Test error",
            details={"key": "value"},
            error_code="TEST_ERROR",
        )
        assert error.details == {"key": "value"}
        assert "[TEST_ERROR]" in str(error)

    def test_exception_to_dict(self) -> None:
        """Should convert exception to dictionary."""
        error = ObjectConfigureError("Test error", details={"key": "value"}, error_code="TEST_ERROR")
        error_dict = error.to_dict()

        assert error_dict["error_type"] == "ObjectConfigureError"
        assert error_dict["message"] == "Test error"
        assert error_dict["details"] == {"key": "value"}
        assert error_dict["error_code"] == "TEST_ERROR"


class TestConfigurationErrors:
    """Tests for the configuration error family."""

    def test_config_error_creation(self) -> None:
        """Should record key and file."""
        error = ConfigurationError(
            "Invalid config",
            config_key="timeout",
            config_file="/etc/app.yaml",
        )
        assert error.error_code == "CONFIG_ERROR"
        assert error.details["config_key"] == "timeout"
        assert error.details["config_file"] == "/etc/app.yaml"

    def test_unreadable_error(self) -> None:
        """Should carry class name and path."""
        error = ConfigUnreadableError(
            "My.Dummy: /nope: File not readable",
            class_name="My.Dummy",
            config_file="/nope",
        )
        assert error.error_code == "CONFIG_UNREADABLE"
        assert error.class_name == "My.Dummy"
        assert error.config_file == "/nope"
        assert error.details == {"class_name": "My.Dummy", "config_file": "/nope"}

    def test_load_error_keeps_cause(self) -> None:
        """Should keep the underlying exception."""
        cause = OSError("disk on fire")
        error = ConfigLoadError("Can't load", class_name="My.Dummy", cause=cause)
        assert error.error_code == "CONFIG_LOAD_FAILED"
        assert error.cause is cause
        assert error.details["cause"] == "disk on fire"

    def test_schema_error_is_load_error(self) -> None:
        """Schema failures are load failures."""
        error = SchemaValidationError(
            "bad section",
            section="My__Dummy",
            errors=[{"loc": ("timeout",), "msg": "not an int"}],
        )
        assert isinstance(error, ConfigLoadError)
        assert error.error_code == "SCHEMA_VALIDATION"
        assert error.details["section"] == "My__Dummy"
        assert error.details["errors"][0]["msg"] == "not an int"


class TestValidationError:
    """Tests for ValidationError."""

    def test_validation_error(self) -> None:
        """Should record only the value's type."""
        error = ValidationError(
            "Validation failed",
            field="class",
            value=42,
            constraint="dotted identifier",
        )
        assert error.error_code == "VALIDATION_ERROR"
        assert error.details["field"] == "class"
        assert error.details["value_type"] == "int"
        assert error.details["constraint"] == "dotted identifier"


class TestExceptionHierarchy:
    """Tests for exception hierarchy."""

    def test_all_exceptions_inherit_from_base(self) -> None:
        """All exceptions should inherit from ObjectConfigureError."""
        exceptions = [
            ConfigurationError("test"),
            ConfigUnreadableError("test"),
            ConfigLoadError("test"),
            SchemaValidationError("test"),
            ValidationError("test"),
            LoggerConfigError("test"),
        ]

        for exc in exceptions:
            assert isinstance(exc, ObjectConfigureError)

    def test_config_failures_share_a_base(self) -> None:
        """Unreadable and load failures can be caught together."""
        for exc_type in (ConfigUnreadableError, ConfigLoadError):
            with pytest.raises(ConfigurationError):
                raise exc_type("test")
