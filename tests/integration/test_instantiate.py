"""Integration tests for building configured objects."""

from __future__ import annotations

from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List

import pytest

from object_configure import (
    ConfigUnreadableError,
    LogHandle,
    ValidationError,
    configure,
    env_var_name,
    instantiate,
)


class Dummy:
    """Class that takes its configuration as a single mapping."""

    def __init__(self, params: Dict[str, Any]) -> None:
        self.params = params
        self.logger = params["logger"]


class SelfConfiguring:
    """Class that calls configure() from its own constructor."""

    def __init__(self, params: Dict[str, Any] = None) -> None:
        params = configure(type(self), params)
        self.timeout = int(params.get("timeout", 10))
        self.logger = params["logger"]

    def work(self) -> None:
        self.logger.warn("working with timeout %d", self.timeout)


class Exploding:
    """Class whose constructor always fails."""

    def __init__(self, params: Dict[str, Any]) -> None:
        raise RuntimeError("constructor failed")


@pytest.mark.integration
class TestInstantiate:
    """Tests for instantiate()."""

    def test_syslog_logger(self) -> None:
        """The logger field holds a warn-capable handle."""
        obj = instantiate({"class": Dummy, "logger": {"syslog": "local0"}})
        try:
            assert isinstance(obj, Dummy)
            assert isinstance(obj.logger, LogHandle)
            obj.logger.warn("hello from a dummy")
        finally:
            obj.logger.close()

    def test_class_positional_with_options(self) -> None:
        """A class positional plus keyword options."""
        obj = instantiate(Dummy, timeout=3)
        assert obj.params["timeout"] == 3
        assert "class" not in obj.params

    def test_dotted_path(self) -> None:
        """Classes can be named by import path."""
        obj = instantiate({"class": "collections.OrderedDict", "a": 1})
        assert isinstance(obj, OrderedDict)
        assert obj["a"] == 1
        assert isinstance(obj["logger"], LogHandle)

    def test_environment_reaches_object(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment configuration is scoped to the class."""
        monkeypatch.setenv(env_var_name(Dummy, "timeout"), "9")
        obj = instantiate(Dummy)
        assert obj.params["timeout"] == "9"

    def test_null_logger(self) -> None:
        """Logging can be switched off."""
        obj = instantiate(Dummy, logger="NULL")
        assert obj.logger == "NULL"

    def test_missing_class(self) -> None:
        """A class is required."""
        with pytest.raises(ValidationError):
            instantiate({"logger": "NULL"})

    def test_unresolvable_class(self) -> None:
        """Unknown class paths are rejected."""
        with pytest.raises(ValidationError):
            instantiate("no_such_module.Dummy")

    def test_configure_errors_propagate(self) -> None:
        """Configuration errors surface unchanged."""
        with pytest.raises(ConfigUnreadableError):
            instantiate(Dummy, config_file="/nonexistent/path")

    def test_constructor_errors_propagate(self) -> None:
        """Constructor errors are not wrapped."""
        with pytest.raises(RuntimeError, match="constructor failed"):
            instantiate(Exploding)


@pytest.mark.integration
class TestSelfConfiguringClass:
    """Tests for classes that call configure() themselves."""

    def test_file_and_array(self, temp_dir: Path) -> None:
        """Configuration file values and an array sink work together."""
        namespace_section = env_var_name(SelfConfiguring)
        config_file = temp_dir / "app.yaml"
        config_file.write_text(f"{namespace_section}:\n  timeout: 42\n")
        entries: List[Dict[str, Any]] = []

        obj = SelfConfiguring({"config_file": str(config_file), "logger": entries})
        obj.work()

        assert obj.timeout == 42
        assert entries == [{"level": "warning", "message": "working with timeout 42"}]

    def test_defaults(self) -> None:
        """Without configuration the defaults apply."""
        obj = SelfConfiguring()
        assert obj.timeout == 10
        assert isinstance(obj.logger, LogHandle)
