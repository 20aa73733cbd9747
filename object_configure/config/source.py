"""
Configuration source backed by files and environment variables.

A ConfigSource loads configuration sections from YAML, JSON or INI
files and overlays environment variables that share a prefix. Its
merge_defaults() operation lays that configuration over a caller's
default parameters.
"""

from __future__ import annotations

import configparser
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, Union

import yaml
from pydantic import BaseModel, ConfigDict, create_model
from pydantic import ValidationError as PydanticValidationError

from object_configure.config.logging_config import get_logger
from object_configure.config.merge import copy_tree, deep_merge, set_path
from object_configure.core.exceptions import ConfigLoadError, SchemaValidationError

logger = get_logger(__name__)

ENV_SEPARATOR = "__"

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}
INI_SUFFIXES = {".ini", ".cfg", ".conf"}

SchemaType = Union[Type[BaseModel], Mapping[str, Any]]


def _parse_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def _parse_json(text: str) -> Any:
    return json.loads(text)


def _parse_ini(text: str) -> Dict[str, Any]:
    """Parse INI text; dotted option names become nested mappings."""
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # keep option case
    parser.read_string(text)

    data: Dict[str, Any] = {}
    for section in parser.sections():
        section_data: Dict[str, Any] = {}
        for option, value in parser.items(section, raw=True):
            set_path(section_data, option.split("."), value)
        data[section] = section_data
    return data


def load_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load one configuration file into a dict.

    The parser is chosen by suffix; unknown suffixes are tried as YAML,
    then INI.

    Raises:
        ConfigLoadError: If the file cannot be read or parsed, or its
            top level is not a mapping.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigLoadError(
            f"Cannot read configuration file {path}: {e}",
            config_file=str(path),
            cause=e,
        ) from e

    suffix = path.suffix.lower()
    if suffix in YAML_SUFFIXES:
        parsers = [_parse_yaml]
    elif suffix in JSON_SUFFIXES:
        parsers = [_parse_json]
    elif suffix in INI_SUFFIXES:
        parsers = [_parse_ini]
    else:
        parsers = [_parse_yaml, _parse_ini]

    last_error: Optional[Exception] = None
    for parse in parsers:
        try:
            data = parse(text)
        except (yaml.YAMLError, ValueError, configparser.Error) as e:
            last_error = e
            continue

        if data is None:
            return {}
        if isinstance(data, Mapping):
            return dict(data)
        last_error = ValueError(f"top level is {type(data).__name__}, expected a mapping")

    raise ConfigLoadError(
        f"Cannot parse configuration file {path}: {last_error}",
        config_file=str(path),
        cause=last_error,
    )


def build_schema_model(schema: SchemaType) -> Type[BaseModel]:
    """
    Turn a schema into a pydantic model class.

    A BaseModel subclass is returned as is. A mapping of
    ``{field: type}`` or ``{field: (type, default)}`` becomes a model
    whose fields are required unless a default is given; unknown keys
    are allowed.
    """
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return schema

    if not isinstance(schema, Mapping):
        raise TypeError(f"Unsupported schema type: {type(schema).__name__}")

    fields: Dict[str, Any] = {}
    for name, spec in schema.items():
        if isinstance(spec, tuple):
            fields[name] = spec
        else:
            fields[name] = (spec, ...)

    return create_model(
        "ConfigSchema",
        __config__=ConfigDict(extra="allow"),
        **fields,
    )


def read_environment(
    prefix: str,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Collect environment variables that start with ``prefix``.

    The remainder of each name is split on ``__`` into a nested key
    path, so with prefix ``My__Module__`` the variable
    ``My__Module__logger__file`` becomes ``{"logger": {"file": ...}}``.
    Values are kept as strings.
    """
    if environ is None:
        environ = os.environ

    data: Dict[str, Any] = {}
    for name in sorted(environ):
        if not name.startswith(prefix) or name == prefix:
            continue
        path = [part for part in name[len(prefix):].split(ENV_SEPARATOR) if part]
        if path:
            set_path(data, path, environ[name])
    return data


class ConfigSource:
    """
    Layered configuration read from files and the environment.

    Attributes:
        config_file: File name or path requested by the caller.
        config_dirs: Directories searched for ``config_file``.
        env_prefix: Prefix selecting environment variables.
        files: Files actually loaded, in precedence order.
    """

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        config_dirs: Optional[Union[str, Sequence[Union[str, Path]]]] = None,
        env_prefix: Optional[str] = None,
        schema: Optional[SchemaType] = None,
        section: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Load configuration files and environment overrides.

        Args:
            config_file: Configuration file name or path.
            config_dirs: Directories to search for a relative config_file.
            env_prefix: Prefix of environment variables to overlay.
            schema: Optional schema the file sections must satisfy.
            section: Restrict schema validation to this section.
            environ: Environment mapping (defaults to os.environ).

        Raises:
            ConfigLoadError: If config_file is given but no file could be
                loaded.
            SchemaValidationError: If a section fails the schema.
        """
        if isinstance(config_dirs, (str, Path)):
            config_dirs = [config_dirs]

        self.config_file = str(config_file) if config_file is not None else None
        self.config_dirs: List[str] = [str(d) for d in (config_dirs or [])]
        self.env_prefix = env_prefix
        self.files: List[str] = []

        self._data: Dict[str, Any] = {}
        if self.config_file is not None:
            for path in self._candidate_files():
                self._data = deep_merge(self._data, load_file(path))
                self.files.append(str(path))
                logger.debug(f"Loaded configuration file {path}")

            if not self.files:
                raise ConfigLoadError(
                    f"Configuration file {self.config_file} not found",
                    config_file=self.config_file,
                    details={"config_dirs": self.config_dirs},
                )

        self._env: Dict[str, Any] = (
            read_environment(env_prefix, environ) if env_prefix else {}
        )

        if schema is not None:
            self._validate(build_schema_model(schema), section)

    def _candidate_files(self) -> List[Path]:
        """Return the existing files named by config_file, lowest precedence first."""
        requested = Path(self.config_file)

        if not self.config_dirs or requested.is_absolute():
            return [requested] if requested.is_file() else []

        return [
            Path(directory) / requested
            for directory in self.config_dirs
            if (Path(directory) / requested).is_file()
        ]

    def _validate(self, model: Type[BaseModel], only: Optional[str] = None) -> None:
        """Validate the loaded file sections (or just ``only``) against ``model``."""
        for section, values in self._data.items():
            if not isinstance(values, Mapping) or (only and section != only):
                continue
            try:
                model.model_validate(values)
            except PydanticValidationError as e:
                raise SchemaValidationError(
                    f"Section {section} of {self.config_file} failed validation",
                    section=section,
                    errors=e.errors(include_url=False),
                    config_file=self.config_file,
                    cause=e,
                ) from e

    @property
    def sections(self) -> List[str]:
        """Names of the top-level sections loaded from files."""
        return [key for key, value in self._data.items() if isinstance(value, Mapping)]

    @property
    def data(self) -> Dict[str, Any]:
        """Copy of the loaded file data."""
        return copy_tree(self._data)

    @property
    def environment(self) -> Dict[str, Any]:
        """Copy of the environment overrides."""
        return copy_tree(self._env)

    def section(self, name: Optional[str] = None) -> Dict[str, Any]:
        """
        Return the combined file and environment values for a section.

        Args:
            name: Section name, or None for the whole file data.
        """
        if name is None:
            file_values = self._data
        else:
            file_values = self._data.get(name) or {}
            if not isinstance(file_values, Mapping):
                file_values = {}
        return deep_merge(file_values, self._env)

    def get(self, key_path: str, default: Any = None, section: Optional[str] = None) -> Any:
        """
        Look up a dotted key path such as ``"logger.file"``.

        Args:
            key_path: Dotted path of keys.
            default: Value returned when the path is missing.
            section: Section to search (whole data when None).
        """
        node: Any = self.section(section)
        for key in key_path.split("."):
            if not isinstance(node, Mapping) or key not in node:
                return default
            node = node[key]
        return node

    def merge_defaults(
        self,
        defaults: Optional[Mapping[str, Any]] = None,
        section: Optional[str] = None,
        merge: bool = True,
        deep: bool = True,
    ) -> Dict[str, Any]:
        """
        Lay this source's configuration over ``defaults``.

        Args:
            defaults: Caller's default parameters; not modified.
            section: Section to take file values from.
            merge: Keep the defaults underneath the source values. When
                false the source values alone are returned, or a copy of
                the defaults when the source has nothing.
            deep: Merge nested mappings key by key instead of replacing
                them.

        Returns:
            New parameter dict.
        """
        defaults = defaults or {}
        overlay = self.section(section)

        if not merge:
            return overlay if overlay else copy_tree(defaults)

        if deep:
            return deep_merge(defaults, overlay)

        result = copy_tree(defaults)
        result.update(overlay)
        return result

    def __repr__(self) -> str:
        return (
            f"ConfigSource(files={self.files!r}, env_prefix={self.env_prefix!r})"
        )
