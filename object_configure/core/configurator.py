"""
Runtime configuration injection.

configure() lays file and environment configuration, scoped to a
namespace derived from a class name, over a constructor's parameters
and turns the ``logger`` parameter into a LogHandle. instantiate() does
the same and then builds the object.
"""

from __future__ import annotations

import enum
import importlib
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from object_configure.config.logging_config import get_namespace_logger
from object_configure.config.source import ConfigSource
from object_configure.core.exceptions import (
    ConfigLoadError,
    ConfigUnreadableError,
    SchemaValidationError,
    ValidationError,
)
from object_configure.core.log_handle import LogHandle
from object_configure.utils.params import get_params
from object_configure.utils.validators import (
    is_readable_file,
    parse_bool,
    validate_class_name,
)

NULL_LOGGER = "NULL"
NAMESPACE_TOKEN = "__"

# Longest first, so "::" is not split into two ":" replacements
_SEPARATORS = ("::", ".", ":")

ClassRef = Union[str, type]


class LoggerSpecKind(enum.Enum):
    """Shapes the ``logger`` parameter can take before normalization."""

    ABSENT = "absent"
    NULL = "null"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    HANDLE = "handle"
    OPAQUE = "opaque"


def _is_unset(value: Any) -> bool:
    """True for values that leave the logger unset: None, False, 0, "0" and empties."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (int, float)):
        return value == 0
    return isinstance(value, (Mapping, list)) and not value


@dataclass(frozen=True)
class LoggerSpec:
    """A ``logger`` parameter value tagged with its kind."""

    kind: LoggerSpecKind
    value: Any = None

    @classmethod
    def classify(cls, value: Any) -> "LoggerSpec":
        """Tag a raw ``logger`` value."""
        if _is_unset(value):
            return cls(LoggerSpecKind.ABSENT)
        if isinstance(value, str) and value == NULL_LOGGER:
            return cls(LoggerSpecKind.NULL, value)
        if isinstance(value, LogHandle):
            return cls(LoggerSpecKind.HANDLE, value)
        if isinstance(value, Mapping):
            return cls(LoggerSpecKind.MAPPING, value)
        if isinstance(value, list):
            return cls(LoggerSpecKind.SEQUENCE, value)
        return cls(LoggerSpecKind.OPAQUE, value)


def class_name_of(target: ClassRef) -> str:
    """
    Return the dotted name used to configure ``target``.

    Classes are named ``module.QualName``; ``<locals>`` markers of
    classes defined inside functions are dropped.
    """
    if isinstance(target, type):
        qualname = target.__qualname__.replace("<locals>.", "")
        return f"{target.__module__}.{qualname}"
    return target


def derive_namespace(class_name: ClassRef) -> str:
    """
    Derive the configuration namespace for a class.

    Every namespace separator (``.``, ``:`` or ``::``) is replaced with
    ``__``, so ``"My.Module"`` and ``"My::Module"`` both give
    ``"My__Module"``.

    Raises:
        ValidationError: If the class name is empty.
    """
    name = class_name_of(class_name)
    if not name or not isinstance(name, str):
        raise ValidationError(
            "Class name must be a non-empty string", field="class", value=name
        )

    for separator in _SEPARATORS:
        name = name.replace(separator, NAMESPACE_TOKEN)
    return name


def env_var_name(class_name: ClassRef, *keys: str) -> str:
    """
    Return the environment variable that sets a (nested) key for a class.

    >>> env_var_name("My.Module", "logger", "file")
    'My__Module__logger__file'
    """
    return NAMESPACE_TOKEN.join([derive_namespace(class_name), *keys])


def resolve_class(target: ClassRef) -> type:
    """
    Resolve a class object from a class or an importable dotted path.

    Accepts ``"package.module.Class"`` and ``"package.module:Class"``.

    Raises:
        ValidationError: If the path is malformed or cannot be imported.
    """
    if isinstance(target, type):
        return target

    validate_class_name(target)

    if ":" in target and "::" not in target:
        module_name, _, attr_path = target.partition(":")
        candidates = [(module_name, attr_path)]
    else:
        parts = target.replace("::", ".").split(".")
        # Try the longest importable module prefix first
        candidates = [
            (".".join(parts[:i]), ".".join(parts[i:])) for i in range(len(parts) - 1, 0, -1)
        ]

    for module_name, attr_path in candidates:
        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError:
            continue
        try:
            for attr in attr_path.split("."):
                obj = getattr(obj, attr)
        except AttributeError:
            continue
        if isinstance(obj, type):
            return obj

    raise ValidationError(
        f"Cannot resolve class: {target}", field="class", constraint="importable class"
    )


def _load_source(
    class_name: str,
    namespace: str,
    params: Dict[str, Any],
) -> ConfigSource:
    """Build the configuration source for one configure() call."""
    env_prefix = f"{namespace}{NAMESPACE_TOKEN}"

    if "config_file" not in params:
        return ConfigSource(env_prefix=env_prefix)

    config_file = params["config_file"]
    config_dirs = params.get("config_dirs")
    if not config_dirs and not is_readable_file(config_file):
        raise ConfigUnreadableError(
            f"{class_name}: {config_file}: File not readable",
            class_name=class_name,
            config_file=str(config_file),
        )

    try:
        return ConfigSource(
            config_file=config_file,
            config_dirs=config_dirs,
            env_prefix=env_prefix,
            schema=params.get("schema"),
            section=namespace,
        )
    except SchemaValidationError as e:
        e.class_name = class_name
        e.details["class_name"] = class_name
        raise
    except Exception as e:
        reason = getattr(e, "message", None) or str(e) or "unknown error"
        raise ConfigLoadError(
            f"{class_name}: Can't load configuration from {config_file}: {reason}",
            class_name=class_name,
            config_file=str(config_file),
            cause=e,
        ) from e


def _normalize_logger(
    params: Dict[str, Any],
    retained: Optional[List[Any]],
    carp_on_warn: bool,
) -> Optional[List[Any]]:
    """
    Replace ``params["logger"]`` with a LogHandle.

    Returns the retained list if it was not consumed.
    """
    spec = LoggerSpec.classify(params.get("logger"))

    if spec.kind is LoggerSpecKind.ABSENT:
        if retained is not None:
            params["logger"] = LogHandle(array=retained, carp_on_warn=carp_on_warn)
            return None
        params["logger"] = LogHandle(carp_on_warn=carp_on_warn)
    elif spec.kind is LoggerSpecKind.NULL:
        pass
    elif spec.kind is LoggerSpecKind.MAPPING:
        options = {"carp_on_warn": carp_on_warn, **spec.value}
        params["logger"] = LogHandle(**options)
    elif spec.kind is LoggerSpecKind.HANDLE:
        pass
    else:
        # OPAQUE, and lists that arrived through configuration
        params["logger"] = LogHandle(carp_on_warn=carp_on_warn, logger=spec.value)

    return retained


def configure(class_name: ClassRef, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Configure a class's constructor parameters at runtime.

    Args:
        class_name: The class being built, or its dotted name.
        params: Default constructor parameters. Recognized keys are
            ``config_file``, ``config_dirs``, ``schema``,
            ``carp_on_warn`` and ``logger``; configuration from the file
            section and environment variables named after the class is
            deep-merged over them.

    Returns:
        The parameters to construct the object with. ``logger`` holds a
        LogHandle unless it was the literal ``"NULL"``.

    Raises:
        ValidationError: If the class name is empty.
        ConfigUnreadableError: If ``config_file`` is unreadable and no
            ``config_dirs`` were given.
        ConfigLoadError: If the configuration cannot be loaded.
    """
    if params is None:
        params = {}

    namespace = derive_namespace(class_name)
    name = class_name_of(class_name)
    log = get_namespace_logger(__name__, namespace)

    retained: Optional[List[Any]] = None
    if isinstance(params.get("logger"), list):
        # Held aside so a logger from configuration is built first
        retained = params.pop("logger")

    try:
        source = _load_source(name, namespace, params)
    except Exception:
        if retained is not None:
            params["logger"] = retained
        raise
    log.debug(f"Merging configuration from {source!r}")
    params = source.merge_defaults(defaults=params, section=namespace, merge=True, deep=True)

    carp_on_warn = parse_bool(params.get("carp_on_warn", False))

    retained = _normalize_logger(params, retained, carp_on_warn)

    logger = params["logger"]
    if retained is not None and isinstance(logger, LogHandle) and logger.array is not retained:
        # Known fragility: a logger from configuration wins over the list
        logger.array = retained

    log.debug(f"Logger resolved to {logger!r}")
    return params


def instantiate(*args: Any, **kwargs: Any) -> Any:
    """
    Create and configure an object of the given class.

    Arguments follow the get_params() conventions with ``class`` as the
    default key::

        instantiate(MyClass, logger={"syslog": "local0"})
        instantiate({"class": "package.module.MyClass", "config_file": "app.yaml"})

    ``class`` is removed from the parameters, configure() runs, and the
    class is called with the resulting mapping as its only argument.

    Raises:
        ValidationError: If ``class`` is missing or cannot be resolved.
        ConfigUnreadableError: See configure().
        ConfigLoadError: See configure().
    """
    params = get_params("class", *args, **kwargs)

    target = params.pop("class", None)
    if target is None:
        raise ValidationError("instantiate() requires a class", field="class")

    cls = resolve_class(target)
    params = configure(cls if isinstance(target, type) else target, params)

    return cls(params)
