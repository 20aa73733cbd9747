"""
Argument normalization for flexible call conventions.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from object_configure.core.exceptions import ValidationError


def get_params(default: str, *args: Any, **kwargs: Any) -> Dict[str, Any]:
    """
    Normalize call arguments into a single parameter dict.

    Accepted forms::

        get_params("class", {"class": Foo, "x": 1})
        get_params("class", Foo, x=1)
        get_params("class", x=1, **{"class": Foo})

    A single mapping positional is copied; a single other positional
    is stored under ``default``. Keyword options are applied last.

    Raises:
        ValidationError: On more than one positional argument.
    """
    if len(args) > 1:
        raise ValidationError(
            f"Expected at most one positional argument, got {len(args)}",
            field=default,
        )

    params: Dict[str, Any] = {}
    if args:
        first = args[0]
        if isinstance(first, Mapping):
            params.update(first)
        elif first is not None:
            params[default] = first

    params.update(kwargs)
    return params
