"""Parameter binding adapters.

Evaluation reads parameters from a read-only name -> value mapping. Callers
may pass a plain mapping, None, or a parameter object; objects are read
shallowly (nested values stay as they are).
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel


def to_binding(params: Any = None) -> Mapping[str, Any]:
    """Wrap parameters as a read-only binding.

    Args:
        params: None, a mapping, a pydantic model, a dataclass instance, or
            any object with attributes (public attributes are read).

    Returns:
        A read-only mapping. The caller's object is copied, never mutated.

    Raises:
        TypeError: If params cannot be read as a binding.
    """
    match params:
        case None:
            return MappingProxyType({})
        case MappingProxyType():
            return params
        case Mapping():
            return MappingProxyType(dict(params))
        case BaseModel():
            return MappingProxyType(params.model_dump())

    if dataclasses.is_dataclass(params) and not isinstance(params, type):
        return MappingProxyType(
            {f.name: getattr(params, f.name) for f in dataclasses.fields(params)}
        )

    try:
        attributes = vars(params)
    except TypeError as e:
        raise TypeError(f"Cannot bind parameters from {type(params).__name__}") from e
    return MappingProxyType({k: v for k, v in attributes.items() if not k.startswith("_")})
