"""Indirection resolver - strip pointer layers down to the origin.

Generic callers often receive data through an "any value" entry point and
need the real shape underneath, however many pointer layers wrap it.
Resolving once up front lets downstream code assume a non-pointer kind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from .config import DEFAULT_CONFIG, ReflectionConfig
from .descriptors import Type, descriptor_for, type_of
from .kinds import Kind
from .values import Value, value_of

_log = logging.getLogger("reflection.indirection")


@dataclass(frozen=True)
class ValueIndirection:
    """Input handle and its origin after pointer resolution."""

    input_value: Value = field(default_factory=Value)
    input_kind: Kind = Kind.INVALID
    origin_value: Value = field(default_factory=Value)
    origin_kind: Kind = Kind.INVALID


@dataclass(frozen=True)
class TypeIndirection:
    """Input descriptor and its origin after pointer resolution.

    The default instance is the empty result returned for absent input.
    """

    input_type: Type | None = None
    input_kind: Kind = Kind.INVALID
    origin_type: Type | None = None
    origin_kind: Kind = Kind.INVALID


def resolve_value_indirection(value: Any, *, config: ReflectionConfig | None = None) -> ValueIndirection:
    """Dereference pointers until the first non-pointer kind.

    Accepts a Value or any native value (wrapped with value_of). A nil
    pointer resolves to the invalid handle.
    """
    config = config or DEFAULT_CONFIG
    input_value = value if isinstance(value, Value) else value_of(value)
    input_kind = input_value.kind()

    origin_value, origin_kind = input_value, input_kind
    depth = 0
    while origin_kind is Kind.PTR:
        if depth >= config.max_unwrap_depth:
            _log.warning(
                f"Pointer chain exceeds {config.max_unwrap_depth} levels, treating origin as invalid",
                extra={"event": "unwrap_depth_exceeded", "form": "value", "input_kind": input_kind.label},
            )
            origin_value, origin_kind = Value(), Kind.INVALID
            break
        origin_value = origin_value.elem()
        origin_kind = origin_value.kind()
        depth += 1

    return ValueIndirection(
        input_value=input_value,
        input_kind=input_kind,
        origin_value=origin_value,
        origin_kind=origin_kind,
    )


def resolve_type_indirection(value: Any, *, config: ReflectionConfig | None = None) -> TypeIndirection:
    """Strip pointer-to-T down to T on a descriptor.

    Accepts a Type, a Python class, a Value or a native value. None (and
    the invalid handle, which has no type) gives the empty result.
    """
    if value is None:
        return TypeIndirection()
    config = config or DEFAULT_CONFIG

    if isinstance(value, Type):
        input_type = value
    elif isinstance(value, Value):
        if not value.is_valid():
            return TypeIndirection()
        input_type = value.type()
    elif isinstance(value, type):
        input_type = descriptor_for(value)
    else:
        input_type = type_of(value)
    input_kind = input_type.kind

    origin_type: Type | None = input_type
    origin_kind = input_kind
    depth = 0
    while origin_kind is Kind.PTR:
        if depth >= config.max_unwrap_depth:
            _log.warning(
                f"Pointer type chain exceeds {config.max_unwrap_depth} levels, treating origin as empty",
                extra={"event": "unwrap_depth_exceeded", "form": "type", "input_type": input_type.name},
            )
            origin_type, origin_kind = None, Kind.INVALID
            break
        origin_type = origin_type.elem()
        origin_kind = origin_type.kind
        depth += 1

    return TypeIndirection(
        input_type=input_type,
        input_kind=input_kind,
        origin_type=origin_type,
        origin_kind=origin_kind,
    )


class IndirectionResolver(Protocol):
    """Protocol for resolving values and descriptors to their origin."""

    def resolve_value(self, value: Any) -> ValueIndirection:
        ...

    def resolve_type(self, value: Any) -> TypeIndirection:
        ...


class PointerChainResolver:
    """Default implementation bound to one config."""

    def __init__(self, config: ReflectionConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    def resolve_value(self, value: Any) -> ValueIndirection:
        return resolve_value_indirection(value, config=self._config)

    def resolve_type(self, value: Any) -> TypeIndirection:
        return resolve_type_indirection(value, config=self._config)
