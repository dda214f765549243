"""Primitive extraction - best-effort native value from a handle.

Generic conversion wins whenever the handle allows it. Sealed handles fall
back to per-kind decoding, unwrapping pointers and interfaces on the way.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .config import DEFAULT_CONFIG, ReflectionConfig
from .errors import ReflectionError
from .kinds import COMPLEX_KINDS, FLOAT_KINDS, SIGNED_INTEGER_KINDS, UNSIGNED_INTEGER_KINDS, Kind
from .values import Value, value_of

_log = logging.getLogger("reflection.extract")

_DECODERS = (
    (frozenset({Kind.BOOL}), Value.bool),
    (SIGNED_INTEGER_KINDS, Value.int),
    (UNSIGNED_INTEGER_KINDS, Value.uint),
    (FLOAT_KINDS, Value.float),
    (COMPLEX_KINDS, Value.complex),
    (frozenset({Kind.STRING}), Value.string),
)


def extract_primitive(value: Any, *, config: ReflectionConfig | None = None) -> tuple[Any, bool]:
    """Return (native value, True), or (None, False) for unhandled kinds.

    value is normally a Value; any other object is wrapped with value_of
    first. Signed integers come back as 64-bit ints, unsigned as 64-bit
    unsigned ints, floats as float and complex numbers as complex, whatever
    the source width. Handles whose data does not decode as their kind are
    unhandled too.
    """
    config = config or DEFAULT_CONFIG
    if not isinstance(value, Value):
        value = value_of(value)
    return _extract(value, config.max_unwrap_depth)


def _extract(value: Value, budget: int) -> tuple[Any, bool]:
    if value.can_interface():
        return value.interface(), True

    kind = value.kind()
    for kinds, decode in _DECODERS:
        if kind in kinds:
            try:
                return decode(value), True
            except (ReflectionError, TypeError, ValueError) as exc:
                _log.debug(
                    f"Data of {kind.label} value does not decode: {exc}",
                    extra={"event": "extract_malformed", "kind": kind.label, "error_type": type(exc).__name__},
                )
                return None, False
    if kind is Kind.PTR or kind is Kind.INTERFACE:
        if budget <= 0:
            _log.warning(
                "Unwrap depth exhausted during extraction",
                extra={"event": "unwrap_depth_exceeded", "form": "extract", "kind": kind.label},
            )
            return None, False
        return _extract(value.elem(), budget - 1)

    _log.debug(
        f"No generic access and no decoder for {kind.label}",
        extra={"event": "extract_unhandled", "kind": kind.label},
    )
    return None, False


class PrimitiveExtractor(Protocol):
    """Protocol for turning handles into native values."""

    def extract(self, value: Value) -> tuple[Any, bool]:
        ...


class KindDispatchExtractor:
    """Default implementation bound to one config."""

    def __init__(self, config: ReflectionConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    def extract(self, value: Value) -> tuple[Any, bool]:
        return extract_primitive(value, config=self._config)
