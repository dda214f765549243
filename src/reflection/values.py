"""Reflective value handles and the native indirection boxes they walk.

Pointer and Interface are the only native objects that add a level of
wrapping. A Value pairs a descriptor with data plus a sealed flag; sealed
handles refuse generic conversion and pass the flag on through elem().
"""

from __future__ import annotations

import math
import struct
from typing import Any, ClassVar

from .descriptors import ANY, Type, pointer_to, type_of
from .errors import InvalidValueError, KindMismatchError, SealedValueError
from .kinds import (
    COMPLEX_KINDS,
    FLOAT_KINDS,
    NILLABLE_KINDS,
    SIGNED_INTEGER_KINDS,
    UNSIGNED_INTEGER_KINDS,
    Kind,
)

_U64_MASK = (1 << 64) - 1


class Pointer:
    """Mutable reference cell with a fixed element type.

    Targets are checked against the element type the same way make_value
    checks data; a *interface {} target is boxed into an Interface.
    """

    __slots__ = ("_target", "_elem_type", "_nil")

    def __init__(self, target: Any, elem_type: Type | None = None) -> None:
        if elem_type is None:
            elem_type = type_of(target)
        if elem_type is None:
            raise ValueError("cannot infer element type of a nil target; use Pointer.nil(elem_type)")
        self._target = _coerce(elem_type, target)
        self._elem_type = elem_type
        self._nil = False

    @classmethod
    def nil(cls, elem_type: Type) -> Pointer:
        ptr = cls.__new__(cls)
        ptr._target = None
        ptr._elem_type = elem_type
        ptr._nil = True
        return ptr

    @property
    def elem_type(self) -> Type:
        return self._elem_type

    @property
    def reflect_type(self) -> Type:
        return pointer_to(self._elem_type)

    @property
    def is_nil(self) -> bool:
        return self._nil

    def get(self) -> Any:
        if self._nil:
            raise ValueError("nil pointer dereference")
        return self._target

    def set(self, target: Any) -> None:
        """Point at target, checked against the element type."""
        self._target = _coerce(self._elem_type, target)
        self._nil = False

    def clear(self) -> None:
        self._target = None
        self._nil = True

    def __repr__(self) -> str:
        if self._nil:
            return f"Pointer.nil({self._elem_type})"
        return f"Pointer(<{self._elem_type}>)"


class Interface:
    """Box holding one dynamic value, or nothing."""

    __slots__ = ("_value",)

    static_reflect_type: ClassVar[Type] = ANY

    def __init__(self, value: Any = None) -> None:
        self._value = value

    @property
    def reflect_type(self) -> Type:
        return self.static_reflect_type

    @property
    def is_empty(self) -> bool:
        return self._value is None

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"Interface({self._value!r})"


class Value:
    """Read-only reflective handle.

    Value() with no arguments is the invalid handle.
    """

    __slots__ = ("_type", "_data", "_sealed")

    _type: Type | None
    _data: Any
    _sealed: bool

    def __init__(self, typ: Type | None = None, data: Any = None, *, sealed: bool = False) -> None:
        object.__setattr__(self, "_type", typ)
        object.__setattr__(self, "_data", data)
        object.__setattr__(self, "_sealed", sealed)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Value handles are immutable")

    # --- Shape ---

    def kind(self) -> Kind:
        if self._type is None:
            return Kind.INVALID
        return self._type.kind

    def type(self) -> Type:
        if self._type is None:
            raise InvalidValueError(method="Value.type")
        return self._type

    def is_valid(self) -> bool:
        return self._type is not None

    def is_sealed(self) -> bool:
        return self._sealed

    def is_nil(self) -> bool:
        kind = self.kind()
        if kind not in NILLABLE_KINDS:
            raise KindMismatchError(method="Value.is_nil", kind=kind)
        if kind is Kind.PTR:
            return not isinstance(self._data, Pointer) or self._data.is_nil
        if kind is Kind.INTERFACE:
            return not isinstance(self._data, Interface) or self._data.is_empty
        return self._data is None

    def sealed(self) -> Value:
        """Same handle, reached through a path that forbids generic conversion."""
        return Value(self._type, self._data, sealed=True)

    # --- Generic conversion ---

    def can_interface(self) -> bool:
        return self._type is not None and not self._sealed

    def interface(self) -> Any:
        if self._type is None:
            raise InvalidValueError(method="Value.interface")
        if self._sealed:
            raise SealedValueError(method="Value.interface")
        return self._data

    # --- Indirection ---

    def elem(self) -> Value:
        """Value a pointer points to, or the value an interface holds.

        Nil pointers and empty interfaces yield the invalid handle.
        """
        kind = self.kind()
        if kind is Kind.PTR:
            ptr = self._data
            if not isinstance(ptr, Pointer) or ptr.is_nil:
                return Value()
            return Value(self._type.elem(), ptr.get(), sealed=self._sealed)
        if kind is Kind.INTERFACE:
            box = self._data
            if not isinstance(box, Interface) or box.is_empty:
                return Value()
            held = value_of(box.get())
            return Value(held._type, held._data, sealed=self._sealed)
        raise KindMismatchError(method="Value.elem", kind=kind)

    # --- Per-kind decoding (ignores the sealed flag) ---

    def bool(self) -> bool:
        self._expect(Kind.BOOL, method="Value.bool")
        return bool(self._data)

    def int(self) -> int:
        """Signed integer of any width, as a 64-bit value."""
        if self.kind() not in SIGNED_INTEGER_KINDS:
            raise KindMismatchError(method="Value.int", kind=self.kind())
        raw = int(self._data) & _U64_MASK
        return raw - (1 << 64) if raw >= 1 << 63 else raw

    def uint(self) -> int:
        """Unsigned integer of any width, as a 64-bit value."""
        if self.kind() not in UNSIGNED_INTEGER_KINDS:
            raise KindMismatchError(method="Value.uint", kind=self.kind())
        return int(self._data) & _U64_MASK

    def float(self) -> float:
        if self.kind() not in FLOAT_KINDS:
            raise KindMismatchError(method="Value.float", kind=self.kind())
        return float(self._data)

    def complex(self) -> complex:
        if self.kind() not in COMPLEX_KINDS:
            raise KindMismatchError(method="Value.complex", kind=self.kind())
        return complex(self._data)

    def string(self) -> str:
        self._expect(Kind.STRING, method="Value.string")
        return str(self._data)

    def _expect(self, kind: Kind, *, method: str) -> None:
        if self.kind() is not kind:
            raise KindMismatchError(method=method, kind=self.kind())

    # --- Dunder ---

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self._type == other._type and self._sealed == other._sealed and self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._type is None:
            return "<invalid Value>"
        sealed = ", sealed" if self._sealed else ""
        return f"Value({self._type}, {self._data!r}{sealed})"


def value_of(value: Any) -> Value:
    """Wrap a native value; None gives the invalid handle."""
    if isinstance(value, Value):
        return value
    typ = type_of(value)
    if typ is None:
        return Value()
    return Value(typ, value)


def make_value(typ: Type, data: Any, *, sealed: bool = False) -> Value:
    """Handle of an explicit descriptor, with data checked against its kind."""
    return Value(typ, _coerce(typ, data), sealed=sealed)


def _coerce(typ: Type, data: Any) -> Any:
    kind = typ.kind
    if kind is Kind.BOOL:
        if not isinstance(data, bool):
            raise KindMismatchError(method="make_value", kind=kind)
        return data
    if kind in SIGNED_INTEGER_KINDS or kind in UNSIGNED_INTEGER_KINDS:
        if isinstance(data, bool) or not isinstance(data, int):
            raise KindMismatchError(method="make_value", kind=kind)
        bits = kind.bits
        if kind in SIGNED_INTEGER_KINDS:
            low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        else:
            low, high = 0, (1 << bits) - 1
        if not low <= data <= high:
            raise OverflowError(f"{data} overflows {typ.name}")
        return data
    if kind in FLOAT_KINDS:
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise KindMismatchError(method="make_value", kind=kind)
        return _round32(float(data)) if kind is Kind.FLOAT32 else float(data)
    if kind in COMPLEX_KINDS:
        if isinstance(data, bool) or not isinstance(data, (int, float, complex)):
            raise KindMismatchError(method="make_value", kind=kind)
        number = complex(data)
        if kind is Kind.COMPLEX64:
            return complex(_round32(number.real), _round32(number.imag))
        return number
    if kind is Kind.STRING:
        if not isinstance(data, str):
            raise KindMismatchError(method="make_value", kind=kind)
        return data
    if kind is Kind.PTR:
        if data is None:
            return Pointer.nil(typ.elem())
        if not isinstance(data, Pointer) or data.elem_type != typ.elem():
            raise KindMismatchError(method="make_value", kind=kind)
        return data
    if kind is Kind.INTERFACE:
        if data is None:
            return Interface()
        return data if isinstance(data, Interface) else Interface(data)
    return data


def _round32(number: float) -> float:
    if not math.isfinite(number):
        return number
    try:
        return struct.unpack("<f", struct.pack("<f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)
