"""Type descriptors.

A Type carries shape only, never data. Pointer-like kinds expose their
element type through Type.elem(), which is what the type-form resolver walks.
"""

from __future__ import annotations

import asyncio
import inspect
import queue
from dataclasses import dataclass
from types import BuiltinFunctionType, FunctionType, MethodType
from typing import Any, Protocol, runtime_checkable

from .errors import KindMismatchError
from .kinds import ELEM_KINDS, Kind


@dataclass(frozen=True, eq=False)
class Type:
    """Runtime type descriptor.

    Equality is structural. A descriptor may be its own element (see
    recursive_pointer), so comparison and hashing never recurse through a
    self-reference.
    """

    kind: Kind
    name: str
    elem_type: Type | None = None
    key_type: Type | None = None  # MAP only
    length: int | None = None  # ARRAY only

    def __post_init__(self) -> None:
        if self.kind in ELEM_KINDS and self.elem_type is None:
            raise ValueError(f"{self.kind.label} descriptor {self.name!r} requires an element type")

    def elem(self) -> Type:
        """Element type of a pointer, array, slice, map or chan descriptor."""
        if self.kind not in ELEM_KINDS:
            raise KindMismatchError(method="Type.elem", kind=self.kind)
        return self.elem_type

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Type):
            return NotImplemented
        if (self.kind, self.name, self.length) != (other.kind, other.name, other.length):
            return False
        return _same_part(self, other, self.elem_type, other.elem_type) and _same_part(
            self, other, self.key_type, other.key_type
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.name, self.length))

    def __str__(self) -> str:
        return self.name


def _same_part(left: Type, right: Type, a: Type | None, b: Type | None) -> bool:
    if a is left or b is right:
        return a is left and b is right
    return a == b


@runtime_checkable
class Typed(Protocol):
    """Native objects that know their own descriptor (pointers, interfaces).

    Classes whose instances all share one descriptor also expose it as a
    `static_reflect_type` class attribute, which descriptor_for reads.
    """

    @property
    def reflect_type(self) -> Type:
        ...


BOOL = Type(Kind.BOOL, "bool")
INT = Type(Kind.INT, "int")
INT8 = Type(Kind.INT8, "int8")
INT16 = Type(Kind.INT16, "int16")
INT32 = Type(Kind.INT32, "int32")
INT64 = Type(Kind.INT64, "int64")
UINT = Type(Kind.UINT, "uint")
UINT8 = Type(Kind.UINT8, "uint8")
UINT16 = Type(Kind.UINT16, "uint16")
UINT32 = Type(Kind.UINT32, "uint32")
UINT64 = Type(Kind.UINT64, "uint64")
UINTPTR = Type(Kind.UINTPTR, "uintptr")
FLOAT32 = Type(Kind.FLOAT32, "float32")
FLOAT64 = Type(Kind.FLOAT64, "float64")
COMPLEX64 = Type(Kind.COMPLEX64, "complex64")
COMPLEX128 = Type(Kind.COMPLEX128, "complex128")
STRING = Type(Kind.STRING, "string")
ANY = Type(Kind.INTERFACE, "interface {}")
UNSAFE_POINTER = Type(Kind.UNSAFE_POINTER, "unsafe.Pointer")


def pointer_to(elem: Type) -> Type:
    return Type(Kind.PTR, f"*{elem.name}", elem_type=elem)


def recursive_pointer(name: str) -> Type:
    """Named pointer type whose element is itself, like `type P *P`."""
    typ = Type(Kind.PTR, name, elem_type=ANY)
    object.__setattr__(typ, "elem_type", typ)
    return typ


def slice_of(elem: Type) -> Type:
    return Type(Kind.SLICE, f"[]{elem.name}", elem_type=elem)


def array_of(elem: Type, length: int) -> Type:
    return Type(Kind.ARRAY, f"[{length}]{elem.name}", elem_type=elem, length=length)


def map_of(key: Type, elem: Type) -> Type:
    return Type(Kind.MAP, f"map[{key.name}]{elem.name}", elem_type=elem, key_type=key)


def chan_of(elem: Type) -> Type:
    return Type(Kind.CHAN, f"chan {elem.name}", elem_type=elem)


def func_type(name: str) -> Type:
    return Type(Kind.FUNC, name)


def struct_type(name: str) -> Type:
    return Type(Kind.STRUCT, name)


BYTES = slice_of(UINT8)
FUNC = func_type("func")

# Order matters: bool is a subclass of int.
_CLASS_TABLE: tuple[tuple[type | tuple[type, ...], Type], ...] = (
    (bool, BOOL),
    (int, INT),
    (float, FLOAT64),
    (complex, COMPLEX128),
    (str, STRING),
    ((bytes, bytearray), BYTES),
    (list, slice_of(ANY)),
    ((dict, set, frozenset), map_of(ANY, ANY)),
    ((queue.Queue, asyncio.Queue), chan_of(ANY)),
    ((FunctionType, BuiltinFunctionType, MethodType), FUNC),
    (tuple, Type(Kind.ARRAY, f"[...]{ANY.name}", elem_type=ANY)),
)


def descriptor_for(cls: type) -> Type:
    """Map a Python class to the descriptor its instances report."""
    static = getattr(cls, "static_reflect_type", None)
    if isinstance(static, Type):
        return static
    for classes, descriptor in _CLASS_TABLE:
        if issubclass(cls, classes):
            return descriptor
    return struct_type(cls.__qualname__)


def type_of(value: Any) -> Type | None:
    """Runtime descriptor of a native value; None has no type."""
    if value is None:
        return None
    if isinstance(value, Typed) and not isinstance(value, type):
        return value.reflect_type
    if isinstance(value, tuple):
        return array_of(ANY, len(value))
    if inspect.isroutine(value):
        return FUNC
    return descriptor_for(type(value))
