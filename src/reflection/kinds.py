"""Kind tags describing the broad shape of a value."""

from enum import Enum


class Kind(Enum):
    """Closed set of value shapes."""

    INVALID = "invalid"
    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    UINTPTR = "uintptr"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"
    STRING = "string"
    PTR = "ptr"
    INTERFACE = "interface"
    ARRAY = "array"
    CHAN = "chan"
    FUNC = "func"
    MAP = "map"
    SLICE = "slice"
    STRUCT = "struct"
    UNSAFE_POINTER = "unsafe.Pointer"

    @property
    def label(self) -> str:
        return self.value

    @property
    def bits(self) -> int | None:
        """Width in bits for sized numeric kinds, None otherwise."""
        return _BITS.get(self)


_BITS = {
    Kind.INT: 64,
    Kind.INT8: 8,
    Kind.INT16: 16,
    Kind.INT32: 32,
    Kind.INT64: 64,
    Kind.UINT: 64,
    Kind.UINT8: 8,
    Kind.UINT16: 16,
    Kind.UINT32: 32,
    Kind.UINT64: 64,
    Kind.UINTPTR: 64,
    Kind.FLOAT32: 32,
    Kind.FLOAT64: 64,
    Kind.COMPLEX64: 64,
    Kind.COMPLEX128: 128,
}

SIGNED_INTEGER_KINDS = frozenset({Kind.INT, Kind.INT8, Kind.INT16, Kind.INT32, Kind.INT64})
UNSIGNED_INTEGER_KINDS = frozenset(
    {Kind.UINT, Kind.UINT8, Kind.UINT16, Kind.UINT32, Kind.UINT64, Kind.UINTPTR}
)
FLOAT_KINDS = frozenset({Kind.FLOAT32, Kind.FLOAT64})
COMPLEX_KINDS = frozenset({Kind.COMPLEX64, Kind.COMPLEX128})

# Kinds the extractor can decode without generic access.
SCALAR_KINDS = (
    frozenset({Kind.BOOL, Kind.STRING})
    | SIGNED_INTEGER_KINDS
    | UNSIGNED_INTEGER_KINDS
    | FLOAT_KINDS
    | COMPLEX_KINDS
)

# Kinds whose descriptor has an element type.
ELEM_KINDS = frozenset({Kind.PTR, Kind.ARRAY, Kind.SLICE, Kind.MAP, Kind.CHAN})

NILLABLE_KINDS = frozenset(
    {Kind.PTR, Kind.INTERFACE, Kind.MAP, Kind.SLICE, Kind.FUNC, Kind.CHAN, Kind.UNSAFE_POINTER}
)
