"""Unit tests for handles, boxes and type descriptors."""

import asyncio
import queue

import pytest

from reflection import descriptors as d
from reflection.errors import InvalidValueError, KindMismatchError, ReflectionError, SealedValueError
from reflection.kinds import SCALAR_KINDS, Kind
from reflection.values import Interface, Pointer, Value, make_value, value_of


class TestTypeOf:
    """Runtime descriptors of native values."""

    @pytest.mark.parametrize(
        "native,kind",
        [
            (None, None),
            (False, Kind.BOOL),
            (0, Kind.INT),
            (0.0, Kind.FLOAT64),
            (0j, Kind.COMPLEX128),
            ("", Kind.STRING),
            (b"", Kind.SLICE),
            (bytearray(), Kind.SLICE),
            ([], Kind.SLICE),
            ((), Kind.ARRAY),
            ({}, Kind.MAP),
            (set(), Kind.MAP),
            (queue.Queue(), Kind.CHAN),
            (print, Kind.FUNC),
            (Interface(), Kind.INTERFACE),
            (Pointer(1), Kind.PTR),
            (object(), Kind.STRUCT),
        ],
    )
    def test_kinds(self, native, kind) -> None:
        """Each native value maps onto one kind."""
        typ = d.type_of(native)
        assert (typ.kind if typ else None) is kind

    def test_asyncio_queue_is_chan(self) -> None:
        """asyncio queues are channels too."""
        assert d.descriptor_for(asyncio.Queue).kind is Kind.CHAN

    def test_bytes_are_uint8_slices(self) -> None:
        """bytes report []uint8."""
        typ = d.type_of(b"abc")
        assert typ.elem() == d.UINT8
        assert typ.name == "[]uint8"

    def test_struct_named_after_class(self) -> None:
        """Unknown classes become structs named after the class."""

        class Point:
            pass

        assert d.type_of(Point()).name.endswith("Point")

    def test_pointer_type_tracks_target(self) -> None:
        """Pointer descriptors nest with their targets."""
        assert d.type_of(Pointer(Pointer("s"))) == d.pointer_to(d.pointer_to(d.STRING))

    def test_interface_class_matches_instances(self) -> None:
        """descriptor_for(Interface) agrees with type_of on an Interface."""
        assert d.descriptor_for(Interface) == d.ANY
        assert d.descriptor_for(Interface) == d.type_of(Interface(1))


class TestTypeDescriptor:
    """Type descriptor behavior."""

    def test_elem_on_non_element_kind_raises(self) -> None:
        """Only pointer-like and container kinds have an element."""
        with pytest.raises(KindMismatchError) as exc_info:
            d.STRING.elem()
        assert exc_info.value.kind is Kind.STRING

    def test_pointer_requires_element(self) -> None:
        """Element kinds cannot be built without an element type."""
        with pytest.raises(ValueError):
            d.Type(Kind.PTR, "*broken")

    def test_structural_equality(self) -> None:
        """Separately built descriptors compare equal."""
        assert d.map_of(d.STRING, d.slice_of(d.INT)) == d.map_of(d.STRING, d.slice_of(d.INT))
        assert d.map_of(d.STRING, d.INT) != d.map_of(d.INT, d.INT)
        assert hash(d.pointer_to(d.INT)) == hash(d.pointer_to(d.INT))

    def test_recursive_pointer(self) -> None:
        """A recursive pointer is its own element and compares safely."""
        first = d.recursive_pointer("P")
        second = d.recursive_pointer("P")

        assert first.elem() is first
        assert first == second
        assert first != d.pointer_to(first)
        assert hash(first) == hash(second)

    def test_constructor_names(self) -> None:
        """Constructed descriptors carry readable names."""
        assert str(d.array_of(d.INT8, 4)) == "[4]int8"
        assert str(d.chan_of(d.BOOL)) == "chan bool"
        assert str(d.map_of(d.STRING, d.ANY)) == "map[string]interface {}"


class TestPointer:
    """Pointer boxes."""

    def test_infers_element_type(self) -> None:
        """The element type comes from the target."""
        assert Pointer("x").elem_type == d.STRING

    def test_nil_target_needs_explicit_type(self) -> None:
        """None alone gives no element type."""
        with pytest.raises(ValueError):
            Pointer(None)

    def test_nil_and_set(self) -> None:
        """A nil pointer can be pointed somewhere later."""
        ptr = Pointer.nil(d.INT)
        assert ptr.is_nil
        with pytest.raises(ValueError):
            ptr.get()

        ptr.set(3)
        assert not ptr.is_nil
        assert ptr.get() == 3

        ptr.clear()
        assert ptr.is_nil

    @pytest.mark.parametrize(
        "target,elem_type",
        [
            (7, d.STRING),
            ("x", d.INT),
            (1.5, d.INT8),
            (Pointer(7), d.pointer_to(d.STRING)),
        ],
    )
    def test_rejects_mismatched_target(self, target, elem_type: d.Type) -> None:
        """Targets must match the declared element type."""
        with pytest.raises(KindMismatchError):
            Pointer(target, elem_type)

    def test_set_rejects_mismatched_target(self) -> None:
        """set checks the target like the constructor does."""
        ptr = Pointer(7)
        with pytest.raises(KindMismatchError):
            ptr.set("x")
        assert ptr.get() == 7

    def test_target_must_fit_width(self) -> None:
        """Integer targets must fit the element width."""
        with pytest.raises(OverflowError):
            Pointer(300, d.INT8)

    def test_interface_target_is_boxed(self) -> None:
        """A raw target of a *interface {} is held in an Interface."""
        ptr = Pointer(7, d.ANY)
        assert isinstance(ptr.get(), Interface)
        assert ptr.get().get() == 7

        ptr = Pointer.nil(d.ANY)
        ptr.set("s")
        target = value_of(ptr).elem()
        assert target.kind() is Kind.INTERFACE
        assert not target.is_nil()


class TestValue:
    """Reflective handle behavior."""

    def test_invalid_handle(self) -> None:
        """Value() is invalid and refuses data access."""
        handle = Value()

        assert handle.kind() is Kind.INVALID
        assert not handle.is_valid()
        assert not handle.can_interface()
        with pytest.raises(InvalidValueError):
            handle.interface()
        with pytest.raises(InvalidValueError):
            handle.type()

    def test_value_of_none_is_invalid(self) -> None:
        """None wraps to the invalid handle."""
        assert value_of(None) == Value()

    def test_value_of_handle_is_identity(self) -> None:
        """Wrapping a handle returns it unchanged."""
        handle = value_of(1)
        assert value_of(handle) is handle

    def test_handles_are_immutable(self) -> None:
        """Attributes cannot be reassigned."""
        handle = value_of(1)
        with pytest.raises(AttributeError):
            handle._data = 2  # type: ignore[misc]

    def test_sealed_refuses_generic_conversion(self) -> None:
        """Sealed handles only decode through per-kind accessors."""
        handle = value_of("secret").sealed()

        assert handle.is_sealed()
        assert not handle.can_interface()
        with pytest.raises(SealedValueError):
            handle.interface()
        assert handle.string() == "secret"

    def test_sealed_propagates_through_elem(self) -> None:
        """Dereferencing keeps the sealed flag."""
        handle = value_of(Pointer(Interface(5))).sealed()

        assert handle.elem().is_sealed()
        assert handle.elem().elem().is_sealed()
        assert handle.elem().elem().int() == 5

    def test_elem_on_scalar_raises(self) -> None:
        """Only pointers and interfaces have an elem."""
        with pytest.raises(KindMismatchError):
            value_of(1).elem()

    def test_elem_of_nil_and_empty(self) -> None:
        """Nil pointers and empty interfaces give the invalid handle."""
        assert not value_of(Pointer.nil(d.INT)).elem().is_valid()
        assert not value_of(Interface()).elem().is_valid()

    def test_is_nil(self) -> None:
        """Nil checks apply to nillable kinds only."""
        assert value_of(Pointer.nil(d.INT)).is_nil()
        assert not value_of(Pointer(1)).is_nil()
        assert value_of(Interface()).is_nil()
        assert not value_of([]).is_nil()
        with pytest.raises(KindMismatchError):
            value_of(1).is_nil()

    def test_accessor_kind_mismatch(self) -> None:
        """Accessors reject other kinds."""
        handle = value_of("s")
        for accessor in (handle.bool, handle.int, handle.uint, handle.float, handle.complex):
            with pytest.raises(KindMismatchError):
                accessor()
        with pytest.raises(KindMismatchError):
            value_of(1).string()

    def test_errors_share_base(self) -> None:
        """All accessor errors derive from ReflectionError."""
        assert issubclass(KindMismatchError, ReflectionError)
        assert issubclass(SealedValueError, ReflectionError)
        assert issubclass(InvalidValueError, ReflectionError)

    def test_int_normalizes_to_64_bits(self) -> None:
        """Unchecked data is wrapped into the 64-bit range."""
        assert Value(d.INT64, 2**63).int() == -(2**63)
        assert Value(d.UINT64, -1).uint() == 2**64 - 1

    def test_repr(self) -> None:
        """repr shows descriptor, data and seal."""
        assert repr(Value()) == "<invalid Value>"
        assert repr(make_value(d.INT8, 3, sealed=True)) == "Value(int8, 3, sealed)"


class TestMakeValue:
    """Explicitly typed handle construction."""

    @pytest.mark.parametrize(
        "typ,data",
        [
            (d.INT8, 128),
            (d.INT8, -129),
            (d.UINT8, 256),
            (d.UINT16, -1),
            (d.INT64, 2**63),
        ],
    )
    def test_integer_overflow(self, typ: d.Type, data: int) -> None:
        """Integers must fit the width."""
        with pytest.raises(OverflowError):
            make_value(typ, data)

    @pytest.mark.parametrize(
        "typ,data",
        [
            (d.BOOL, 1),
            (d.INT, True),
            (d.INT, 1.0),
            (d.FLOAT64, "1"),
            (d.COMPLEX128, True),
            (d.STRING, b"x"),
            (d.pointer_to(d.INT), 1),
        ],
    )
    def test_wrong_data_type(self, typ: d.Type, data) -> None:
        """Data must match the kind."""
        with pytest.raises(KindMismatchError):
            make_value(typ, data)

    def test_float32_rounds(self) -> None:
        """float32 data is stored at single precision."""
        assert make_value(d.FLOAT32, 1 / 3).float() != 1 / 3
        assert make_value(d.FLOAT32, 1e300).float() == float("inf")

    def test_nil_pointer_and_interface(self) -> None:
        """None builds nil pointers and empty interfaces."""
        assert make_value(d.pointer_to(d.INT), None).is_nil()
        assert make_value(d.ANY, None).is_nil()
        assert make_value(d.ANY, 4).elem().int() == 4

    def test_every_scalar_kind_has_a_descriptor(self) -> None:
        """Predefined descriptors cover the scalar kinds."""
        predefined = {
            getattr(d, name).kind
            for name in dir(d)
            if name.isupper() and isinstance(getattr(d, name), d.Type)
        }
        assert SCALAR_KINDS <= predefined
