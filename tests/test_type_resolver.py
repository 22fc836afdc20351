"""
Tests for type expression resolution.

Covers every supported expression shape, pointer flattening, array length
modes, channel directions and the unsupported shapes.
"""

import pytest

from godecl.models.entities import (
    ArrayType, ChanDirection, ChanType, EllipsisType, FuncType, ImportType,
    InterfaceType, MapType, NameType, PointerType
)
from godecl.parser.base import UnsupportedTypeExpressionError


def resolve_var(parse, type_text, imports=""):
    """Resolve a type by declaring a variable of that type"""
    file = parse(f"package p\n{imports}\nvar v {type_text}\n")
    return file.vars[0].type


class TestRendering:
    """Resolved types render back to their canonical spelling"""

    @pytest.mark.parametrize("type_text", [
        "int",
        "**[]map[string]int",
        "[4]byte",
        "map[string][]int",
        "chan int",
        "chan<- error",
        "<-chan string",
        "chan (<-chan int)",
        "func(int, string) (bool, error)",
        "func(a int, b ...string) error",
        "interface{}",
        "map[string]interface{ String() string }",
    ])
    def test_round_trip(self, parse, type_text):
        """Test that resolving and rendering reproduces the expression"""
        assert str(resolve_var(parse, type_text)) == type_text

    def test_qualified_round_trip(self, parse):
        """Test package qualified names keep their qualifier"""
        resolved = resolve_var(parse, "[]*http.Request", imports='import "net/http"')
        assert str(resolved) == "[]*http.Request"

    def test_parenthesized_type_is_unwrapped(self, parse):
        """Test parentheses do not produce a variant of their own"""
        assert resolve_var(parse, "*(int)") == PointerType(count=1, next=NameType(name="int"))


class TestPointers:
    """Pointer chains are flattened into one variant"""

    def test_triple_pointer(self, parse):
        resolved = resolve_var(parse, "***int")

        assert isinstance(resolved, PointerType)
        assert resolved.count == 3
        assert resolved.next == NameType(name="int")

    def test_pointer_to_slice_of_pointer(self, parse):
        """Test only directly nested pointers are merged"""
        resolved = resolve_var(parse, "*[]*int")

        assert resolved.count == 1
        assert isinstance(resolved.next, ArrayType)
        assert resolved.next.next == PointerType(count=1, next=NameType(name="int"))

    def test_no_pointer_wraps_pointer(self, parse):
        resolved = resolve_var(parse, "**(*int)")
        assert resolved == PointerType(count=3, next=NameType(name="int"))


class TestArrays:
    """Array length modes"""

    def test_slice(self, parse):
        resolved = resolve_var(parse, "[]string")
        assert resolved.is_slice
        assert resolved.length is None
        assert not resolved.is_ellipsis

    def test_fixed_length(self, parse):
        assert resolve_var(parse, "[16]byte").length == 16

    def test_hex_length(self, parse):
        assert resolve_var(parse, "[0x10]byte").length == 16

    def test_unreadable_length_degrades_to_slice(self, parse):
        """Test a non-literal length is treated as unspecified"""
        resolved = resolve_var(parse, "[size]byte")
        assert resolved.is_slice
        assert resolved.length is None

    def test_ellipsis_from_composite_literal(self, parse):
        file = parse("package p\nvar v = [...]int{1, 2, 3}\n")
        resolved = file.vars[0].type

        assert isinstance(resolved, ArrayType)
        assert resolved.is_ellipsis
        assert str(resolved) == "[...]int"


class TestCompositeTypes:
    """Maps, channels, functions and interfaces"""

    def test_map(self, parse):
        resolved = resolve_var(parse, "map[string]*int")

        assert isinstance(resolved, MapType)
        assert resolved.key == NameType(name="string")
        assert resolved.value == PointerType(next=NameType(name="int"))
        assert resolved.next_type is None

    @pytest.mark.parametrize("type_text,direction", [
        ("chan int", ChanDirection.BOTH),
        ("chan<- int", ChanDirection.SEND),
        ("<-chan int", ChanDirection.RECV),
    ])
    def test_channel_direction(self, parse, type_text, direction):
        resolved = resolve_var(parse, type_text)

        assert isinstance(resolved, ChanType)
        assert resolved.direction == direction
        assert resolved.next == NameType(name="int")

    def test_func_type(self, parse):
        resolved = resolve_var(parse, "func(ctx context.Context, opts ...string) error",
                               imports='import "context"')

        assert isinstance(resolved, FuncType)
        assert [a.name for a in resolved.args] == ["ctx", "opts"]
        assert isinstance(resolved.args[0].type, ImportType)
        assert resolved.args[1].type == EllipsisType(next=NameType(name="string"))
        assert resolved.results[0].name == ""
        assert resolved.results[0].type == NameType(name="error")

    def test_shared_parameter_names(self, parse):
        """Test grouped names each own a copy of the type"""
        resolved = resolve_var(parse, "func(a, b []int)")

        assert [a.name for a in resolved.args] == ["a", "b"]
        assert resolved.args[0].type == resolved.args[1].type
        assert resolved.args[0].type is not resolved.args[1].type

    def test_inline_interface(self, parse):
        resolved = resolve_var(parse, "interface{ Close() error }")

        assert isinstance(resolved, InterfaceType)
        assert [m.name for m in resolved.methods] == ["Close"]
        assert resolved.methods[0].results[0].type == NameType(name="error")


class TestUnsupported:
    """Shapes outside the supported grammar fail loudly"""

    def test_generic_instantiation(self, parse):
        with pytest.raises(UnsupportedTypeExpressionError):
            parse("package p\nvar v List[int]\n")

    def test_anonymous_struct(self, parse):
        with pytest.raises(UnsupportedTypeExpressionError, match="struct_type"):
            parse("package p\nvar v struct{ A int }\n")

    def test_generic_function(self, parse):
        with pytest.raises(UnsupportedTypeExpressionError, match="generic function Map"):
            parse("package p\nfunc Map[T any](v T) T { return v }\n")

    def test_error_carries_position(self, parse):
        with pytest.raises(UnsupportedTypeExpressionError) as exc_info:
            parse("package p\n\nvar v struct{}\n")
        assert exc_info.value.position == (3, 7)
