"""
Tests for linking methods to their receiver types.
"""

from godecl.models.entities import (
    ArrayType, File, FileType, MapType, Method, NameType, PointerType, Struct, Variable
)
from godecl.parser.linker import MethodLinker, common_receiver_name


def method(name, receiver_type):
    return Method(name=name, receiver=Variable(name="r", type=receiver_type))


class TestCommonReceiverName:
    """Only T and *T receivers are common"""

    def test_value_receiver(self):
        assert common_receiver_name(method("M", NameType(name="Foo"))) == "Foo"

    def test_pointer_receiver(self):
        assert common_receiver_name(method("M", PointerType(next=NameType(name="Foo")))) == "Foo"

    def test_double_pointer_receiver(self):
        assert common_receiver_name(method("M", PointerType(count=2, next=NameType(name="Foo")))) is None

    def test_slice_and_map_receivers(self):
        slice_type = ArrayType(is_slice=True, next=NameType(name="Foo"))
        map_type = MapType(key=NameType(name="string"), value=NameType(name="Foo"))

        assert common_receiver_name(method("M", slice_type)) is None
        assert common_receiver_name(method("M", map_type)) is None


class TestMethodLinker:
    """Linking a File's methods"""

    def test_links_struct_and_type_methods(self):
        foo = Struct(name="Foo")
        names = FileType(name="Names", type=ArrayType(is_slice=True, next=NameType(name="string")))
        file = File(
            name="p",
            structs=[foo],
            types=[names],
            methods=[
                method("A", PointerType(next=NameType(name="Foo"))),
                method("B", NameType(name="Foo")),
                method("Len", NameType(name="Names")),
            ]
        )

        linker = MethodLinker()
        linked = linker.link(file)

        assert linked is file
        assert [m.name for m in foo.methods] == ["A", "B"]
        assert [m.name for m in names.methods] == ["Len"]
        assert foo.methods[0] is file.methods[0]
        assert linker.warnings == []

    def test_unmatched_and_uncommon_receivers(self):
        foo = Struct(name="Foo")
        file = File(
            name="p",
            structs=[foo],
            methods=[
                method("Elsewhere", NameType(name="Bar")),
                method("Sliced", ArrayType(is_slice=True, next=NameType(name="Foo"))),
            ]
        )

        linker = MethodLinker()
        linker.link(file)

        assert foo.methods == []
        assert len(file.methods) == 2
        assert len(linker.warnings) == 2
        assert "not declared in this file" in linker.warnings[0]
        assert "uncommon receiver" in linker.warnings[1]

    def test_struct_wins_over_type_with_same_name(self):
        struct = Struct(name="Foo")
        named = FileType(name="Foo", type=NameType(name="int"))
        file = File(
            name="p",
            structs=[struct],
            types=[named],
            methods=[method("M", NameType(name="Foo"))]
        )

        MethodLinker().link(file)

        assert [m.name for m in struct.methods] == ["M"]
        assert named.methods == []

    def test_linked_methods_serialize_as_names(self, parse):
        file = parse('''
            package p

            type Store struct{}

            func (s *Store) Get() {}

            func (s Store) Put() {}
            ''')

        assert file.to_dict()["structs"][0]["methods"] == ["Get", "Put"]
        assert file.structs[0].methods[1].receiver.type == NameType(name="Store")
