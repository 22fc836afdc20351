"""
Declaration and type models extracted from Go source files.

Types are a closed set of variants. Linear variants (pointer, array, chan,
import, ellipsis) wrap a ``next`` type, so every type is a chain ending in a
name, map, interface or func variant. Declarations own their types and the
File owns every declaration it holds.
"""

import json
from abc import abstractmethod
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator


class ChanDirection(Enum):
    """Channel element flow"""
    BOTH = "both"
    SEND = "send"  # chan<- T
    RECV = "recv"  # <-chan T


class TypeBase(BaseModel):
    """Common behavior of all type variants"""
    model_config = ConfigDict(frozen=True)

    @property
    def next_type(self) -> Optional["GoType"]:
        """Inner type of a linear variant, None for terminal variants"""
        return None

    @abstractmethod
    def render(self) -> str:
        """Go source spelling of the type"""
        pass

    def __str__(self) -> str:
        return self.render()


class NameType(TypeBase):
    """Bare identifier such as ``int`` or ``User``"""
    kind: Literal["name"] = "name"
    name: str

    def render(self) -> str:
        return self.name


class PointerType(TypeBase):
    """One or more levels of indirection, always flattened"""
    kind: Literal["pointer"] = "pointer"
    count: int = Field(default=1, ge=1)
    next: "GoType"

    @model_validator(mode="after")
    def validate_flat(self) -> "PointerType":
        if isinstance(self.next, PointerType):
            raise ValueError("pointer cannot wrap a pointer, merge the counts instead")
        return self

    @property
    def next_type(self) -> "GoType":
        return self.next

    def render(self) -> str:
        return "*" * self.count + self.next.render()


class ArrayType(TypeBase):
    """Fixed array, slice, or ``[...]T`` array"""
    kind: Literal["array"] = "array"
    next: "GoType"
    length: Optional[int] = Field(default=None, ge=0)
    is_slice: bool = False
    is_ellipsis: bool = False

    @model_validator(mode="after")
    def validate_length_mode(self) -> "ArrayType":
        modes = [self.length is not None, self.is_slice, self.is_ellipsis]
        if sum(modes) != 1:
            raise ValueError("array must be exactly one of fixed length, slice or ellipsis")
        return self

    @property
    def next_type(self) -> "GoType":
        return self.next

    def render(self) -> str:
        if self.is_slice:
            prefix = "[]"
        elif self.is_ellipsis:
            prefix = "[...]"
        else:
            prefix = f"[{self.length}]"
        return prefix + self.next.render()


class MapType(TypeBase):
    kind: Literal["map"] = "map"
    key: "GoType"
    value: "GoType"

    def render(self) -> str:
        return f"map[{self.key.render()}]{self.value.render()}"


class ChanType(TypeBase):
    kind: Literal["chan"] = "chan"
    direction: ChanDirection = ChanDirection.BOTH
    next: "GoType"

    @property
    def next_type(self) -> "GoType":
        return self.next

    def render(self) -> str:
        inner = self.next.render()
        if self.direction == ChanDirection.SEND:
            return f"chan<- {inner}"
        if self.direction == ChanDirection.RECV:
            return f"<-chan {inner}"
        # chan (<-chan T) is not the same type as chan<- (chan T)
        if isinstance(self.next, ChanType) and self.next.direction == ChanDirection.RECV:
            return f"chan ({inner})"
        return f"chan {inner}"


class ImportType(TypeBase):
    """
    Package-qualified name.

    ``alias`` is the qualifier as written in source; ``qualifier`` is the
    import it resolved to, or None when unresolved aliases are tolerated.
    """
    kind: Literal["import"] = "import"
    alias: str
    qualifier: Optional["Import"] = None
    next: "GoType"

    @property
    def next_type(self) -> "GoType":
        return self.next

    def render(self) -> str:
        return f"{self.alias}.{self.next.render()}"


class InterfaceType(TypeBase):
    """Inline interface literal"""
    kind: Literal["interface"] = "interface"
    methods: List["Function"] = Field(default_factory=list)
    embedded: List["GoType"] = Field(default_factory=list)

    def render(self) -> str:
        elements = [t.render() for t in self.embedded]
        elements.extend(m.signature() for m in self.methods)
        if not elements:
            return "interface{}"
        return "interface{ " + "; ".join(elements) + " }"


class FuncType(TypeBase):
    """Function-valued type"""
    kind: Literal["func"] = "func"
    args: List["Variable"] = Field(default_factory=list)
    results: List["Variable"] = Field(default_factory=list)

    def render(self) -> str:
        return "func" + render_signature(self.args, self.results)


class EllipsisType(TypeBase):
    """Element type of a variadic parameter (``...T``)"""
    kind: Literal["ellipsis"] = "ellipsis"
    next: "GoType"

    @property
    def next_type(self) -> "GoType":
        return self.next

    def render(self) -> str:
        return "..." + self.next.render()


GoType = Annotated[
    Union[
        NameType, PointerType, ArrayType, MapType, ChanType,
        ImportType, InterfaceType, FuncType, EllipsisType
    ],
    Field(discriminator="kind")
]


def render_signature(args: List["Variable"], results: List["Variable"]) -> str:
    """Render ``(args) results`` the way gofmt spells a signature"""
    text = "(" + ", ".join(a.render() for a in args) + ")"
    if len(results) == 1 and not results[0].name:
        text += " " + results[0].render()
    elif results:
        text += " (" + ", ".join(r.render() for r in results) + ")"
    return text


class Declaration(BaseModel):
    """Named, documented entity"""
    model_config = ConfigDict(frozen=True)

    name: str = ""
    docs: List[str] = Field(default_factory=list)


class Import(BaseModel):
    """Import alias and the package path it refers to"""
    model_config = ConfigDict(frozen=True)

    alias: str
    package: str
    docs: List[str] = Field(default_factory=list)

    def __str__(self) -> str:
        return f'{self.alias} "{self.package}"'


class Variable(Declaration):
    """
    Constant, variable, parameter or result.

    ``name`` is empty for unnamed parameters. ``type`` is absent only for
    declarations whose type could not be inferred from the initializer.
    """
    type: Optional["GoType"] = None

    def render(self) -> str:
        if self.type is None:
            return self.name
        if not self.name:
            return self.type.render()
        return f"{self.name} {self.type.render()}"


class Function(Declaration):
    args: List[Variable] = Field(default_factory=list)
    results: List[Variable] = Field(default_factory=list)

    def signature(self) -> str:
        return self.name + render_signature(self.args, self.results)


class Method(Function):
    receiver: Variable

    def signature(self) -> str:
        return f"({self.receiver.render()}) {super().signature()}"


class Interface(Declaration):
    methods: List[Function] = Field(default_factory=list)
    embedded: List["GoType"] = Field(default_factory=list)


class StructTag(BaseModel):
    """One ``key:"name,opt1,opt2"`` entry of a struct field tag"""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    options: List[str] = Field(default_factory=list)


class StructField(Variable):
    tags: Dict[str, StructTag] = Field(default_factory=dict)
    raw_tags: str = ""
    embedded: bool = False


class Struct(Declaration):
    """
    Struct declaration.

    ``methods`` holds references into File.methods, filled by the linker.
    """
    fields: List[StructField] = Field(default_factory=list)
    methods: List[Method] = Field(default_factory=list)

    @field_serializer("methods")
    def serialize_methods(self, methods: List[Method]) -> List[str]:
        return [m.name for m in methods]


class FileType(Declaration):
    """Defined type or alias that is neither a struct nor an interface"""
    type: "GoType"
    is_alias: bool = False
    methods: List[Method] = Field(default_factory=list)

    @field_serializer("methods")
    def serialize_methods(self, methods: List[Method]) -> List[str]:
        return [m.name for m in methods]


class File(Declaration):
    """
    Top-level declarations of one Go source file.

    ``name`` is the package name and ``docs`` the comments above the
    ``package`` clause.
    """
    package_path: str = ""
    imports: List[Import] = Field(default_factory=list)
    constants: List[Variable] = Field(default_factory=list)
    vars: List[Variable] = Field(default_factory=list)
    interfaces: List[Interface] = Field(default_factory=list)
    structs: List[Struct] = Field(default_factory=list)
    functions: List[Function] = Field(default_factory=list)
    methods: List[Method] = Field(default_factory=list)
    types: List[FileType] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary, omitting empty collections"""
        return _prune_empty(self.model_dump(mode="json"))

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def _prune_empty(value: Any) -> Any:
    if isinstance(value, dict):
        pruned = {}
        for key, item in value.items():
            item = _prune_empty(item)
            if item is None or item == [] or item == {}:
                continue
            pruned[key] = item
        return pruned
    if isinstance(value, list):
        return [_prune_empty(item) for item in value]
    return value


for _model in (
    PointerType, ArrayType, MapType, ChanType, ImportType, InterfaceType,
    FuncType, EllipsisType, Variable, Function, Method, Interface,
    StructField, Struct, FileType, File
):
    _model.model_rebuild()
