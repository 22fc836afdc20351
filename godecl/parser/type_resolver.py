"""
Recursive conversion of Go type expressions into GoType chains.

One rule per expression shape. Resolution is a pure function of the
syntax tree and the import table; unsupported shapes raise
UnsupportedTypeExpressionError.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

import tree_sitter

from ..models.entities import (
    ArrayType, ChanDirection, ChanType, EllipsisType, FuncType, Function,
    GoType, ImportType, InterfaceType, MapType, NameType, PointerType, Variable
)
from .base import StructuralError, UnsupportedTypeExpressionError
from .imports import ImportTable
from .tree_sitter_base import SourceView

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=Variable)

# Default types of untyped constants, by literal node
LITERAL_TYPES = {
    "int_literal": "int",
    "float_literal": "float64",
    "imaginary_literal": "complex128",
    "rune_literal": "rune",
    "interpreted_string_literal": "string",
    "raw_string_literal": "string"
}

# Expressions that may yield several values to a multi-name spec
MULTI_VALUE_EXPRESSIONS = {"call_expression", "type_assertion_expression", "index_expression"}


def expand_names(
    cls: Type[V],
    names: Sequence[str],
    resolved: Optional[GoType],
    docs: List[str],
    **extra
) -> List[V]:
    """
    One variable per name sharing a type expression.

    A group without names yields a single unnamed variable. Every variable
    gets its own copy of the type.
    """
    if not names:
        return [cls(name="", docs=list(docs), type=resolved, **extra)]
    return [
        cls(
            name=name,
            docs=list(docs),
            type=resolved.model_copy(deep=True) if resolved is not None else None,
            **extra
        )
        for name in names
    ]


class TypeResolver:
    """
    Turns type-expression nodes into GoType values.

    ``package_path`` is the import path of the file's own package; a
    qualifier resolving to it is dropped and a bare name is produced.
    """

    def __init__(self, view: SourceView, imports: ImportTable, package_path: str = ""):
        self.view = view
        self.imports = imports
        self.package_path = package_path
        self._rules: Dict[str, Callable[[tree_sitter.Node], GoType]] = {
            "type_identifier": self._name,
            "identifier": self._name,
            "qualified_type": self._qualified_type,
            "pointer_type": self._pointer,
            "array_type": self._array,
            "implicit_length_array_type": self._implicit_length_array,
            "slice_type": self._slice,
            "map_type": self._map,
            "channel_type": self._channel,
            "parenthesized_type": self._parenthesized,
            "interface_type": self._interface,
            "function_type": self._function,
        }

    def resolve(self, node: Optional[tree_sitter.Node]) -> GoType:
        """
        Resolve a type expression.

        Raises:
            UnsupportedTypeExpressionError: Shape outside the supported subset
            UnresolvedImportError: Unknown package qualifier
            StructuralError: The expression is missing
        """
        if node is None:
            raise StructuralError("missing type expression")
        rule = self._rules.get(node.type)
        if rule is None:
            raise UnsupportedTypeExpressionError(
                f"unsupported type expression {node.type}: {self.view.text(node)}",
                self.view.position(node)
            )
        return rule(node)

    def qualified(self, alias: str, target: GoType, node: tree_sitter.Node) -> GoType:
        """Wrap ``target`` in the package qualifier ``alias``"""
        imp = self.imports.resolve(alias, self.view.position(node))
        if imp is not None and self.package_path and imp.package == self.package_path:
            return target
        return ImportType(alias=alias, qualifier=imp, next=target)

    def parameters(self, parameter_list: Optional[tree_sitter.Node]) -> List[Variable]:
        """Expand a parameter list into variables"""
        variables: List[Variable] = []
        for declaration in self.view.elements(parameter_list):
            if declaration.type not in ("parameter_declaration", "variadic_parameter_declaration"):
                raise StructuralError(
                    f"unexpected {declaration.type} in parameter list",
                    self.view.position(declaration)
                )

            type_node = declaration.child_by_field_name("type")
            if type_node is None:
                raise StructuralError("parameter without a type", self.view.position(declaration))

            resolved = self.resolve(type_node)
            if declaration.type == "variadic_parameter_declaration":
                resolved = EllipsisType(next=resolved)

            names = [self.view.text(n) for n in declaration.children_by_field_name("name")]
            variables.extend(expand_names(Variable, names, resolved, self.view.docs(declaration)))
        return variables

    def results(self, result: Optional[tree_sitter.Node]) -> List[Variable]:
        """Results are either a parameter list or one bare type"""
        if result is None:
            return []
        if result.type == "parameter_list":
            return self.parameters(result)
        return [Variable(type=self.resolve(result))]

    def interface_elements(
        self,
        interface: tree_sitter.Node
    ) -> Tuple[List[Function], List[GoType]]:
        """
        Method signatures and embedded types of an interface body.

        Returns:
            (methods, embedded) in source order
        """
        methods: List[Function] = []
        embedded: List[GoType] = []

        elements = []
        for child in self.view.elements(interface):
            if child.type == "method_spec_list":
                elements.extend(self.view.elements(child))
            else:
                elements.append(child)

        for element in elements:
            if element.type in ("method_elem", "method_spec"):
                methods.append(self.interface_method(element))
            elif element.type == "type_elem":
                members = self.view.elements(element)
                if len(members) != 1:
                    raise UnsupportedTypeExpressionError(
                        f"type set constraints are not supported: {self.view.text(element)}",
                        self.view.position(element)
                    )
                embedded.append(self.resolve(members[0]))
            elif element.type in ("type_identifier", "qualified_type"):
                embedded.append(self.resolve(element))
            else:
                raise UnsupportedTypeExpressionError(
                    f"unsupported interface element {element.type}",
                    self.view.position(element)
                )

        return methods, embedded

    def interface_method(self, element: tree_sitter.Node) -> Function:
        name_node = element.child_by_field_name("name")
        if name_node is None:
            raise StructuralError("interface method without a name", self.view.position(element))
        return Function(
            name=self.view.text(name_node),
            docs=self.view.docs(element),
            args=self.parameters(element.child_by_field_name("parameters")),
            results=self.results(element.child_by_field_name("result"))
        )

    def infer(self, value: tree_sitter.Node) -> Optional[GoType]:
        """
        Best-effort type of an initializer expression.

        Returns:
            The inferred type, or None when the expression gives no hint
        """
        if value.type in LITERAL_TYPES:
            return NameType(name=LITERAL_TYPES[value.type])

        if value.type == "composite_literal":
            type_node = value.child_by_field_name("type")
            if type_node is None or type_node.type == "struct_type":
                return None
            return self.resolve(type_node)

        if value.type == "selector_expression":
            operand = value.child_by_field_name("operand")
            selected = value.child_by_field_name("field")
            if operand is None or selected is None or operand.type != "identifier":
                return None
            return self.qualified(
                self.view.text(operand),
                NameType(name=self.view.text(selected)),
                value
            )

        if value.type == "func_literal":
            return FuncType(
                args=self.parameters(value.child_by_field_name("parameters")),
                results=self.results(value.child_by_field_name("result"))
            )

        if value.type == "parenthesized_expression":
            inner = self.view.elements(value)
            return self.infer(inner[0]) if len(inner) == 1 else None

        return None

    @staticmethod
    def yields_many(value: tree_sitter.Node) -> bool:
        """True for expressions that can initialize several names at once"""
        if value.type in MULTI_VALUE_EXPRESSIONS:
            return True
        if value.type == "unary_expression":
            operator = value.child_by_field_name("operator")
            return operator is not None and operator.type == "<-"
        return False

    def _inner(self, node: tree_sitter.Node) -> tree_sitter.Node:
        inner = self.view.elements(node)
        if not inner:
            raise StructuralError(f"empty {node.type}", self.view.position(node))
        return inner[-1]

    def _name(self, node: tree_sitter.Node) -> GoType:
        return NameType(name=self.view.text(node))

    def _qualified_type(self, node: tree_sitter.Node) -> GoType:
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        if package is None or name is None:
            raise StructuralError("incomplete qualified type", self.view.position(node))
        return self.qualified(self.view.text(package), NameType(name=self.view.text(name)), node)

    def _pointer(self, node: tree_sitter.Node) -> GoType:
        target = self.resolve(self._inner(node))
        if isinstance(target, PointerType):
            return PointerType(count=target.count + 1, next=target.next)
        return PointerType(count=1, next=target)

    def _array(self, node: tree_sitter.Node) -> GoType:
        element = self.resolve(node.child_by_field_name("element"))
        length = self._array_length(node.child_by_field_name("length"))
        if length is None:
            logger.debug(
                f"Unreadable array length at {self.view.position(node)}, treating as unspecified"
            )
            return ArrayType(is_slice=True, next=element)
        return ArrayType(length=length, next=element)

    def _array_length(self, node: Optional[tree_sitter.Node]) -> Optional[int]:
        if node is None or node.type != "int_literal":
            return None
        text = self.view.text(node).replace("_", "")
        try:
            if len(text) > 1 and text[0] == "0" and text[1].isdigit():
                return int(text, 8)
            return int(text, 0)
        except ValueError:
            return None

    def _implicit_length_array(self, node: tree_sitter.Node) -> GoType:
        return ArrayType(is_ellipsis=True, next=self.resolve(node.child_by_field_name("element")))

    def _slice(self, node: tree_sitter.Node) -> GoType:
        return ArrayType(is_slice=True, next=self.resolve(node.child_by_field_name("element")))

    def _map(self, node: tree_sitter.Node) -> GoType:
        return MapType(
            key=self.resolve(node.child_by_field_name("key")),
            value=self.resolve(node.child_by_field_name("value"))
        )

    def _channel(self, node: tree_sitter.Node) -> GoType:
        tokens = [child.type for child in node.children if not child.is_named]
        if tokens[:2] == ["<-", "chan"]:
            direction = ChanDirection.RECV
        elif tokens[:2] == ["chan", "<-"]:
            direction = ChanDirection.SEND
        else:
            direction = ChanDirection.BOTH
        return ChanType(direction=direction, next=self.resolve(node.child_by_field_name("value")))

    def _parenthesized(self, node: tree_sitter.Node) -> GoType:
        return self.resolve(self._inner(node))

    def _interface(self, node: tree_sitter.Node) -> GoType:
        methods, embedded = self.interface_elements(node)
        return InterfaceType(methods=methods, embedded=embedded)

    def _function(self, node: tree_sitter.Node) -> GoType:
        return FuncType(
            args=self.parameters(node.child_by_field_name("parameters")),
            results=self.results(node.child_by_field_name("result"))
        )
