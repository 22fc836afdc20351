"""
Top-level declaration walker.

Scans a Go ``source_file`` tree in source order and builds the File model:
imports first, then constants, variables, types, functions and methods.
"""

import logging
from typing import Callable, Dict, List, Optional, Set, Tuple

import tree_sitter

from ..models.config import ParseOptions
from ..models.entities import (
    File, FileType, Function, Interface, Method, PointerType, Struct,
    StructField, StructTag, Variable
)
from .base import ReceiverNotFoundError, StructuralError, UnsupportedTypeExpressionError
from .imports import ImportTable
from .struct_tags import StructTagParser, StructTagSyntaxError
from .tree_sitter_base import SourceView
from .type_resolver import TypeResolver, expand_names

logger = logging.getLogger(__name__)


class DeclarationWalker:
    """
    Builds a File from the top-level declarations of one syntax tree.

    A walker is scoped to a single parse call. Categories switched off in
    the options are skipped before any of their nodes are resolved.
    """

    def __init__(
        self,
        view: SourceView,
        options: Optional[ParseOptions] = None,
        package_path: str = ""
    ):
        self.view = view
        self.options = options or ParseOptions()
        self.package_path = package_path
        self.imports = ImportTable(view, allow_any_alias=self.options.allow_any_import_alias)
        self.types = TypeResolver(view, self.imports, package_path)
        self.tags = StructTagParser()
        self._handlers: Dict[str, Callable[[tree_sitter.Node, File], None]] = {
            "const_declaration": self._walk_constants,
            "var_declaration": self._walk_variables,
            "type_declaration": self._walk_types,
            "function_declaration": self._walk_function,
            "method_declaration": self._walk_method,
        }

    def walk(self, root: tree_sitter.Node) -> File:
        """
        Build the File for a ``source_file`` node.

        Raises:
            ParseError: Any declaration fails to resolve; no partial File
                is returned
        """
        package_clause = self.view.find_child_by_type(root, "package_clause")
        if package_clause is None:
            raise StructuralError("missing package clause", self.view.position(root))

        package_name = self.view.elements(package_clause)
        file = File(
            name=self.view.text(package_name[0]) if package_name else "",
            docs=self.view.docs(package_clause),
            package_path=self.package_path
        )

        declarations = self.view.elements(root)
        for declaration in declarations:
            if declaration.type == "import_declaration":
                file.imports.extend(self.imports.parse(declaration))

        for declaration in declarations:
            handler = self._handlers.get(declaration.type)
            if handler is not None:
                handler(declaration, file)
            elif declaration.type not in ("package_clause", "import_declaration"):
                logger.debug(
                    f"Skipping top-level {declaration.type} at line {self.view.position(declaration)[0]}"
                )

        return file

    # Constants and variables

    def _walk_constants(self, declaration: tree_sitter.Node, file: File) -> None:
        if self.options.ignore_constants:
            return
        file.constants.extend(self._values(declaration, "const_spec", repeat_previous=True))

    def _walk_variables(self, declaration: tree_sitter.Node, file: File) -> None:
        if self.options.ignore_variables:
            return
        file.vars.extend(self._values(declaration, "var_spec", repeat_previous=False))

    def _values(
        self,
        declaration: tree_sitter.Node,
        spec_type: str,
        repeat_previous: bool
    ) -> List[Variable]:
        """
        Variables of one const or var block.

        Inside a const block, a spec without type and values repeats the
        previous spec's type and value expressions.
        """
        variables: List[Variable] = []
        seen: Set[str] = set()
        previous: Optional[Tuple[Optional[tree_sitter.Node], List[tree_sitter.Node]]] = None

        for spec in self._specs(declaration, spec_type):
            names = spec.children_by_field_name("name")
            type_node = spec.child_by_field_name("type")
            values = self.view.elements(spec.child_by_field_name("value"))

            if repeat_previous:
                if type_node is None and not values and previous is not None:
                    type_node, values = previous
                elif values:
                    previous = (type_node, values)

            self._check_value_count(spec, names, values)
            docs = self.view.spec_docs(spec, declaration)

            for index, name_node in enumerate(names):
                name = self.view.text(name_node)
                if name != "_":
                    if name in seen:
                        raise StructuralError(
                            f"duplicate name {name} in declaration block",
                            self.view.position(name_node)
                        )
                    seen.add(name)

                if type_node is not None:
                    var_type = self.types.resolve(type_node)
                elif len(values) == len(names):
                    var_type = self.types.infer(values[index])
                else:
                    var_type = None

                variables.append(Variable(name=name, docs=list(docs), type=var_type))

        return variables

    def _check_value_count(
        self,
        spec: tree_sitter.Node,
        names: List[tree_sitter.Node],
        values: List[tree_sitter.Node]
    ) -> None:
        if not values or len(values) == len(names):
            return
        if len(values) == 1 and self.types.yields_many(values[0]):
            return
        raise StructuralError(
            f"amount of names ({len(names)}) and values ({len(values)}) differ",
            self.view.position(spec)
        )

    # Types

    def _walk_types(self, declaration: tree_sitter.Node, file: File) -> None:
        for spec in self._specs(declaration, "type_spec", "type_alias"):
            name = self.view.text(spec.child_by_field_name("name"))
            type_node = spec.child_by_field_name("type")
            if type_node is None:
                raise StructuralError(f"type {name} has no underlying type", self.view.position(spec))

            if type_node.type == "interface_type":
                ignored = self.options.ignore_interfaces
            elif type_node.type == "struct_type":
                ignored = self.options.ignore_structs
            else:
                ignored = self.options.ignore_types
            if ignored:
                continue

            if spec.child_by_field_name("type_parameters") is not None:
                raise UnsupportedTypeExpressionError(
                    f"generic type {name} is not supported",
                    self.view.position(spec)
                )
            docs = self.view.spec_docs(spec, declaration)

            if type_node.type == "interface_type":
                methods, embedded = self.types.interface_elements(type_node)
                file.interfaces.append(
                    Interface(name=name, docs=docs, methods=methods, embedded=embedded)
                )
            elif type_node.type == "struct_type":
                file.structs.append(
                    Struct(name=name, docs=docs, fields=self._struct_fields(type_node))
                )
            else:
                file.types.append(FileType(
                    name=name,
                    docs=docs,
                    type=self.types.resolve(type_node),
                    is_alias=spec.type == "type_alias"
                ))

    def _struct_fields(self, struct_type: tree_sitter.Node) -> List[StructField]:
        fields: List[StructField] = []
        field_list = self.view.find_child_by_type(struct_type, "field_declaration_list")

        for declaration in self.view.elements(field_list):
            if declaration.type != "field_declaration":
                raise StructuralError(
                    f"unexpected {declaration.type} in struct",
                    self.view.position(declaration)
                )

            names = [self.view.text(n) for n in declaration.children_by_field_name("name")]
            field_type = self.types.resolve(declaration.child_by_field_name("type"))
            embedded = not names
            if embedded and self.view.find_child_by_type(declaration, "*") is not None:
                field_type = PointerType(next=field_type)

            tag_node = declaration.child_by_field_name("tag")
            fields.extend(expand_names(
                StructField,
                names,
                field_type,
                self.view.docs(declaration),
                tags=self._tags(tag_node),
                raw_tags=self.view.text(tag_node) if tag_node is not None else "",
                embedded=embedded
            ))

        return fields

    def _tags(self, tag_node: Optional[tree_sitter.Node]) -> Dict[str, StructTag]:
        if tag_node is None:
            return {}
        try:
            return self.tags.parse(self.view.string_value(tag_node))
        except StructTagSyntaxError as e:
            logger.warning(f"Ignoring malformed struct tag at {self.view.position(tag_node)}: {e}")
            return {}

    # Functions and methods

    def _walk_function(self, declaration: tree_sitter.Node, file: File) -> None:
        if self.options.ignore_functions:
            return
        file.functions.append(self._function(declaration))

    def _walk_method(self, declaration: tree_sitter.Node, file: File) -> None:
        if self.options.ignore_methods:
            return

        function = self._function(declaration)
        receivers = self.types.parameters(declaration.child_by_field_name("receiver"))
        if not receivers:
            raise ReceiverNotFoundError(
                f"receiver not found for method {function.name}",
                self.view.position(declaration)
            )

        file.methods.append(Method(
            name=function.name,
            docs=function.docs,
            args=function.args,
            results=function.results,
            receiver=receivers[0]
        ))

    def _function(self, declaration: tree_sitter.Node) -> Function:
        name = self.view.text(declaration.child_by_field_name("name"))
        if declaration.child_by_field_name("type_parameters") is not None:
            raise UnsupportedTypeExpressionError(
                f"generic function {name} is not supported",
                self.view.position(declaration)
            )
        return Function(
            name=name,
            docs=self.view.docs(declaration),
            args=self.types.parameters(declaration.child_by_field_name("parameters")),
            results=self.types.results(declaration.child_by_field_name("result"))
        )

    def _specs(self, declaration: tree_sitter.Node, *spec_types: str) -> List[tree_sitter.Node]:
        """Specs of a declaration, grouped or not"""
        specs = []
        for child in self.view.elements(declaration):
            if child.type in spec_types:
                specs.append(child)
            elif child.type.endswith("_spec_list"):
                specs.extend(c for c in self.view.elements(child) if c.type in spec_types)
        return specs
