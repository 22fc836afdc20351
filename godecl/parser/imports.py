"""
Import table: alias to package-path resolution for one Go source file.
"""

import logging
import re
from typing import Dict, Iterator, List, Optional, Set, Tuple

import tree_sitter

from ..models.entities import Import
from .base import StructuralError, UnresolvedImportError
from .tree_sitter_base import SourceView

logger = logging.getLogger(__name__)

# Go predeclared identifiers; an implicit alias must not shadow them
PREDECLARED_IDENTIFIERS = frozenset({
    "any", "bool", "byte", "comparable", "complex64", "complex128", "error",
    "float32", "float64", "int", "int8", "int16", "int32", "int64", "rune",
    "string", "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
    "true", "false", "iota", "nil",
    "append", "cap", "clear", "close", "complex", "copy", "delete", "imag",
    "len", "make", "max", "min", "new", "panic", "print", "println", "real",
    "recover"
})

RESERVED_ALIAS_PREFIX = "_"

# aliases that may repeat: blank and dot imports
_UNNAMED_ALIASES = {"_", "."}

_GOPKG_VERSION = re.compile(r"(.+)\.v\d+")
_MAJOR_VERSION = re.compile(r"v\d+")


def construct_alias(package: str) -> str:
    """Implicit alias for an import path"""
    alias = package.rstrip("/").rsplit("/", 1)[-1]
    if alias in PREDECLARED_IDENTIFIERS:
        return RESERVED_ALIAS_PREFIX + alias
    return alias


def package_name(package: str) -> str:
    """
    Likely package name of an import path.

    A trailing major-version element (``/v5``) or a gopkg.in version suffix
    (``yaml.v3``) is not part of the name.
    """
    segments = package.rstrip("/").split("/")
    last = segments[-1]
    if _MAJOR_VERSION.fullmatch(last) and len(segments) > 1:
        return segments[-2]
    match = _GOPKG_VERSION.fullmatch(last)
    if match:
        return match.group(1)
    return last


class ImportTable:
    """
    Alias to Import table.

    Several import declarations accumulate into one table. With
    ``allow_any_alias`` an unknown qualifier resolves to None instead of
    raising UnresolvedImportError.
    """

    def __init__(self, view: SourceView, allow_any_alias: bool = False):
        self.view = view
        self.allow_any_alias = allow_any_alias
        self._imports: List[Import] = []
        self._by_alias: Dict[str, Import] = {}
        self._explicit: Set[str] = set()

    def __iter__(self) -> Iterator[Import]:
        return iter(self._imports)

    def __len__(self) -> int:
        return len(self._imports)

    def parse(self, declaration: tree_sitter.Node) -> List[Import]:
        """
        Parse one import declaration and add its specs to the table.

        Args:
            declaration: ``import_declaration`` node

        Returns:
            Imports declared by this declaration, in source order
        """
        parsed = []
        for spec in self._specs(declaration):
            imp = self._parse_spec(spec, declaration)
            self._register(imp, spec)
            parsed.append(imp)

        logger.debug(f"Parsed {len(parsed)} imports at line {self.view.position(declaration)[0]}")
        return parsed

    def resolve(
        self,
        alias: str,
        position: Optional[Tuple[int, int]] = None
    ) -> Optional[Import]:
        """
        Find the import a qualifier refers to.

        Tries the exact alias first, then the package name implied by each
        import path.

        Raises:
            UnresolvedImportError: No import matches and unknown aliases are
                not allowed
        """
        imp = self._by_alias.get(alias)
        if imp is not None:
            return imp

        for imp in self._imports:
            if alias == package_name(imp.package):
                return imp

        if self.allow_any_alias:
            logger.debug(f"Leaving package qualifier {alias!r} unresolved")
            return None

        raise UnresolvedImportError(f"could not resolve package: {alias}", position)

    def _specs(self, declaration: tree_sitter.Node) -> List[tree_sitter.Node]:
        specs = []
        for child in self.view.elements(declaration):
            if child.type == "import_spec":
                specs.append(child)
            elif child.type == "import_spec_list":
                specs.extend(c for c in self.view.elements(child) if c.type == "import_spec")
        return specs

    def _parse_spec(self, spec: tree_sitter.Node, declaration: tree_sitter.Node) -> Import:
        path_node = spec.child_by_field_name("path")
        if path_node is None:
            raise StructuralError("import without a package path", self.view.position(spec))

        package = self.view.string_value(path_node)
        if not package:
            raise StructuralError("import with an empty package path", self.view.position(spec))

        name_node = spec.child_by_field_name("name")
        alias = self.view.text(name_node) if name_node is not None else construct_alias(package)

        return Import(
            alias=alias,
            package=package,
            docs=self.view.spec_docs(spec, declaration)
        )

    def _register(self, imp: Import, spec: tree_sitter.Node) -> None:
        """
        Index an import by the name source code uses to qualify it.

        Only explicit aliases must be unique. An implicit import is indexed
        under its likely package name and never displaces an earlier entry.
        """
        if imp.alias in _UNNAMED_ALIASES:
            self._imports.append(imp)
            return

        if spec.child_by_field_name("name") is not None:
            if imp.alias in self._explicit:
                raise StructuralError(
                    f"not unique package alias: {imp.alias}",
                    self.view.position(spec)
                )
            self._explicit.add(imp.alias)
            self._by_alias[imp.alias] = imp
        else:
            name = package_name(imp.package)
            if name in PREDECLARED_IDENTIFIERS:
                name = RESERVED_ALIAS_PREFIX + name
            self._by_alias.setdefault(name, imp)
        self._imports.append(imp)
