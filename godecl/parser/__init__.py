"""
Tree-sitter based declaration parsing for Go source files.

Key Components:
- GoDeclParser: builds a File model from Go source, trees or files
- DeclarationWalker: walks top-level declarations in source order
- TypeResolver: turns type expressions into GoType chains
- ImportTable: resolves package qualifiers to imports
- MethodLinker: attaches methods to their receiver types
- ParserRegistry: extension lookup and parallel batch parsing

Example:
    from godecl.parser import GoDeclParser

    parser = GoDeclParser()
    file = parser.parse_source(b"package demo\\n\\nfunc Hello() string { return \\"hi\\" }\\n")
    print(file.functions[0].signature())
"""

from .base import (
    ParseError, ParseResult, ParserProtocol, ReceiverNotFoundError, StructuralError,
    TreeSitterError, UnresolvedImportError, UnsupportedLanguageError,
    UnsupportedTypeExpressionError
)
from .registry import ParserRegistry, parser_registry, register_parser
from .imports import ImportTable
from .type_resolver import TypeResolver
from .struct_tags import StructTagParser, StructTagSyntaxError
from .walker import DeclarationWalker
from .linker import MethodLinker
from .go_parser import GoDeclParser

__all__ = [
    "ParseError",
    "StructuralError",
    "UnresolvedImportError",
    "UnsupportedTypeExpressionError",
    "ReceiverNotFoundError",
    "UnsupportedLanguageError",
    "TreeSitterError",
    "ParseResult",
    "ParserProtocol",
    "ParserRegistry",
    "parser_registry",
    "register_parser",
    "ImportTable",
    "TypeResolver",
    "StructTagParser",
    "StructTagSyntaxError",
    "DeclarationWalker",
    "MethodLinker",
    "GoDeclParser"
]

__tree_sitter_version__ = ">=0.23.0"
