"""
godecl core package

Normalized declaration model for Go source files parsed with Tree-sitter.
"""

__version__ = "1.0.0"

from .models import (
    File, Import, Variable, Function, Method, Interface, Struct, StructField,
    StructTag, FileType, GoType, ParseOptions
)

__all__ = [
    "File",
    "Import",
    "Variable",
    "Function",
    "Method",
    "Interface",
    "Struct",
    "StructField",
    "StructTag",
    "FileType",
    "GoType",
    "ParseOptions"
]
