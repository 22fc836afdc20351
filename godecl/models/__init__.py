"""
Data models for godecl

Pydantic models for the declaration tree, type variants and configuration.
"""

from .entities import (
    ChanDirection, NameType, PointerType, ArrayType, MapType, ChanType,
    ImportType, InterfaceType, FuncType, EllipsisType, GoType,
    Import, Variable, Function, Method, Interface, StructTag, StructField,
    Struct, FileType, File
)
from .config import ParseOptions, GodeclSettings

__all__ = [
    # Types
    "ChanDirection",
    "NameType",
    "PointerType",
    "ArrayType",
    "MapType",
    "ChanType",
    "ImportType",
    "InterfaceType",
    "FuncType",
    "EllipsisType",
    "GoType",

    # Declarations
    "Import",
    "Variable",
    "Function",
    "Method",
    "Interface",
    "StructTag",
    "StructField",
    "Struct",
    "FileType",
    "File",

    # Configuration
    "ParseOptions",
    "GodeclSettings"
]
