"""
Go declaration parser using Tree-sitter.

Builds the normalized File model for one Go source file: imports, constants,
variables, interfaces, structs, functions, methods and named types, with
every method linked to the receiver type it belongs to.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

import tree_sitter

from ..models.config import ParseOptions
from ..models.entities import File
from .base import ParseError, ParseResult, StructuralError
from .linker import MethodLinker
from .registry import register_parser
from .tree_sitter_base import SourceView, TreeSitterBase
from .walker import DeclarationWalker

logger = logging.getLogger(__name__)


@register_parser("go", [".go"])
class GoDeclParser(TreeSitterBase):
    """
    Go parser producing declaration models.

    Features:
    - Imports with implicit aliases and version-suffix resolution
    - Constants and variables, with types inferred from literal initializers
    - Interfaces with method signatures and embedded types
    - Structs with parsed field tags and embedded fields
    - Functions and methods linked to their receiver types
    - Defined types and aliases

    A parser instance owns a Tree-sitter parser and must not be shared
    between threads; the registry creates one per task for batch parsing.
    """

    SUPPORTED_FEATURES = [
        "imports", "constants", "variables", "interfaces", "structs",
        "functions", "methods", "types", "struct_tags", "docs"
    ]

    def __init__(self, options: Optional[ParseOptions] = None):
        super().__init__("go")
        self.__version__ = "1.0.0"
        self.options = options or ParseOptions()
        logger.debug("Go declaration parser initialized")

    def get_supported_extensions(self) -> List[str]:
        return [".go"]

    def can_parse(self, file_path: Path) -> bool:
        return file_path.suffix.lower() in self.get_supported_extensions()

    def parse_source(
        self,
        source: Union[bytes, str],
        package_path: str = "",
        options: Optional[ParseOptions] = None
    ) -> File:
        """
        Parse Go source text into a File.

        Args:
            source: Source text; str is encoded as UTF-8
            package_path: Import path of the file's package, may be empty
            options: Overrides the parser's options for this call

        Returns:
            The linked declaration model

        Raises:
            ParseError: The source is malformed or uses unsupported syntax
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        tree = self.parse_bytes(source)
        return self.parse_tree(tree, source, package_path, options)

    def parse_tree(
        self,
        tree: tree_sitter.Tree,
        source: bytes,
        package_path: str = "",
        options: Optional[ParseOptions] = None
    ) -> File:
        """
        Build the File for an already parsed syntax tree.

        Args:
            tree: Tree-sitter Go tree of ``source``
            source: Bytes the tree was parsed from
            package_path: Import path of the file's package, may be empty
            options: Overrides the parser's options for this call

        Raises:
            ParseError: The tree is malformed or uses unsupported syntax
        """
        file, _ = self._build(tree, source, package_path, options)
        return file

    def parse_file(self, file_path: Path, package_path: str = "") -> ParseResult:
        """
        Parse a Go file, reporting failures in the result instead of raising.

        Args:
            file_path: Path to a ``.go`` file
            package_path: Import path of the file's package, may be empty

        Returns:
            ParseResult with the File, or with the error that prevented it
        """
        self._start_timing()

        is_valid, error = self.validate_file(file_path)
        if not is_valid:
            return self._create_error_result(file_path, ValueError(error or "Validation failed"))

        file_hash, file_size = "", 0
        try:
            content, file_hash, file_size = self._read_file_safe(file_path)
            tree = self.parse_bytes(content)
            file, warnings = self._build(tree, content, package_path, self.options)
        except (ParseError, ValueError, OSError) as e:
            logger.warning(f"Failed to parse {file_path}: {e}")
            return self._create_error_result(file_path, e, file_hash, file_size)

        result = ParseResult(
            file_path=file_path,
            language=self.language,
            file=file,
            parse_time=self._get_elapsed_time(),
            file_size=file_size,
            file_hash=file_hash,
            warnings=warnings
        )

        logger.debug(
            f"Parsed {file_path}: {sum(result.declaration_counts.values())} declarations "
            f"in {result.parse_time * 1000:.1f}ms"
        )
        return result

    def _build(
        self,
        tree: tree_sitter.Tree,
        source: bytes,
        package_path: str,
        options: Optional[ParseOptions]
    ) -> Tuple[File, List[str]]:
        options = options or self.options
        root = tree.root_node
        if root is None or root.type != "source_file":
            raise StructuralError("syntax tree is not a Go source file")
        self._ensure_well_formed(tree, source)

        view = SourceView(source, ignore_comments=options.ignore_comments)
        file = DeclarationWalker(view, options, package_path).walk(root)

        linker = MethodLinker()
        linker.link(file)
        return file, linker.warnings
