"""
Base Tree-sitter functionality for declaration parsers.

Provides language loading, syntax error discovery, and SourceView, the
text/position/comment accessor the declaration components share.
"""

import json
import logging
from abc import ABC
from typing import Any, Dict, List, Optional, Tuple

import tree_sitter

from .base import BaseParser, StructuralError, TreeSitterError

logger = logging.getLogger(__name__)


class TreeSitterBase(BaseParser, ABC):
    """
    Base class for Tree-sitter parsers with common functionality.

    Each instance owns its own ``tree_sitter.Parser``; instances are not
    shared between threads.
    """

    LANGUAGE_MODULES = {
        "go": "tree_sitter_go"
    }

    MAX_SYNTAX_ERRORS = 50

    def __init__(self, language: str):
        super().__init__(language)

        self.parser = tree_sitter.Parser()

        try:
            self._setup_language()
        except TreeSitterError:
            raise
        except Exception as e:
            logger.error(f"Failed to setup {language} parser: {e}")
            raise TreeSitterError(f"Cannot initialize {language} parser: {e}") from e

    def _setup_language(self) -> None:
        """Initialize Tree-sitter language for this parser"""
        if self.language not in self.LANGUAGE_MODULES:
            raise TreeSitterError(f"Unsupported language: {self.language}")

        module_name = self.LANGUAGE_MODULES[self.language]

        try:
            language_module = __import__(module_name)
        except ImportError as e:
            raise TreeSitterError(
                f"Tree-sitter language module '{module_name}' not installed. "
                f"Install with: pip install {module_name.replace('_', '-')}"
            ) from e

        self.tree_sitter_language = tree_sitter.Language(language_module.language())
        self.parser.language = self.tree_sitter_language
        logger.debug(f"Successfully loaded {self.language} Tree-sitter language")

    def parse_bytes(self, source: bytes) -> tree_sitter.Tree:
        """Parse raw source into a syntax tree"""
        tree = self.parser.parse(source)
        if tree is None:
            raise TreeSitterError("Tree-sitter parsing failed")
        return tree

    def _extract_syntax_errors(
        self,
        tree: tree_sitter.Tree,
        source: bytes
    ) -> List[Dict[str, Any]]:
        """
        Collect ERROR and missing nodes.

        Returns:
            List of syntax error dictionaries, at most MAX_SYNTAX_ERRORS long
        """
        errors: List[Dict[str, Any]] = []
        if tree.root_node is None or not tree.root_node.has_error:
            return errors

        stack = [tree.root_node]
        while stack and len(errors) < self.MAX_SYNTAX_ERRORS:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                text = source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
                errors.append({
                    "type": "SYNTAX_ERROR" if node.type == "ERROR" else "MISSING_NODE",
                    "line": node.start_point[0] + 1,
                    "column": node.start_point[1] + 1,
                    "text": text[:50],
                    "parent_type": node.parent.type if node.parent else None
                })
                continue
            if node.has_error:
                stack.extend(reversed(node.children))

        return errors

    def _ensure_well_formed(self, tree: tree_sitter.Tree, source: bytes) -> None:
        """Reject trees the declaration walker cannot trust"""
        errors = self._extract_syntax_errors(tree, source)
        if errors:
            first = errors[0]
            kind = "syntax error" if first["type"] == "SYNTAX_ERROR" else f"missing {first['parent_type']} element"
            raise StructuralError(
                f"{kind} near {first['text']!r} ({len(errors)} error(s) in file)",
                (first["line"], first["column"])
            )


class SourceView:
    """
    Text, position and comment access over one parsed source buffer.

    Doc comments are the comment group ending on the line directly above a
    node; a comment sharing a line with the element before it is that
    element's trailing comment and never a doc.
    """

    def __init__(self, source: bytes, ignore_comments: bool = False):
        self.source = source
        self.ignore_comments = ignore_comments

    def text(self, node: tree_sitter.Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def position(node: tree_sitter.Node) -> Tuple[int, int]:
        """1-based (line, column) for diagnostics"""
        return node.start_point[0] + 1, node.start_point[1] + 1

    def docs(self, node: tree_sitter.Node) -> List[str]:
        if self.ignore_comments:
            return []

        comments: List[str] = []
        expected_row = node.start_point[0]
        sibling = self._previous(node)
        while sibling is not None and sibling.type == "comment":
            if sibling.end_point[0] < expected_row - 1:
                break
            previous = self._previous(sibling)
            if (
                previous is not None
                and previous.type != "comment"
                and previous.end_point[0] == sibling.start_point[0]
            ):
                break
            comments.append(self.text(sibling))
            expected_row = sibling.start_point[0]
            sibling = previous

        comments.reverse()
        return comments

    @staticmethod
    def _previous(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
        # newline terminators end on the following line
        sibling = node.prev_sibling
        while sibling is not None and not sibling.is_named and not sibling.type.strip():
            sibling = sibling.prev_sibling
        return sibling

    def spec_docs(self, spec: tree_sitter.Node, declaration: tree_sitter.Node) -> List[str]:
        """Docs of a spec inside a declaration, falling back to the declaration's"""
        return self.docs(spec) or self.docs(declaration)

    def string_value(self, node: tree_sitter.Node) -> str:
        """Value of a raw or interpreted Go string literal"""
        text = self.text(node)
        if node.type == "raw_string_literal":
            return text[1:-1].replace("\r", "")
        try:
            return json.loads(text)
        except ValueError:
            # escapes JSON does not know (\x, \a, octal) keep their spelling
            return text[1:-1]

    @staticmethod
    def find_child_by_type(node: tree_sitter.Node, child_type: str) -> Optional[tree_sitter.Node]:
        for child in node.children:
            if child.type == child_type:
                return child
        return None

    @staticmethod
    def elements(node: Optional[tree_sitter.Node]) -> List[tree_sitter.Node]:
        """Named children without comments"""
        if node is None:
            return []
        return [child for child in node.named_children if child.type != "comment"]
