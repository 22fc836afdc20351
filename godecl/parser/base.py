"""
Abstract base classes and protocols for declaration parsers.

Defines the interface a language parser implements, the per-file parse
result, and the error taxonomy raised while building declaration models.
"""

import hashlib
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..models.entities import File


@dataclass
class ParseResult:
    """
    Result of parsing one file.

    ``file`` is None when the parse failed; the failure is then described
    in ``errors``. Warnings never make a parse fail.
    """
    # Source information
    file_path: Optional[Path]
    language: str

    # Extracted data
    file: Optional[File] = None

    # Performance metrics
    parse_time: float = 0.0  # Seconds
    file_size: int = 0  # Bytes
    file_hash: str = ""

    # Error tracking
    errors: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    created_at: datetime = field(default_factory=datetime.now)

    @property
    def success(self) -> bool:
        """Check if parsing produced a declaration model"""
        return self.file is not None and not self.errors

    @property
    def declaration_counts(self) -> Dict[str, int]:
        """Number of declarations per category"""
        if self.file is None:
            return {}
        return {
            "imports": len(self.file.imports),
            "constants": len(self.file.constants),
            "vars": len(self.file.vars),
            "interfaces": len(self.file.interfaces),
            "structs": len(self.file.structs),
            "functions": len(self.file.functions),
            "methods": len(self.file.methods),
            "types": len(self.file.types)
        }

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_error(self, error: Exception) -> None:
        self.errors.append({
            "type": type(error).__name__,
            "message": str(error),
            "position": getattr(error, "position", None)
        })

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for reporting"""
        return {
            "file_path": str(self.file_path) if self.file_path else None,
            "language": self.language,
            "success": self.success,
            "counts": self.declaration_counts,
            "parse_time_ms": self.parse_time * 1000,
            "errors": self.errors,
            "warnings": self.warnings,
            "created_at": self.created_at.isoformat()
        }


class ParserProtocol(ABC):
    """
    Abstract protocol for declaration parsers.

    All language-specific parsers implement this interface so the registry
    and the batch runner can treat them alike.
    """

    @abstractmethod
    def get_language_name(self) -> str:
        """Return the language name this parser handles"""
        pass

    @abstractmethod
    def get_supported_extensions(self) -> List[str]:
        """Return list of file extensions this parser supports"""
        pass

    @abstractmethod
    def can_parse(self, file_path: Path) -> bool:
        pass

    @abstractmethod
    def parse_file(self, file_path: Path) -> ParseResult:
        """
        Parse a file into a declaration model.

        Args:
            file_path: Path to file to parse

        Returns:
            ParseResult carrying the File or the errors that prevented it
        """
        pass

    def get_parser_info(self) -> Dict[str, Any]:
        """Get parser metadata and capabilities"""
        return {
            "language": self.get_language_name(),
            "extensions": self.get_supported_extensions(),
            "version": getattr(self, "__version__", "1.0.0"),
            "features": getattr(self, "SUPPORTED_FEATURES", [])
        }

    def validate_file(self, file_path: Path) -> Tuple[bool, Optional[str]]:
        """
        Validate file before parsing.

        Returns:
            (is_valid, error_message)
        """
        if not file_path.exists():
            return False, f"File does not exist: {file_path}"

        if not file_path.is_file():
            return False, f"Path is not a file: {file_path}"

        if not self.can_parse(file_path):
            return False, f"Parser cannot handle file: {file_path}"

        max_size = getattr(self, "MAX_FILE_SIZE", 10 * 1024 * 1024)
        if file_path.stat().st_size > max_size:
            return False, f"File too large: {file_path.stat().st_size} bytes"

        return True, None


class BaseParser(ParserProtocol):
    """
    Base implementation with common functionality.

    Provides timing, safe file reading and error results.
    """

    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

    def __init__(self, language: str):
        self.language = language
        self._parser_start_time = 0.0

    def get_language_name(self) -> str:
        return self.language

    def _start_timing(self) -> None:
        self._parser_start_time = time.perf_counter()

    def _get_elapsed_time(self) -> float:
        return time.perf_counter() - self._parser_start_time

    def _read_file_safe(self, file_path: Path) -> Tuple[bytes, str, int]:
        """
        Read file bytes with a size guard.

        Returns:
            (content, file_hash, file_size)
        """
        try:
            file_size = file_path.stat().st_size
        except OSError as e:
            raise ValueError(f"Cannot read file stats: {e}")

        if file_size > self.MAX_FILE_SIZE:
            raise ValueError(f"File too large: {file_size} bytes")

        content = file_path.read_bytes()
        file_hash = hashlib.sha256(content).hexdigest()[:16]
        return content, file_hash, len(content)

    def _create_error_result(
        self,
        file_path: Optional[Path],
        error: Exception,
        file_hash: str = "",
        file_size: int = 0
    ) -> ParseResult:
        """Create ParseResult for error cases"""
        result = ParseResult(
            file_path=file_path,
            language=self.language,
            parse_time=self._get_elapsed_time(),
            file_size=file_size,
            file_hash=file_hash
        )
        result.add_error(error)
        return result


# Error types for parser exceptions
class ParseError(Exception):
    """
    Base class for parsing errors.

    ``position`` is the 1-based (line, column) of the offending node when
    known; it only serves diagnostics.
    """

    def __init__(self, message: str, position: Optional[Tuple[int, int]] = None):
        if position is not None:
            message = f"{position[0]}:{position[1]}: {message}"
        super().__init__(message)
        self.position = position


class StructuralError(ParseError):
    """Raised when a declaration has a malformed shape"""
    pass


class UnresolvedImportError(ParseError):
    """Raised when a package qualifier matches no import"""
    pass


class UnsupportedTypeExpressionError(ParseError):
    """Raised when a type expression is outside the supported grammar"""
    pass


class ReceiverNotFoundError(ParseError):
    """Raised when a method declaration has no receiver"""
    pass


class UnsupportedLanguageError(ParseError):
    """Raised when language is not supported"""
    pass


class TreeSitterError(ParseError):
    """Raised when Tree-sitter cannot be set up or fails to parse"""
    pass
