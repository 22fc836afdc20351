"""
Parser registry for parser discovery and batch parsing.

Maps file extensions to parser classes and runs a parser over many files
in parallel, one fresh parser instance per task.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from .base import ParseResult, ParserProtocol, UnsupportedLanguageError

logger = logging.getLogger(__name__)


class ParserRegistry:
    """
    Registry for language parsers.

    Cached instances from get_parser are for single-threaded use;
    parse_files_parallel creates its own instance per file.
    """

    def __init__(self):
        self._parsers: Dict[str, Type[ParserProtocol]] = {}
        self._extension_map: Dict[str, str] = {}
        self._parser_instances: Dict[str, ParserProtocol] = {}
        self._lock = threading.RLock()

    def register(
        self,
        language: str,
        parser_class: Type[ParserProtocol],
        extensions: List[str],
        override: bool = False
    ) -> None:
        """
        Register a parser for a language.

        Args:
            language: Language name (e.g., 'go')
            parser_class: Parser class that implements ParserProtocol
            extensions: List of file extensions (e.g., ['.go'])
            override: Whether to override existing registration
        """
        with self._lock:
            if language in self._parsers and not override:
                raise ValueError(f"Parser for {language} already registered. Use override=True to replace.")

            self._parsers[language] = parser_class

            for ext in extensions:
                ext_lower = ext.lower()
                if ext_lower in self._extension_map and self._extension_map[ext_lower] != language:
                    existing_lang = self._extension_map[ext_lower]
                    logger.warning(f"Extension {ext} already mapped to {existing_lang}, overriding with {language}")
                self._extension_map[ext_lower] = language

            self._parser_instances.pop(language, None)
            logger.debug(f"Registered {language} parser with extensions: {extensions}")

    def unregister(self, language: str) -> bool:
        """
        Unregister a parser.

        Returns:
            True if parser was unregistered, False if not found
        """
        with self._lock:
            if language not in self._parsers:
                return False

            del self._parsers[language]
            for ext in [e for e, lang in self._extension_map.items() if lang == language]:
                del self._extension_map[ext]
            self._parser_instances.pop(language, None)

            logger.debug(f"Unregistered {language} parser")
            return True

    def create_parser(self, language: str, **kwargs: Any) -> ParserProtocol:
        """
        Create a new, uncached parser instance.

        Raises:
            UnsupportedLanguageError: No parser registered for the language
        """
        with self._lock:
            parser_class = self._parsers.get(language)
        if parser_class is None:
            raise UnsupportedLanguageError(f"No parser registered for {language}")
        return parser_class(**kwargs)

    def get_parser(self, language: str) -> Optional[ParserProtocol]:
        """
        Get the cached parser instance for a language.

        Returns:
            Parser instance or None if not available
        """
        with self._lock:
            if language not in self._parsers:
                return None

            if language in self._parser_instances:
                return self._parser_instances[language]

            try:
                instance = self._parsers[language]()
            except Exception as e:
                logger.error(f"Failed to create parser for {language}: {e}")
                return None

            self._parser_instances[language] = instance
            logger.debug(f"Created parser instance for {language}")
            return instance

    def get_language_for_file(self, file_path: Path) -> Optional[str]:
        if not file_path or not file_path.suffix:
            return None
        with self._lock:
            return self._extension_map.get(file_path.suffix.lower())

    def get_parser_for_file(self, file_path: Path) -> Optional[ParserProtocol]:
        language = self.get_language_for_file(file_path)
        if language is None:
            return None
        return self.get_parser(language)

    def get_supported_languages(self) -> List[str]:
        with self._lock:
            return list(self._parsers.keys())

    def get_supported_extensions(self) -> List[str]:
        with self._lock:
            return list(self._extension_map.keys())

    def can_parse(self, file_path: Path) -> bool:
        return self.get_language_for_file(file_path) is not None

    def discover_files(
        self,
        directory: Path,
        recursive: bool = True,
        skip_tests: bool = False,
        follow_symlinks: bool = False
    ) -> List[Path]:
        """
        Discover parseable files in a directory.

        Args:
            directory: Directory to search
            recursive: Whether to search recursively
            skip_tests: Skip Go test files (``*_test.go``)
            follow_symlinks: Whether to follow symbolic links

        Returns:
            Sorted list of files that can be parsed
        """
        if not directory.exists() or not directory.is_dir():
            return []

        supported_extensions = set(self.get_supported_extensions())
        pattern = "**/*" if recursive else "*"
        files = []

        for path in directory.glob(pattern):
            if not path.is_file():
                continue
            if not follow_symlinks and path.is_symlink():
                continue
            if path.suffix.lower() not in supported_extensions:
                continue
            if skip_tests and path.name.endswith("_test.go"):
                continue
            files.append(path)

        return sorted(files)

    def parse_files_parallel(
        self,
        file_paths: Sequence[Path],
        max_workers: Optional[int] = None,
        parser_kwargs: Optional[Dict[str, Any]] = None,
        package_paths: Optional[Dict[Path, str]] = None,
        progress_callback: Optional[Callable[[Path, bool], None]] = None
    ) -> List[ParseResult]:
        """
        Parse multiple files in parallel.

        Args:
            file_paths: Files to parse
            max_workers: Maximum number of worker threads
            parser_kwargs: Constructor arguments for each parser instance
            package_paths: Import path per file, passed to parse_file
            progress_callback: Called with (path, success) for each file

        Returns:
            One result per parseable file, in input order
        """
        if not file_paths:
            return []

        parser_kwargs = parser_kwargs or {}
        package_paths = package_paths or {}

        def parse_single_file(file_path: Path) -> Optional[ParseResult]:
            language = self.get_language_for_file(file_path)
            if language is None:
                logger.warning(f"No parser available for {file_path}")
                if progress_callback:
                    progress_callback(file_path, False)
                return None

            parser = self.create_parser(language, **parser_kwargs)
            package_path = package_paths.get(file_path)
            if package_path is not None:
                result = parser.parse_file(file_path, package_path=package_path)
            else:
                result = parser.parse_file(file_path)

            if progress_callback:
                progress_callback(file_path, result.success)
            return result

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(parse_single_file, path) for path in file_paths]
            results = [future.result() for future in futures]

        return [result for result in results if result is not None]


# Global registry instance
parser_registry = ParserRegistry()


def register_parser(
    language: str,
    extensions: List[str],
    override: bool = False
):
    """
    Decorator for registering parser classes.

    Example:
        @register_parser("go", [".go"])
        class GoDeclParser(TreeSitterBase):
            pass
    """
    def decorator(parser_class: Type[ParserProtocol]):
        parser_registry.register(language, parser_class, extensions, override)
        return parser_class

    return decorator
