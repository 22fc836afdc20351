"""
Main CLI entry point for godecl.

Provides the `godecl` command-line interface: `parse` prints the declaration
model of one Go file as JSON, `scan` summarizes every Go file in a directory.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from config import ConfigurationError, ConfigurationLoader
from godecl import __version__
from godecl.models.config import GodeclSettings, ParseOptions
from godecl.parser import GoDeclParser, ParseError, parser_registry

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logging(level: str) -> None:
    """Route log records through rich on stderr"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True
    )


def _load_settings() -> GodeclSettings:
    try:
        return GodeclSettings()
    except ValidationError as e:
        err_console.print(f"[red]❌ Invalid GODECL_ environment settings: {e}[/red]")
        sys.exit(2)


def _load_options(config_path: Optional[Path], **flags: bool) -> ParseOptions:
    try:
        options = ConfigurationLoader().load_options(config_path)
    except ConfigurationError as e:
        err_console.print(f"[red]❌ {e}[/red]")
        sys.exit(2)
    return options.with_overrides(**{name: True for name, value in flags.items() if value})


def option_flags(func):
    """Shared --ignore-* and --allow-any-import-alias switches"""
    flags = [
        ("--ignore-comments", "Leave docs empty"),
        ("--ignore-structs", "Skip struct declarations"),
        ("--ignore-interfaces", "Skip interface declarations"),
        ("--ignore-functions", "Skip function declarations"),
        ("--ignore-methods", "Skip method declarations"),
        ("--ignore-types", "Skip other type declarations"),
        ("--ignore-variables", "Skip var declarations"),
        ("--ignore-constants", "Skip const declarations"),
        ("--allow-any-import-alias", "Leave unknown package qualifiers unresolved"),
    ]
    for flag, help_text in reversed(flags):
        func = click.option(flag, is_flag=True, default=False, help=help_text)(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="godecl")
@click.option(
    '--log-level',
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help='Logging level (default: GODECL_LOG_LEVEL or WARNING)'
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]):
    """
    godecl - Go declaration extractor.

    Turns Go source files into a normalized model of their imports,
    constants, variables, types, functions and methods.
    """
    settings = _load_settings()
    setup_logging(log_level or settings.log_level)
    ctx.obj = settings


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--package-path', default=None, help="Import path of the file's package")
@click.option(
    '--config', 'config_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='JSON file with parse options (default: ./.godecl.json if present)'
)
@option_flags
@click.option('--indent', type=click.IntRange(min=0), default=2, show_default=True, help='JSON indentation')
@click.pass_obj
def parse(
    settings: GodeclSettings,
    file: Path,
    package_path: Optional[str],
    config_path: Optional[Path],
    indent: int,
    **flags: bool
):
    """Print the declaration model of a Go FILE as JSON."""
    options = _load_options(config_path, **flags)
    parser = GoDeclParser(options)

    try:
        model = parser.parse_source(file.read_bytes(), package_path or settings.package_path)
    except ParseError as e:
        err_console.print(f"[red]❌ {file}: {e}[/red]")
        sys.exit(1)

    click.echo(model.to_json(indent=indent or None))


@cli.command()
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--recursive/--no-recursive', default=True, show_default=True, help='Descend into subdirectories')
@click.option('--skip-tests', is_flag=True, help='Skip *_test.go files')
@click.option('--workers', type=click.IntRange(min=1), default=None, help='Parallel workers (default: GODECL_MAX_WORKERS)')
@click.option('--module-path', default=None, help='Module import path of DIRECTORY, used to derive package paths')
@click.option(
    '--config', 'config_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='JSON file with parse options (default: ./.godecl.json if present)'
)
@option_flags
@click.pass_obj
def scan(
    settings: GodeclSettings,
    directory: Path,
    recursive: bool,
    skip_tests: bool,
    workers: Optional[int],
    module_path: Optional[str],
    config_path: Optional[Path],
    **flags: bool
):
    """Parse every Go file in DIRECTORY and summarize the declarations."""
    options = _load_options(config_path, **flags)

    files = parser_registry.discover_files(directory, recursive=recursive, skip_tests=skip_tests)
    if not files:
        console.print(f"[yellow]⚠️  No Go files found in {directory}[/yellow]")
        return

    logger.info(f"Scanning {len(files)} Go files in {directory}")

    package_paths: Dict[Path, str] = {}
    if module_path:
        package_paths = {path: package_path_for(module_path, directory, path) for path in files}

    results = parser_registry.parse_files_parallel(
        files,
        max_workers=workers or settings.max_workers,
        parser_kwargs={"options": options},
        package_paths=package_paths
    )

    table = Table(title=f"Go declarations in {directory}")
    table.add_column("File", style="cyan", no_wrap=True)
    table.add_column("Package", style="white")
    for column in ("Imports", "Structs", "Interfaces", "Functions", "Methods", "Types"):
        table.add_column(column, justify="right")
    table.add_column("Status", style="white")

    failed = 0
    for result in results:
        relative = str(result.file_path.relative_to(directory))
        if not result.success:
            failed += 1
            message = result.errors[0]["message"] if result.errors else "unknown error"
            table.add_row(relative, "", "", "", "", "", "", "", f"[red]❌ {message}[/red]")
            continue

        counts = result.declaration_counts
        status = "[green]✅[/green]"
        if result.warnings:
            status = f"[yellow]⚠️  {len(result.warnings)} unlinked[/yellow]"
        table.add_row(
            relative,
            result.file.name,
            str(counts["imports"]),
            str(counts["structs"]),
            str(counts["interfaces"]),
            str(counts["functions"]),
            str(counts["methods"]),
            str(counts["types"]),
            status
        )

    console.print(table)
    console.print(f"Parsed {len(results) - failed}/{len(results)} files")

    if failed:
        sys.exit(1)


def package_path_for(module_path: str, root: Path, file_path: Path) -> str:
    """Import path of the package holding ``file_path`` inside a module rooted at ``root``"""
    relative = file_path.parent.relative_to(root).as_posix()
    module_path = module_path.rstrip("/")
    return module_path if relative == "." else f"{module_path}/{relative}"


if __name__ == "__main__":
    cli()
