"""
Project commands for svcspec CLI.

Commands that operate on a directory of service documents:
build, validate, inspect.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from svcspec.backends import get_backend
from svcspec.backends.interchange import dump_service_spec, write_corpus
from svcspec.core import ir
from svcspec.core.dsl_parser_impl.base import document_key
from svcspec.core.errors import ConfigError, ParseError, SvcSpecError
from svcspec.core.fileset import discover_documents
from svcspec.core.linker import CorpusResult
from svcspec.core.manifest import ProjectManifest, find_manifest
from svcspec.core.parser import compile_files

logger = logging.getLogger(__name__)
console = Console()


# =============================================================================
# Helpers
# =============================================================================


def _load_corpus(
    directory: Path, manifest: Path | None, extra: Path | None = None
) -> tuple[Path, ProjectManifest, CorpusResult]:
    root = directory.resolve()
    if not root.is_dir():
        raise ConfigError(f"Not a directory: {directory}")

    mf = find_manifest(root, manifest)
    files = discover_documents(root, mf)
    if extra is not None and extra.resolve() not in [f.resolve() for f in files]:
        files.append(extra)
    if not files:
        raise ConfigError(f"No documents matching '{mf.compile.pattern}' in {root}")

    logger.info("Processing directory %s (%d documents)", root, len(files))
    return root, mf, compile_files(files, base_key=mf.compile.base)


def _unique_diagnostics(result: CorpusResult) -> list[ir.Diagnostic]:
    """Diagnostics of the whole corpus, inherited copies removed."""
    seen: set[tuple[str, int, str]] = set()
    unique: list[ir.Diagnostic] = []
    for diagnostic in result.diagnostics:
        key = (diagnostic.file, diagnostic.line, diagnostic.message)
        if key not in seen:
            seen.add(key)
            unique.append(diagnostic)
    return unique


def _print_diagnostics(diagnostics: list[ir.Diagnostic], root: Path) -> None:
    for diagnostic in diagnostics:
        typer.echo(diagnostic.format(str(root / diagnostic.file)), err=True)


def _print_human_diagnostics(diagnostics: list[ir.Diagnostic], root: Path, count: int) -> None:
    """Print diagnostics in human-readable format."""
    errors = [d for d in diagnostics if d.severity == ir.DiagnosticSeverity.ERROR]
    warnings = [d for d in diagnostics if d.severity == ir.DiagnosticSeverity.WARNING]

    if errors:
        typer.echo("Validation failed:\n", err=True)
        for d in errors:
            typer.echo(f"ERROR: {d.format(str(root / d.file))}", err=True)

    if warnings:
        typer.echo("Validation warnings:\n", err=True)
        for d in warnings:
            typer.echo(f"WARNING: {d.format(str(root / d.file))}", err=True)

    if not diagnostics:
        typer.echo(f"OK: {count} documents are valid.")


def _print_vscode_diagnostics(diagnostics: list[ir.Diagnostic], root: Path) -> None:
    """
    Print diagnostics in VS Code format: file:line:col: severity: message
    """
    for d in diagnostics:
        typer.echo(f"{root / d.file}:{max(d.line, 1)}:1: {d.severity.value}: {d.message}", err=True)

    if not diagnostics:
        typer.echo("::notice: Validation successful")


def _print_tree(spec: ir.ServiceSpec) -> None:
    tree = Tree(f"[bold]{spec.name or spec.short_id}[/bold] ({spec.short_id})")
    tree.add(f"camel: {spec.camel_name}, short: {spec.short_name}")
    tree.add(f"class identifier: 0x{spec.class_identifier:08x}")
    if spec.extends:
        tree.add(f"extends: {', '.join(spec.extends)}")

    if spec.enums:
        enums = tree.add("enums")
        for enum in spec.enums.values():
            kind = "flags" if enum.is_flags else "enum"
            branch = enums.add(f"{kind} {enum.name} ({ir.canonical_type(enum.storage)})")
            for member, value in enum.members.items():
                branch.add(f"{member} = {value}")

    if spec.errors:
        diagnostics = tree.add("[red]diagnostics[/red]")
        for d in spec.errors:
            diagnostics.add(f"{d.severity.value}: line {d.line}: {d.message}")

    console.print(tree)

    table = Table(title="Packets")
    table.add_column("Kind", style="cyan")
    table.add_column("Name")
    table.add_column("Id", justify="right")
    table.add_column("Fields")
    table.add_column("Flags")
    for packet in spec.packets:
        identifier = packet.identifier_name or f"0x{packet.identifier:x}"
        fields = ", ".join(f"{f.name}: {f.type}" for f in packet.fields)
        flags = [
            name
            for name, on in (
                ("optional", packet.optional),
                ("derived", packet.derived),
                ("packed", packet.packed),
            )
            if on
        ]
        table.add_row(packet.kind.value, packet.name, identifier, fields, " ".join(flags))
    console.print(table)


# =============================================================================
# Commands
# =============================================================================


def build_command(
    directory: Path = typer.Argument(Path("."), help="Directory with service documents"),
    manifest: Path | None = typer.Option(None, "--manifest", "-m", help="Path to svcspec.toml"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory"),
    generator: list[str] | None = typer.Option(
        None, "--generator", "-g", help="Generator to run (repeatable): c, json, yaml"
    ),
) -> None:
    """
    Compile every document in DIRECTORY and write generated files.

    Any diagnostic fails the build and nothing is written.
    """
    try:
        root, mf, result = _load_corpus(directory, manifest)
        diagnostics = _unique_diagnostics(result)
        if diagnostics:
            _print_diagnostics(diagnostics, root)
            raise typer.Exit(code=1)

        output_dir = root / (output or Path(mf.build.output))
        generators = generator or mf.build.generators
        backends = [get_backend(name) for name in generators]
        for backend in backends:
            backend.validate_config(prefix=mf.c.prefix)
            for spec in result.specs:
                backend.generate(spec, output_dir / backend.name, prefix=mf.c.prefix)

        aggregate = write_corpus(
            result.specs, output_dir / mf.build.aggregate, mf.build.interchange_format
        )
        logger.info("Wrote aggregate %s", aggregate)
        typer.echo(f"Built {len(result.specs)} documents into {output_dir}")

    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)
    except SvcSpecError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def validate_command(
    directory: Path = typer.Argument(Path("."), help="Directory with service documents"),
    manifest: Path | None = typer.Option(None, "--manifest", "-m", help="Path to svcspec.toml"),
    format: str = typer.Option(
        "human", "--format", "-f", help="Output format: 'human' or 'vscode'"
    ),
) -> None:
    """
    Compile every document in DIRECTORY and report diagnostics only.
    """
    try:
        root, _mf, result = _load_corpus(directory, manifest)
        diagnostics = _unique_diagnostics(result)

        if format == "vscode":
            _print_vscode_diagnostics(diagnostics, root)
        else:
            _print_human_diagnostics(diagnostics, root, len(result.specs))

        if diagnostics:
            raise typer.Exit(code=1)

    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)
    except SvcSpecError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def inspect_command(
    file: Path = typer.Argument(..., help="Service document to inspect"),
    manifest: Path | None = typer.Option(None, "--manifest", "-m", help="Path to svcspec.toml"),
    format: str = typer.Option("tree", "--format", "-f", help="Output format: 'tree' or 'json'"),
) -> None:
    """
    Compile FILE against the documents next to it and show its IR.
    """
    try:
        if not file.is_file():
            raise ConfigError(f"Document not found: {file}")
        _root, _mf, result = _load_corpus(file.parent, manifest, extra=file)
        spec = result.get(document_key(file.name))
        if spec is None:
            raise ConfigError(f"Document {file.name} was not compiled")

        if format == "json":
            typer.echo(dump_service_spec(spec), nl=False)
        else:
            _print_tree(spec)

    except SvcSpecError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
