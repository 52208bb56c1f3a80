"""
Generate and validate commands.

This is the only part of rhinogen that touches the file system: it reads the
context document, runs the pipeline and writes the generated module.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from rhinogen.compiler import build_grammar_from_text, compile_context
from rhinogen.core import ir
from rhinogen.core.errors import RhinogenError
from rhinogen.core.lint import lint_grammar
from rhinogen.core.manifest import GeneratorManifest, find_manifest, load_manifest

logger = logging.getLogger(__name__)

console = Console()

BANNER = "# This file is generated by rhinogen. Run `rhinogen generate` to update it.\n"


# =============================================================================
# Helper Functions
# =============================================================================


def _fail(message: str) -> typer.Exit:
    typer.echo(f"ERROR: {message}", err=True)
    return typer.Exit(code=1)


def _load_manifest(manifest: Path | None) -> GeneratorManifest:
    """Load an explicit manifest, else rhinogen.toml from the working directory."""
    path = manifest or find_manifest(Path.cwd())
    if path is None:
        return GeneratorManifest()
    logger.debug(f"Using manifest {path}")
    return load_manifest(path)


def _read_context(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise _fail(f"Cannot read context file {path}: {e}") from e


def write_generated(path: Path, content: str) -> bool:
    """
    Write generated source, replacing any previous content.

    Returns:
        True if the file changed
    """
    if path.exists() and path.read_text(encoding="utf-8") == content:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return True


def _print_grammar(grammar: ir.Grammar) -> None:
    intents = Table(title="Intents")
    intents.add_column("Intent", style="cyan")
    intents.add_column("Variable")
    intents.add_column("Slot")
    intents.add_column("Required")
    for intent in grammar.intents:
        if not intent.variables:
            intents.add_row(intent.name, "-", "-", "-")
        for i, variable in enumerate(intent.variables):
            intents.add_row(
                intent.name if i == 0 else "",
                variable.name,
                variable.slot.name,
                "yes" if variable.required else "no",
            )
    console.print(intents)

    if grammar.slots:
        slots = Table(title="Slots")
        slots.add_column("Slot", style="cyan")
        slots.add_column("Elements")
        for slot in grammar.slots:
            slots.add_row(slot.name, ", ".join(slot.elements))
        console.print(slots)


# =============================================================================
# Commands
# =============================================================================


def generate_command(
    context: Annotated[
        Path | None,
        typer.Argument(help="Rhino context YAML. Defaults to [context].path of the manifest."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="File to write. Defaults to [output].path of the manifest, else stdout.",
        ),
    ] = None,
    manifest: Annotated[
        Path | None,
        typer.Option("--manifest", "-m", help="Path to rhinogen.toml."),
    ] = None,
    check: Annotated[
        bool,
        typer.Option("--check", help="Exit with 1 if the output file is missing or stale."),
    ] = False,
) -> None:
    """Compile a Rhino context into a Python intents module."""
    try:
        config = _load_manifest(manifest)
    except RhinogenError as e:
        raise _fail(str(e)) from e

    context_path = context or config.context.path
    output_path = output or config.output.path
    if context_path is None:
        raise _fail("No context file given and no [context].path in rhinogen.toml")

    text = _read_context(context_path)
    try:
        source = compile_context(text, source=str(context_path), project=config.name)
    except RhinogenError as e:
        raise _fail(str(e)) from e

    if config.output.banner:
        source = BANNER + source

    if check:
        if output_path is None:
            raise _fail("--check needs an output file")
        current = output_path.read_text(encoding="utf-8") if output_path.exists() else None
        if current != source:
            typer.echo(f"{output_path} is out of date with {context_path}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"{output_path} is up to date")
        return

    if output_path is None:
        typer.echo(source, nl=False)
        return

    if write_generated(output_path, source):
        typer.echo(f"Generated: {output_path}")
    else:
        typer.echo(f"Unchanged: {output_path}")


def validate_command(
    context: Annotated[Path, typer.Argument(help="Rhino context YAML to validate.")],
    strict: Annotated[
        bool, typer.Option("--strict", help="Treat warnings as errors.")
    ] = False,
) -> None:
    """Check a Rhino context and show its intents and slots."""
    text = _read_context(context)
    try:
        grammar = build_grammar_from_text(text, source=str(context))
    except RhinogenError as e:
        raise _fail(str(e)) from e

    _print_grammar(grammar)

    warnings = lint_grammar(grammar)
    for warning in warnings:
        typer.echo(f"WARNING: {warning}")

    if warnings and strict:
        raise typer.Exit(code=1)
    typer.echo("OK: context is valid.")
