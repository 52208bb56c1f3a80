"""
rhinogen CLI.

Commands:
- generate: Compile a Rhino context into a Python intents module
- validate: Check a context and show the intents and slots it declares
"""

from __future__ import annotations

import logging
import platform
from typing import Annotated

import typer

from rhinogen._version import get_version
from rhinogen.cli.generate import generate_command, validate_command

app = typer.Typer(
    help="Generate typed Python intents from Picovoice Rhino contexts.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"rhinogen version {get_version()}")
        typer.echo(f"Python {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log pipeline steps to stderr.")
    ] = False,
) -> None:
    """Generate typed Python intents from Picovoice Rhino contexts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command("generate")(generate_command)
app.command("validate")(validate_command)


def main() -> None:
    app()


__all__ = ["app", "main", "version_callback"]
