"""
The rhinogen pipeline: context text in, module source out.

    document text -> load_document -> build_grammar -> emit_module

Each step is pure; the pipeline never reads or writes files.
"""

from __future__ import annotations

from .codegen import emit_module
from .core import ir
from .core.builder import build_grammar
from .core.loader import load_document


def build_grammar_from_text(text: str, source: str | None = None) -> ir.Grammar:
    """Load and validate a context document."""
    return build_grammar(load_document(text, source=source), source=source)


def compile_context(text: str, source: str | None = None, project: str | None = None) -> str:
    """
    Compile a Rhino context export into the source of an intents module.

    Args:
        text: Context YAML
        source: Document name, used in error messages and the module docstring
        project: Project name for the module docstring

    Returns:
        Python source text

    Raises:
        GrammarError: If the document is not a valid context
    """
    grammar = build_grammar_from_text(text, source=source)
    return emit_module(grammar, project=project)
