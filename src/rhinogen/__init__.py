"""
rhinogen - typed Python intents from Picovoice Rhino contexts.

Compiles a Rhino context export (YAML) into a Python module with one dataclass
per intent, one Enum per slot, and a decoder for inference results.
"""

from __future__ import annotations

from ._version import get_version
from .compiler import build_grammar_from_text, compile_context
from .core import ir
from .core.errors import (
    DuplicateVariableInExpression,
    EmptyOrInvalidDocument,
    GrammarError,
    MissingContextRoot,
    NoExpressionsDefined,
    RhinogenError,
    UnknownSlotReference,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "compile_context",
    "build_grammar_from_text",
    "RhinogenError",
    "GrammarError",
    "EmptyOrInvalidDocument",
    "MissingContextRoot",
    "NoExpressionsDefined",
    "UnknownSlotReference",
    "DuplicateVariableInExpression",
]
